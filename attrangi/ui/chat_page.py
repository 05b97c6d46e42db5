"""NiceGUI chat interface with onboarding and phased reply reveal."""

import logging
from collections.abc import Callable

from nicegui import Client, app, ui

from attrangi.config import get_client_config
from attrangi.gateway.client import BackendGateway
from attrangi.models.schemas import (
    TOPIC_VOCABULARY,
    AgeRange,
    Message,
    Phase,
    Role,
    SessionSummary,
    SupportStyle,
    UserRole,
)
from attrangi.onboarding.profile_builder import OnboardingStep
from attrangi.orchestrator.controller import DEFAULT_EXPRESSION, Mode, Orchestrator
from attrangi.reveal.engine import MessageReveal
from attrangi.session.storage import MappingStore
from attrangi.session.store import SessionStore

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    UserRole.STUDENT: "Student",
    UserRole.WORKING_PROFESSIONAL: "Working Professional",
    UserRole.CAREGIVER: "Caregiver",
    UserRole.PATIENT: "Patient",
    UserRole.OTHER: "Other",
}

SUPPORT_OPTIONS = (
    (SupportStyle.LISTEN, "Just Listen", "I'll hear you out and validate your feelings."),
    (SupportStyle.REFLECT, "Reflect", "I'll help you see patterns and clarify thoughts."),
    (SupportStyle.HELP_ME_THINK, "Help Me Think", "We'll brainstorm or untangle a problem."),
    (SupportStyle.ANSWER_DIRECTLY, "Answer Directly", "No fluff, just straight answers."),
)

PHASE_CLASSES = {
    Phase.IMMEDIATE: "phase-immediate",
    Phase.CONTEXT: "phase-context",
    Phase.DEEP: "phase-deep",
}

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #0F172A; color: #e2e8f0; min-height: 100vh; }

    .sidebar { background: #020617; border-right: 1px solid #1e293b; }

    .message-user {
        background: #2563eb;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #1E293B;
        color: #e2e8f0;
        border: 1px solid #1e293b;
        border-radius: 18px 18px 18px 4px;
    }

    .phase-immediate { animation: fade-in 0.3s ease-out; }
    .phase-context {
        animation: fade-up 0.5s ease-out;
        border-left: 2px solid #475569;
        padding-left: 0.75rem;
        font-style: italic;
        color: #cbd5e1;
    }
    .phase-deep { animation: fade-in 0.8s ease-out; }

    @keyframes fade-in { from { opacity: 0; } to { opacity: 1; } }
    @keyframes fade-up {
        from { opacity: 0; transform: translateY(5px); }
        to { opacity: 1; transform: translateY(0); }
    }

    .choice { background: #1e293b; border: 1px solid #334155; border-radius: 12px; }
    .choice-selected { background: rgba(30, 58, 138, 0.3); border-color: #3b82f6; }
</style>
"""


class NiceGUIScheduler:
    """Scheduler backed by one-shot NiceGUI timers inside a container."""

    def __init__(self, container: ui.element) -> None:
        self._container = container

    def schedule(self, delay_ms: int, action: Callable[[], None]) -> ui.timer:
        with self._container:
            return ui.timer(delay_ms / 1000, action, once=True)


class ChatBubble:
    """One rendered message; assistant replies with phases reveal in stages."""

    def __init__(self, message: Message, is_latest: bool, scheduler: NiceGUIScheduler) -> None:
        self.message = message
        self._labels: dict[Phase, ui.label] = {}

        is_user = message.role is Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}") as self.row:
            with ui.column().classes(f"max-w-[70%] px-5 py-4 gap-4 text-lg {bubble}"):
                if is_user or not message.has_blocks:
                    ui.label(message.content).classes("whitespace-pre-wrap")
                else:
                    for block in message.ordered_blocks():
                        label = ui.label("").classes(f"whitespace-pre-wrap {PHASE_CLASSES[block.phase]}")
                        self._labels[block.phase] = label

        self.reveal = MessageReveal(message, is_latest, scheduler, on_change=lambda _r: self.render())
        self.render()

    def render(self) -> None:
        for phase, label in self._labels.items():
            label.set_text(self.reveal.displayed_text(phase))
            label.set_visibility(self.reveal.is_visible(phase))

    def set_latest(self, is_latest: bool) -> None:
        self.reveal.update(self.message, is_latest)
        self.render()

    def delete(self) -> None:
        self.reveal.teardown()
        self.row.delete()


def render_summary(summary: SessionSummary | str | None) -> None:
    """Render a summary report, or the empty-report notice."""
    if summary is None:
        ui.label("No report is available for this conversation yet.").classes("text-slate-400")
        return
    if isinstance(summary, str):
        ui.label(summary).classes("whitespace-pre-wrap text-slate-300")
        return

    ui.label(summary.title).classes("text-2xl font-bold text-slate-100")
    with ui.row().classes("gap-2"):
        for theme in summary.themes:
            ui.chip(f"#{theme}").props("outline color=grey-5")
    ui.separator()
    ui.label("Key Insight").classes("text-sm font-semibold uppercase text-blue-300")
    ui.label(f'"{summary.key_insight}"').classes("text-lg italic")
    ui.label("The Journey").classes("text-sm font-semibold uppercase text-slate-400")
    ui.label(summary.emotional_journey).classes("text-slate-300")
    ui.label("Takeaways").classes("text-sm font-semibold uppercase text-slate-400")
    for suggestion in summary.suggestions:
        with ui.row().classes("items-start gap-2"):
            ui.icon("check_circle").classes("text-green-500")
            ui.label(suggestion).classes("text-slate-300")


@ui.page("/")
async def chat_page(client: Client) -> None:
    """Main page: sidebar, onboarding wizard or chat, summary dialog."""
    ui.add_head_html(CUSTOM_CSS)
    config = get_client_config()
    store = SessionStore(MappingStore(app.storage.user))
    orchestrator = Orchestrator(BackendGateway(config), store)
    builder = orchestrator.profile_builder

    bubbles: list[ChatBubble] = []

    messages_container: ui.column
    status_row: ui.row
    status_label: ui.label
    input_field: ui.textarea
    send_btn: ui.button
    onboarding_area: ui.column
    chat_area: ui.column
    summary_dialog: ui.dialog
    scheduler: NiceGUIScheduler

    # === Actions ===

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or orchestrator.loading:
            return
        input_field.value = ""
        await orchestrator.send(text)

    async def finish_onboarding() -> None:
        if builder.can_complete:
            await orchestrator.finish_onboarding()

    async def open_summary() -> None:
        summary_dialog.open()
        await orchestrator.request_summary()

    def wizard_action(action: Callable[[], object]) -> Callable[[], None]:
        def handler() -> None:
            action()
            onboarding_view.refresh()

        return handler

    # === Synchronization ===

    def sync_messages() -> None:
        messages = orchestrator.conversation.messages
        rendered = [b.message for b in bubbles]
        if messages[: len(rendered)] != rendered:
            for bubble in bubbles:
                bubble.delete()
            bubbles.clear()
            rendered = []

        new = messages[len(rendered) :]
        if new and bubbles:
            bubbles[-1].set_latest(False)
        with messages_container:
            for offset, message in enumerate(new):
                bubbles.append(ChatBubble(message, offset == len(new) - 1, scheduler))

    def sync() -> None:
        onboarding_area.set_visibility(orchestrator.mode is Mode.ONBOARDING)
        chat_area.set_visibility(orchestrator.mode is Mode.CHAT)
        if orchestrator.mode is Mode.ONBOARDING:
            onboarding_view.refresh()
        sync_messages()
        status_row.set_visibility(orchestrator.loading)
        status_label.set_text(orchestrator.thinking_text)
        send_btn.set_enabled(not orchestrator.loading)
        sidebar_view.refresh()
        summary_view.refresh()
        if not orchestrator.summary_open:
            summary_dialog.close()

    # === Views ===

    @ui.refreshable
    def sidebar_view() -> None:
        ui.label("Hey Attrangi").classes("text-2xl font-semibold text-white self-center")
        with ui.column().classes("w-full items-center gap-2"):
            ui.image(f"/bot_expressions/{orchestrator.expression}.jpg").classes("w-full rounded-3xl")
            dot = "bg-slate-500" if orchestrator.expression == DEFAULT_EXPRESSION else "bg-green-500"
            with ui.row().classes("items-center gap-2 text-xs uppercase text-slate-400"):
                ui.element("span").classes(f"w-2 h-2 rounded-full {dot}")
                ui.label(f"{orchestrator.expression} MODE")

        ui.button("Reset Chat", icon="refresh", on_click=orchestrator.reset).classes("w-full")
        ui.button("End & Summarize", icon="auto_awesome", on_click=open_summary).classes("w-full")

        if orchestrator.sessions:
            ui.label("Previous sessions").classes("text-xs uppercase text-slate-500 mt-4")
            for meta in orchestrator.sessions:
                active = meta.id == orchestrator.session_id
                with (
                    ui.row()
                    .classes(f"w-full cursor-pointer px-3 py-2 choice {'choice-selected' if active else ''}")
                    .on("click", lambda sid=meta.id: orchestrator.switch_session(sid))
                ):
                    ui.label(meta.title).classes("text-sm text-slate-200")
                    ui.label(meta.date).classes("text-xs text-slate-500")

        ui.label(
            "I am an AI mental health companion. I can listen, reflect, and support you. "
            "I am not a replacement for professional help."
        ).classes("mt-auto text-xs text-slate-500 text-center")

    @ui.refreshable
    def onboarding_view() -> None:
        profile = builder.profile

        if builder.step is OnboardingStep.ABOUT_YOU:
            ui.label("About You").classes("text-2xl font-semibold")
            ui.input(
                "Name (Optional)",
                value=profile.name,
                placeholder="What should I call you?",
                on_change=lambda e: builder.set_name(e.value or ""),
            ).classes("w-full")
            ui.label("Age Range").classes("text-sm text-slate-400")
            with ui.row().classes("gap-2"):
                for age in AgeRange:
                    selected = profile.age_range is age
                    ui.button(
                        age.value, on_click=wizard_action(lambda a=age: builder.set_age_range(a))
                    ).props("rounded" + ("" if selected else " outline"))
            ui.select(
                {role: label for role, label in ROLE_LABELS.items()},
                label="Role",
                value=profile.role,
                on_change=lambda e: builder.set_role(e.value),
            ).classes("w-full")
            with ui.row().classes("w-full justify-end"):
                ui.button("Next", icon="chevron_right", on_click=wizard_action(builder.next))
            return

        if builder.step is OnboardingStep.FOCUS_TOPICS:
            ui.label("What's on your mind?").classes("text-2xl font-semibold")
            ui.label("Select as many as you like.").classes("text-slate-400")
            for topic in TOPIC_VOCABULARY:
                selected = topic in profile.topic_focus
                with (
                    ui.row()
                    .classes(f"w-full p-4 cursor-pointer justify-between choice {'choice-selected' if selected else ''}")
                    .on("click", wizard_action(lambda t=topic: builder.toggle_topic(t)))
                ):
                    ui.label(topic)
                    if selected:
                        ui.icon("check").classes("text-blue-400")
            with ui.row().classes("w-full justify-between"):
                ui.button("Back", icon="chevron_left", on_click=wizard_action(builder.back)).props("flat")
                ui.button("Next", icon="chevron_right", on_click=wizard_action(builder.next))
            return

        ui.label("How can I help?").classes("text-2xl font-semibold")
        for style, label, description in SUPPORT_OPTIONS:
            selected = profile.support_style is style
            with (
                ui.column()
                .classes(f"w-full p-4 gap-1 cursor-pointer choice {'choice-selected' if selected else ''}")
                .on("click", wizard_action(lambda s=style: builder.set_support_style(s)))
            ):
                ui.label(label).classes("font-medium")
                ui.label(description).classes("text-sm text-slate-500")
        with ui.row().classes("w-full justify-between"):
            ui.button("Back", icon="chevron_left", on_click=wizard_action(builder.back)).props("flat")
            start_btn = ui.button("Start Chatting", on_click=finish_onboarding).props("color=positive")
            start_btn.set_enabled(builder.can_complete)

    @ui.refreshable
    def summary_view() -> None:
        if orchestrator.summary_loading:
            with ui.column().classes("items-center p-8"):
                ui.spinner(size="xl")
                ui.label("Synthesizing conversation themes...").classes("text-sm text-slate-400")
            return
        render_summary(orchestrator.summary)
        with ui.row().classes("w-full justify-end gap-3"):
            ui.button("Close", on_click=orchestrator.close_summary).props("flat")
            ui.button("Start Fresh", icon="auto_awesome", on_click=orchestrator.start_fresh)

    # === UI Layout ===
    with ui.row().classes("w-full h-screen no-wrap gap-0"):
        with ui.column().classes("sidebar w-[400px] h-full p-6 gap-3 gt-md"):
            sidebar_view()

        with ui.column().classes("flex-grow h-full"):
            with ui.column().classes("w-full h-full items-center justify-center") as onboarding_area:
                with ui.column().classes("w-full max-w-md gap-6"):
                    onboarding_view()

            with ui.column().classes("w-full h-full gap-0") as chat_area:
                with ui.scroll_area().classes("flex-grow w-full p-4"):
                    messages_container = ui.column().classes("w-full gap-6")
                    with ui.row().classes("justify-start items-center gap-3") as status_row:
                        ui.spinner(size="sm")
                        status_label = ui.label("").classes("text-sm text-slate-400 italic")

                with ui.row().classes("w-full p-4 gap-3 items-end"):
                    input_field = (
                        ui.textarea(placeholder="What's been on your mind?")
                        .props("autogrow dense rows=1 dark outlined")
                        .classes("flex-grow")
                        .on("keydown.enter.prevent", send_message)
                    )
                    send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")
                ui.label("Attrangi can make mistakes. Please check important info.").classes(
                    "w-full text-center text-xs text-slate-600 pb-2"
                )

    with ui.dialog() as summary_dialog, ui.card().classes("w-full max-w-2xl bg-slate-900"):
        summary_view()
    summary_dialog.on("hide", lambda: orchestrator.close_summary() if orchestrator.summary_open else None)

    timer_host = ui.element("div")
    scheduler = NiceGUIScheduler(timer_host)

    status_row.set_visibility(False)
    chat_area.set_visibility(False)
    orchestrator.add_listener(sync)

    await client.connected()
    await orchestrator.start()


def main() -> None:
    config = get_client_config()
    ui.run(
        title="Hey Attrangi",
        host=config.host,
        port=config.port,
        storage_secret=config.storage_secret,
        dark=True,
        reload=False,
    )


if __name__ == "__main__":
    main()
