"""Orchestrator: owns the Conversation Log and drives the session lifecycle.

Every backend result is applied only if the active session is still the one
the call was issued for. A slow reply that resolves after the user switched
or reset sessions is logged and dropped.
"""

import logging
import random
from collections.abc import Callable
from enum import Enum

from attrangi.conversation.log import ConversationLog
from attrangi.gateway.client import BackendGateway
from attrangi.gateway.errors import GatewayError
from attrangi.models.schemas import Message, Role, SessionMeta, SessionSummary
from attrangi.onboarding.profile_builder import ProfileBuilder
from attrangi.session.store import SessionStore

logger = logging.getLogger(__name__)

THINKING_PHRASES: tuple[str, ...] = (
    "Reviewing recent context...",
    "Noticing important themes...",
    "Preparing a thoughtful reply...",
    "Reflecting on what you've shared...",
    "Holding the bigger picture...",
    "Responding with care...",
)

CONNECTION_ERROR_REPLY = "I'm having trouble connecting. Please try again."
DEFAULT_EXPRESSION = "NEUTRAL"


class Mode(str, Enum):
    ONBOARDING = "onboarding"
    CHAT = "chat"


class Orchestrator:
    """Composes session, onboarding, conversation and backend access.

    Args:
        gateway: Backend client.
        session_store: Durable session identifier and session list.
        profile_builder: Onboarding wizard; a fresh one if omitted.
        conversation: Message log; a fresh one if omitted.
        rng: Random source for the thinking phrase.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        session_store: SessionStore,
        profile_builder: ProfileBuilder | None = None,
        conversation: ConversationLog | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.gateway = gateway
        self.session_store = session_store
        self.profile_builder = profile_builder or ProfileBuilder()
        self.conversation = conversation or ConversationLog()
        self._rng = rng or random.Random()
        self._listeners: list[Callable[[], None]] = []

        self.mode = Mode.ONBOARDING
        self.loading = False
        self.thinking_text = ""
        self.expression = DEFAULT_EXPRESSION
        self.sessions: list[SessionMeta] = []

        self.summary: SessionSummary | str | None = None
        self.summary_open = False
        self.summary_loading = False

    @property
    def session_id(self) -> str | None:
        return self.session_store.session_id

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback run after every state change."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    def _is_stale(self, session_id: str, what: str) -> bool:
        if self.session_id == session_id:
            return False
        logger.info(f"Dropping {what} for inactive session {session_id}")
        return True

    # --- Session lifecycle ---

    async def start(self) -> None:
        """Restore the persisted session on launch."""
        session_id = self.session_store.ensure_session()
        self.sessions = self.session_store.list_sessions()
        await self.resume(session_id)

    async def resume(self, session_id: str) -> None:
        """Load a session's history and pick the matching mode.

        Non-empty history enters chat with the log replaced by it. Empty
        history, or a failed fetch, enters onboarding at the first step.
        """
        try:
            history = await self.gateway.fetch_history(session_id)
        except GatewayError as e:
            logger.warning(f"History fetch failed for session {session_id}: {e}")
            history = []

        if self._is_stale(session_id, "history"):
            return

        if history:
            self.conversation.replace(history)
            self.mode = Mode.CHAT
        else:
            self.conversation.clear()
            self.profile_builder.reset()
            self.mode = Mode.ONBOARDING
        logger.info(f"Resumed session {session_id} in {self.mode.value} mode")
        self._notify()

    async def switch_session(self, session_id: str) -> None:
        """Make a listed session active and load it.

        Selecting the already active session is a no-op, so an exchange in
        flight keeps its loading state.
        """
        if session_id == self.session_id:
            return
        self.session_store.activate(session_id)
        self.loading = True
        self.thinking_text = ""
        self.summary = None
        self.summary_open = False
        self.summary_loading = False
        self._notify()
        try:
            await self.resume(session_id)
        finally:
            if self.session_id == session_id:
                self.loading = False
                self._notify()

    def reset(self) -> str:
        """Start a brand-new session in onboarding.

        Returns:
            The new session identifier.
        """
        session_id = self.session_store.reset()
        self.conversation.clear()
        self.profile_builder.reset()
        self.mode = Mode.ONBOARDING
        self.expression = DEFAULT_EXPRESSION
        self.loading = False
        self.thinking_text = ""
        self.summary = None
        self.summary_open = False
        self.summary_loading = False
        self._notify()
        return session_id

    # --- Onboarding ---

    async def finish_onboarding(self) -> None:
        """Submit the Profile and switch to chat.

        A failed submit is logged and does not block chat.

        Raises:
            OnboardingIncomplete: If no support style has been chosen.
        """
        profile = self.profile_builder.complete()
        session_id = self.session_store.ensure_session()
        try:
            await self.gateway.submit_profile(session_id, profile)
        except GatewayError as e:
            logger.error(f"Failed to save profile for session {session_id}: {e}")

        if self._is_stale(session_id, "profile acknowledgement"):
            return
        self.mode = Mode.CHAT
        self._notify()

    # --- Chat ---

    async def send(self, text: str) -> bool:
        """Send a user message and append the reply.

        Empty input and sends while a request is in flight are ignored.

        Args:
            text: The user's message.

        Returns:
            True if an assistant reply was appended from the backend.
        """
        if not text.strip() or self.loading:
            return False

        session_id = self.session_store.ensure_session()
        self.conversation.append(Message(role=Role.USER, content=text))
        self.loading = True
        self.thinking_text = self._rng.choice(THINKING_PHRASES)
        self._notify()

        try:
            reply = await self.gateway.exchange(session_id, text)
        except GatewayError as e:
            logger.warning(f"Chat exchange failed for session {session_id}: {e}")
            if not self._is_stale(session_id, "chat failure"):
                self.conversation.append(Message(role=Role.ASSISTANT, content=CONNECTION_ERROR_REPLY))
            return False
        else:
            if self._is_stale(session_id, "chat reply"):
                return False
            self.conversation.append(
                Message(role=Role.ASSISTANT, content=reply.reply, blocks=reply.blocks)
            )
            self.expression = reply.expression or DEFAULT_EXPRESSION
            self._record_title(session_id)
            return True
        finally:
            if self.session_id == session_id:
                self.loading = False
                self.thinking_text = ""
            self._notify()

    def _record_title(self, session_id: str) -> None:
        if any(meta.id == session_id for meta in self.sessions):
            return
        first = next((m for m in self.conversation if m.role is Role.USER), None)
        if first is None:
            return
        self.session_store.record_session_title(session_id, first.content)
        self.sessions = self.session_store.list_sessions()

    # --- Summary ---

    async def request_summary(self) -> SessionSummary | str | None:
        """Open the summary panel and fetch a report for the active session.

        Returns:
            The report, or None when it could not be produced.
        """
        session_id = self.session_store.ensure_session()
        self.summary_open = True
        self.summary_loading = True
        self.summary = None
        self._notify()

        try:
            result = await self.gateway.fetch_summary(session_id)
        except GatewayError as e:
            logger.warning(f"Summary failed for session {session_id}: {e}")
            result = None

        if self._is_stale(session_id, "summary"):
            return None
        self.summary = result
        self.summary_loading = False
        self._notify()
        return result

    def close_summary(self) -> None:
        self.summary_open = False
        self._notify()

    def start_fresh(self) -> str:
        """Close the summary and reset to a new session."""
        self.summary_open = False
        return self.reset()
