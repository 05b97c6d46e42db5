"""In-memory conversation store behind the reference backend."""

import logging

from attrangi.models.schemas import (
    ChatReply,
    Message,
    Phase,
    PhaseBlock,
    Profile,
    Role,
    SessionSummary,
    SupportStyle,
)

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 80

_DEEP_LINES = {
    SupportStyle.LISTEN: "I'm here, and I'm listening. Take all the time you need.",
    SupportStyle.REFLECT: "What feels most important about this for you right now?",
    SupportStyle.HELP_ME_THINK: "Let's untangle it together. Which small part could we look at first?",
    SupportStyle.ANSWER_DIRECTLY: "My direct take: start with the part that feels most urgent today.",
}
_DEFAULT_DEEP_LINE = "Would you like to tell me a little more?"

_EXPRESSIONS = {
    SupportStyle.LISTEN: "LISTENING",
    SupportStyle.REFLECT: "THOUGHTFUL",
    SupportStyle.HELP_ME_THINK: "CURIOUS",
    SupportStyle.ANSWER_DIRECTLY: "FOCUSED",
}

_SUGGESTIONS = {
    SupportStyle.LISTEN: ["Give yourself a quiet moment to notice how you feel."],
    SupportStyle.REFLECT: ["Write down one pattern you noticed today."],
    SupportStyle.HELP_ME_THINK: ["Pick one small next step and try it this week."],
    SupportStyle.ANSWER_DIRECTLY: ["Act on the most urgent item first."],
}


def _excerpt(text: str) -> str:
    text = " ".join(text.split())
    if len(text) > EXCERPT_LENGTH:
        return text[:EXCERPT_LENGTH].rstrip() + "..."
    return text


def compose_blocks(message: str, profile: Profile) -> list[PhaseBlock]:
    """Build a phased echo reply shaped by the user's support style.

    Direct answers skip the leading remark, so the client sees replies both
    with and without an immediate phase.
    """
    blocks: list[PhaseBlock] = []
    if profile.support_style is not SupportStyle.ANSWER_DIRECTLY:
        greeting = "Thank you for telling me that"
        greeting += f", {profile.name}." if profile.name else "."
        blocks.append(PhaseBlock(phase=Phase.IMMEDIATE, text=greeting))

    blocks.append(PhaseBlock(phase=Phase.CONTEXT, text=f'You said: "{_excerpt(message)}"'))

    deep = _DEEP_LINES.get(profile.support_style, _DEFAULT_DEEP_LINE)
    blocks.append(PhaseBlock(phase=Phase.DEEP, text=deep))
    return blocks


class InMemoryBackend:
    """Stores conversations and profiles per session for the process lifetime."""

    def __init__(self) -> None:
        self._conversations: dict[str, list[Message]] = {}
        self._profiles: dict[str, Profile] = {}

    def history(self, session_id: str) -> list[Message]:
        return list(self._conversations.get(session_id, []))

    def profile(self, session_id: str) -> Profile | None:
        return self._profiles.get(session_id)

    def save_profile(self, session_id: str, profile: Profile) -> None:
        self._profiles[session_id] = profile

    def reply(self, session_id: str, message: str) -> ChatReply:
        """Record a user message and the phased reply to it."""
        profile = self._profiles.get(session_id, Profile())
        blocks = compose_blocks(message, profile)
        content = " ".join(block.text for block in blocks)

        conversation = self._conversations.setdefault(session_id, [])
        conversation.append(Message(role=Role.USER, content=message))
        conversation.append(Message(role=Role.ASSISTANT, content=content, blocks=blocks))
        logger.debug(f"Session {session_id} now has {len(conversation)} messages")

        return ChatReply(
            reply=content,
            blocks=blocks,
            expression=_EXPRESSIONS.get(profile.support_style),
        )

    def summarize(self, session_id: str) -> SessionSummary | None:
        """Summarize a session; None if nothing has been said yet."""
        user_messages = [
            m.content for m in self._conversations.get(session_id, []) if m.role is Role.USER
        ]
        if not user_messages:
            return None

        profile = self._profiles.get(session_id, Profile())
        turns = len(user_messages)
        return SessionSummary(
            title=_excerpt(user_messages[0]),
            themes=list(profile.topic_focus) or ["reflection"],
            emotional_journey=(
                f"Across {turns} message{'s' if turns != 1 else ''} you moved from "
                f'"{_excerpt(user_messages[0])}" to "{_excerpt(user_messages[-1])}".'
            ),
            key_insight=_excerpt(user_messages[-1]),
            suggestions=_SUGGESTIONS.get(
                profile.support_style, ["Come back whenever you want to talk again."]
            ),
        )
