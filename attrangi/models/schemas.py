from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class Role(str, Enum):
    """Speaker of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


class Phase(str, Enum):
    """Stage of an assistant reply, presented in declaration order."""

    IMMEDIATE = "immediate"
    CONTEXT = "context"
    DEEP = "deep"


PHASE_ORDER: tuple[Phase, ...] = (Phase.IMMEDIATE, Phase.CONTEXT, Phase.DEEP)


class AgeRange(str, Enum):
    UNDER_18 = "under_18"
    AGE_18_25 = "18-25"
    AGE_26_35 = "26-35"
    AGE_36_50 = "36-50"
    OVER_50 = "50+"


class UserRole(str, Enum):
    STUDENT = "student"
    WORKING_PROFESSIONAL = "working_professional"
    CAREGIVER = "caregiver"
    PATIENT = "patient"
    OTHER = "other"


class SupportStyle(str, Enum):
    """How the user wants the assistant to engage."""

    LISTEN = "listen"
    REFLECT = "reflect"
    HELP_ME_THINK = "help me think"
    ANSWER_DIRECTLY = "answer directly"


TOPIC_VOCABULARY: tuple[str, ...] = (
    "myself",
    "someone important to me",
    "work or studies",
    "health",
    "relationships",
    "something unclear",
    "just thinking out loud",
)


class Profile(BaseModel):
    """Onboarding answers for a session.

    Unset enum fields travel as empty strings on the wire, which is what the
    backend expects for "not answered".

    Attributes:
        name: Optional name the user wants to be called.
        age_range: Age bucket, if given.
        role: Life role, if given.
        topic_focus: Selected topics in selection order, without duplicates.
        support_style: Requested support style; required to finish onboarding.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    age_range: AgeRange | None = None
    role: UserRole | None = None
    topic_focus: tuple[str, ...] = ()
    support_style: SupportStyle | None = None

    @field_validator("age_range", "role", "support_style", mode="before")
    @classmethod
    def empty_string_is_unset(cls, v: object) -> object:
        """Treat the empty wire value as unset."""
        if v == "":
            return None
        return v

    @field_validator("topic_focus", mode="after")
    @classmethod
    def dedupe_topics(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Drop repeated topics, keeping the first occurrence."""
        return tuple(dict.fromkeys(v))

    @field_serializer("age_range", "role", "support_style")
    def serialize_optional_enum(self, v: Enum | None) -> str:
        return v.value if v is not None else ""

    @field_serializer("topic_focus")
    def serialize_topics(self, v: tuple[str, ...]) -> list[str]:
        return list(v)


class PhaseBlock(BaseModel):
    """One staged part of an assistant reply.

    Attributes:
        text: The text shown for this phase.
        phase: Which stage the text belongs to.
    """

    text: str
    phase: Phase


class Message(BaseModel):
    """A single conversation entry.

    Attributes:
        role: Who sent the message.
        content: Full text; the only render source when blocks are absent.
        blocks: Ordered phase blocks, assistant replies only.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    blocks: tuple[PhaseBlock, ...] | None = None

    @model_validator(mode="after")
    def blocks_only_on_assistant(self) -> "Message":
        """Reject phase blocks on user messages."""
        if self.role is Role.USER and self.blocks:
            raise ValueError("Only assistant messages may carry phase blocks")
        return self

    @property
    def has_blocks(self) -> bool:
        return bool(self.blocks)

    def phase_map(self) -> dict[Phase, PhaseBlock]:
        """Map each phase tag to its block; the first block per tag wins."""
        found: dict[Phase, PhaseBlock] = {}
        for block in self.blocks or ():
            found.setdefault(block.phase, block)
        return found

    def ordered_blocks(self) -> list[PhaseBlock]:
        """Return present blocks in presentation order, whatever their array order."""
        found = self.phase_map()
        return [found[phase] for phase in PHASE_ORDER if phase in found]


class SessionMeta(BaseModel):
    """Entry in the locally persisted session list.

    Attributes:
        id: Opaque session identifier.
        title: First user message, truncated for display.
        date: Creation date, display formatted.
    """

    id: str
    title: str
    date: str


class SessionSummary(BaseModel):
    """Structured end-of-session report produced by the backend."""

    title: str
    themes: list[str] = Field(default_factory=list)
    emotional_journey: str = ""
    key_insight: str = ""
    suggestions: list[str] = Field(default_factory=list)


# --- Wire payloads ---


class HistoryResponse(BaseModel):
    """Response body of GET /history/{session_id}."""

    conversation: list[Message] = Field(default_factory=list)


class ProfileRequest(BaseModel):
    """Request body of POST /profile."""

    session_id: str = Field(..., min_length=1)
    profile: Profile


class ChatRequest(BaseModel):
    """Request body of POST /chat.

    Attributes:
        session_id: Session the message belongs to.
        message: The user's message.
    """

    session_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatReply(BaseModel):
    """Response body of POST /chat.

    Attributes:
        reply: Full reply text.
        blocks: Optional phase decomposition of the reply.
        expression: Optional avatar expression name.
    """

    reply: str
    blocks: list[PhaseBlock] | None = None
    expression: str | None = None


class SummaryRequest(BaseModel):
    """Request body of POST /summary."""

    session_id: str = Field(..., min_length=1)
