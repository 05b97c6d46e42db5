"""Pydantic models for the client state and the backend wire contract.

Models:
    - Profile: Onboarding answers sent once to the backend
    - Message / PhaseBlock: Conversation entries and their staged phases
    - SessionMeta: Persisted session list entry
    - SessionSummary: End-of-session report
"""

from attrangi.models.schemas import (
    PHASE_ORDER,
    TOPIC_VOCABULARY,
    AgeRange,
    ChatReply,
    ChatRequest,
    HistoryResponse,
    Message,
    Phase,
    PhaseBlock,
    Profile,
    ProfileRequest,
    Role,
    SessionMeta,
    SessionSummary,
    SummaryRequest,
    SupportStyle,
    UserRole,
)

__all__ = [
    "PHASE_ORDER",
    "TOPIC_VOCABULARY",
    "AgeRange",
    "ChatReply",
    "ChatRequest",
    "HistoryResponse",
    "Message",
    "Phase",
    "PhaseBlock",
    "Profile",
    "ProfileRequest",
    "Role",
    "SessionMeta",
    "SessionSummary",
    "SummaryRequest",
    "SupportStyle",
    "UserRole",
]
