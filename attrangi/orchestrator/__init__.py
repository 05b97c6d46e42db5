"""Top-level flow: onboarding vs. chat, sends and receives, session switching.

Composes the Session Store, Profile Builder, Conversation Log and Backend
Gateway. The UI renders Orchestrator state and calls its operations; it
makes no decisions of its own.
"""

from attrangi.orchestrator.controller import (
    CONNECTION_ERROR_REPLY,
    DEFAULT_EXPRESSION,
    THINKING_PHRASES,
    Mode,
    Orchestrator,
)

__all__ = [
    "CONNECTION_ERROR_REPLY",
    "DEFAULT_EXPRESSION",
    "THINKING_PHRASES",
    "Mode",
    "Orchestrator",
]
