"""Ordered log of exchanged messages."""

from attrangi.conversation.log import ConversationLog

__all__ = ["ConversationLog"]
