"""Conversation Log: chronological messages for the active session.

Append-only during live chat; replaced wholesale when a session's history
is loaded.
"""

from collections.abc import Iterable, Iterator

from attrangi.models.schemas import Message, Role


class ConversationLog:
    """Ordered sequence of Messages, render order equal to insertion order."""

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: list[Message] = list(messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    @property
    def messages(self) -> list[Message]:
        """A copy of the messages, oldest first."""
        return list(self._messages)

    @property
    def latest_index(self) -> int | None:
        return len(self._messages) - 1 if self._messages else None

    def is_latest(self, index: int) -> bool:
        return index == self.latest_index

    def has_user_messages(self) -> bool:
        return any(m.role is Role.USER for m in self._messages)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def replace(self, messages: Iterable[Message]) -> None:
        self._messages = list(messages)

    def clear(self) -> None:
        self._messages = []
