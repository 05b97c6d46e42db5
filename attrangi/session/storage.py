"""Key-value access to durable client storage."""

from collections.abc import MutableMapping
from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Minimal string key-value store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MappingStore:
    """KeyValueStore over any mutable mapping.

    Wraps NiceGUI's ``app.storage.user`` (persisted per browser) in the app,
    and a plain dict in tests.
    """

    def __init__(self, mapping: MutableMapping[str, Any] | None = None) -> None:
        self._mapping = mapping if mapping is not None else {}

    def get(self, key: str) -> str | None:
        value = self._mapping.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._mapping[key] = value

    def remove(self, key: str) -> None:
        self._mapping.pop(key, None)
