"""Session identity and the persisted session list.

Storage is reached through a small key-value interface so the same logic
runs against NiceGUI browser storage in the app and a plain dict in tests.
"""

from attrangi.session.storage import KeyValueStore, MappingStore
from attrangi.session.store import SESSION_ID_KEY, SESSIONS_LIST_KEY, SessionStore, derive_title

__all__ = [
    "SESSION_ID_KEY",
    "SESSIONS_LIST_KEY",
    "KeyValueStore",
    "MappingStore",
    "SessionStore",
    "derive_title",
]
