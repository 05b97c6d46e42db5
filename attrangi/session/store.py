"""Session Store: active session identifier and the persisted session list.

Sole writer of both storage keys. All callers run on the UI event loop, so
writes are last-write-wins without locking.
"""

import json
import logging
import uuid
from collections.abc import Callable
from datetime import date

from pydantic import TypeAdapter, ValidationError

from attrangi.models.schemas import SessionMeta
from attrangi.session.storage import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "attrangi_session_id"
SESSIONS_LIST_KEY = "attrangi_sessions_list"

TITLE_MAX_LENGTH = 30
TITLE_ELLIPSIS = "..."

_sessions_adapter = TypeAdapter(list[SessionMeta])


def derive_title(first_message: str) -> str:
    """Build a session title from the first user message.

    Args:
        first_message: The first message the user sent in the session.

    Returns:
        The message itself, or its first 30 characters plus "..." if longer.
    """
    if len(first_message) > TITLE_MAX_LENGTH:
        return first_message[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return first_message


def format_session_date(day: date) -> str:
    """Format a date as M/D/YYYY without zero padding."""
    return f"{day.month}/{day.day}/{day.year}"


def _new_session_id() -> str:
    return str(uuid.uuid4())


class SessionStore:
    """Owns the durable session identifier and the session list.

    Args:
        storage: Durable key-value storage.
        id_factory: Produces new globally unique session identifiers.
        today: Returns the current date, for session list entries.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        id_factory: Callable[[], str] = _new_session_id,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._storage = storage
        self._id_factory = id_factory
        self._today = today
        self._session_id: str | None = None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def ensure_session(self) -> str:
        """Return the persisted session identifier, creating one on first run."""
        if self._session_id is not None:
            return self._session_id

        sid = self._storage.get(SESSION_ID_KEY)
        if not sid:
            sid = self._id_factory()
            self._storage.set(SESSION_ID_KEY, sid)
            logger.info(f"Created new session {sid}")
        self._session_id = sid
        return sid

    def activate(self, session_id: str) -> None:
        """Make an existing session the active, persisted one."""
        self._session_id = session_id
        self._storage.set(SESSION_ID_KEY, session_id)

    def reset(self) -> str:
        """Discard the persisted identifier and start a fresh session.

        Returns:
            The new session identifier, always different from the previous one.
        """
        previous = self._session_id or self._storage.get(SESSION_ID_KEY)
        self._storage.remove(SESSION_ID_KEY)

        sid = self._id_factory()
        while sid == previous:
            sid = self._id_factory()

        self._storage.set(SESSION_ID_KEY, sid)
        self._session_id = sid
        logger.info(f"Reset session {previous} -> {sid}")
        return sid

    def list_sessions(self) -> list[SessionMeta]:
        """Return the persisted session list, most recent first."""
        raw = self._storage.get(SESSIONS_LIST_KEY)
        if not raw:
            return []
        try:
            return _sessions_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable session list: {e}")
            return []

    def record_session_title(self, session_id: str, first_message: str) -> SessionMeta | None:
        """Prepend a session list entry for a session's first exchange.

        Args:
            session_id: Session the exchange belongs to.
            first_message: The first user message of that session.

        Returns:
            The new entry, or None if the session was already listed.
        """
        sessions = self.list_sessions()
        if any(meta.id == session_id for meta in sessions):
            return None

        meta = SessionMeta(
            id=session_id,
            title=derive_title(first_message),
            date=format_session_date(self._today()),
        )
        sessions.insert(0, meta)
        self._storage.set(
            SESSIONS_LIST_KEY,
            json.dumps([s.model_dump() for s in sessions]),
        )
        logger.debug(f"Recorded session title for {session_id}: {meta.title!r}")
        return meta
