# Session Store
"""
Thread-safe registry of live interview sessions.

Every session has its own lock; the registry lock only guards the
id -> entry mapping and is never held while a session is mutated.
Sessions leave the store as deep copies, so callers can never change
stored state except through mutate().
"""

import copy
import logging
from datetime import datetime
from threading import Lock
from typing import Callable, Dict, List, Optional, TypeVar

from .exceptions import DuplicateSessionError, SessionNotFoundError
from .models import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _SessionEntry:
    """A stored session and the lock that serializes its mutations."""

    __slots__ = ("session", "lock")

    def __init__(self, session: Session):
        self.session = session
        self.lock = Lock()


class SessionStore:
    """
    In-memory session registry with per-session atomic mutation.

    Provides:
    - Session registration and lookup
    - All-or-nothing mutation under a per-session lock
    - Listing and deletion
    """

    def __init__(self):
        self._entries: Dict[str, _SessionEntry] = {}
        self._registry_lock = Lock()
        logger.info("SessionStore initialized")

    def _entry(self, session_id: str) -> _SessionEntry:
        with self._registry_lock:
            entry = self._entries.get(session_id)
        if entry is None:
            raise SessionNotFoundError(f"Session not found: {session_id}", session_id)
        return entry

    def create(self, session: Session) -> str:
        """Register a new session. Returns its identifier."""
        entry = _SessionEntry(copy.deepcopy(session))
        with self._registry_lock:
            if session.session_id in self._entries:
                raise DuplicateSessionError(
                    f"Session {session.session_id} already exists", session.session_id
                )
            self._entries[session.session_id] = entry
        logger.debug(f"Stored session {session.session_id}")
        return session.session_id

    def get(self, session_id: str) -> Session:
        """Return a snapshot of the session."""
        entry = self._entry(session_id)
        with entry.lock:
            return copy.deepcopy(entry.session)

    def mutate(
        self,
        session_id: str,
        fn: Callable[[Session], T],
        on_commit: Optional[Callable[[Session, T], None]] = None,
    ) -> T:
        """
        Apply a transition function to a session atomically.

        fn receives a working copy of the session. The copy replaces the
        stored session only if fn returns normally; any exception raised by
        fn propagates and the stored session is left as it was.

        on_commit runs after the commit while the session lock is still held,
        so hooks for successive mutations of one session run in commit order.

        Args:
            session_id: Session to mutate
            fn: Transition function, must not block on I/O
            on_commit: Optional hook receiving the committed session and
                fn's result; must not block on I/O or modify the session

        Returns:
            Whatever fn returns
        """
        entry = self._entry(session_id)
        with entry.lock:
            working = copy.deepcopy(entry.session)
            result = fn(working)
            working.updated_at = datetime.now()
            entry.session = working
            if on_commit is not None:
                on_commit(working, result)
            return copy.deepcopy(result)

    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        with self._registry_lock:
            entry = self._entries.pop(session_id, None)
        if entry is None:
            return False
        logger.info(f"Deleted session: {session_id}")
        return True

    def list_sessions(self, resume_id: Optional[int] = None) -> List[Session]:
        """Snapshots of all sessions, newest first, optionally for one résumé."""
        with self._registry_lock:
            entries = list(self._entries.values())

        sessions = []
        for entry in entries:
            with entry.lock:
                if resume_id is None or entry.session.resume_id == resume_id:
                    sessions.append(copy.deepcopy(entry.session))
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        return sessions

    def __contains__(self, session_id: str) -> bool:
        with self._registry_lock:
            return session_id in self._entries

    @property
    def active_session_count(self) -> int:
        """Count of live sessions."""
        with self._registry_lock:
            return len(self._entries)
