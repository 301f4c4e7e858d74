"""Cursor and status transitions over a session's question slots."""

from typing import Optional

from .exceptions import AlreadyCompletedError
from .models import QuestionSlot, Session, SessionStatus


class QuestionSequencer:
    """Pure transition logic. No I/O, no randomness."""

    @staticmethod
    def current_slot(session: Session) -> Optional[QuestionSlot]:
        """The slot at the cursor, or None once every question is answered."""
        if session.cursor >= len(session.slots):
            return None
        return session.slots[session.cursor]

    @staticmethod
    def remaining(session: Session) -> int:
        return len(session.slots) - session.cursor

    @staticmethod
    def advance(session: Session) -> Session:
        """
        Move the cursor forward by one question.

        The first advance moves a CREATED session to IN_PROGRESS; the advance
        that reaches the end moves it to COMPLETED.

        Raises:
            AlreadyCompletedError: If the cursor is already past the last slot
        """
        if session.cursor >= len(session.slots):
            raise AlreadyCompletedError(
                f"Session {session.session_id} has no question left to advance past",
                session.session_id,
            )

        session.cursor += 1
        if session.cursor == len(session.slots):
            session.status = SessionStatus.COMPLETED
        elif session.status == SessionStatus.CREATED:
            session.status = SessionStatus.IN_PROGRESS
        return session
