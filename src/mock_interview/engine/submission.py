# Answer Submission
"""
Validates and applies a single answer to a session.

Answers are accepted strictly in question order: the submitted ordinal must
equal the session cursor. A retried submission for a question that has
already been accepted therefore fails instead of being applied twice.
"""

import logging
from datetime import datetime
from typing import Optional

from .exceptions import (
    EmptyAnswerError,
    InvalidQuestionIndexError,
    QuestionIndexMismatchError,
    SessionTerminalError,
)
from .models import Session, SubmissionResult
from .sequencer import QuestionSequencer

logger = logging.getLogger(__name__)


class AnswerSubmissionPipeline:
    """Answer validation and application, run inside SessionStore.mutate."""

    def __init__(self, sequencer: Optional[QuestionSequencer] = None):
        self.sequencer = sequencer or QuestionSequencer()

    def validate(self, session: Session, ordinal: int, answer_text: str) -> str:
        """
        Check a submission against the session state.

        Returns:
            The normalized answer text

        Raises:
            InvalidQuestionIndexError: Ordinal outside [0, total_questions)
            QuestionIndexMismatchError: Ordinal is not the current question
            SessionTerminalError: Session no longer accepts answers
            EmptyAnswerError: Answer is blank
        """
        if ordinal < 0 or ordinal >= len(session.slots):
            raise InvalidQuestionIndexError(
                f"Invalid question index {ordinal}; session has "
                f"{len(session.slots)} questions",
                session.session_id,
            )

        if ordinal != session.cursor:
            raise QuestionIndexMismatchError(
                f"Expected an answer for question {session.cursor}, got {ordinal}",
                session.session_id,
                expected=session.cursor,
                received=ordinal,
            )

        if not session.accepts_answers:
            raise SessionTerminalError(
                f"Session {session.session_id} is {session.status.value} "
                "and no longer accepts answers",
                session.session_id,
            )

        answer = (answer_text or "").strip()
        if not answer:
            raise EmptyAnswerError("Answer text cannot be empty", session.session_id)

        return answer

    def apply(self, session: Session, ordinal: int, answer_text: str) -> SubmissionResult:
        """Record the answer at the cursor and advance the session."""
        answer = self.validate(session, ordinal, answer_text)

        slot = session.slots[session.cursor]
        slot.answer = answer
        slot.answered_at = datetime.now()
        self.sequencer.advance(session)

        next_slot = self.sequencer.current_slot(session)
        logger.debug(
            f"Session {session.session_id}: answer {ordinal} recorded, "
            f"{self.sequencer.remaining(session)} remaining"
        )
        return SubmissionResult(
            has_next_question=next_slot is not None,
            next_question=next_slot,
            current_index=session.cursor,
            total_questions=len(session.slots),
            status=session.status,
        )
