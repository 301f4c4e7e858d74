"""
Exceptions raised by the interview session engine.

Three families matter to callers:
- SessionValidationError: the request is wrong for the current session state,
  never worth retrying.
- SessionNotFoundError: unknown session identifier.
- ExternalDependencyError: question generation or evaluation failed; the
  session is left untouched and the call may be retried.
"""

from typing import Optional


class InterviewEngineError(Exception):
    """Base exception for interview engine errors."""

    def __init__(self, message: str, session_id: Optional[str] = None):
        super().__init__(message)
        self.session_id = session_id


# ============================================================================
# Validation errors
# ============================================================================

class SessionValidationError(InterviewEngineError):
    """Request rejected because of its arguments or the session state."""

    pass


class InvalidQuestionCountError(SessionValidationError):
    """Requested question count is outside the allowed range."""

    pass


class InvalidQuestionIndexError(SessionValidationError):
    """Question ordinal is outside [0, total_questions)."""

    pass


class QuestionIndexMismatchError(SessionValidationError):
    """Question ordinal does not match the session cursor."""

    def __init__(self, message: str, session_id: Optional[str] = None,
                 expected: Optional[int] = None, received: Optional[int] = None):
        super().__init__(message, session_id)
        self.expected = expected
        self.received = received


class SessionTerminalError(SessionValidationError):
    """Session no longer accepts answers."""

    pass


class AlreadyCompletedError(SessionValidationError):
    """Cursor cannot advance past the last question."""

    pass


class NotCompleteError(SessionValidationError):
    """Report requested for a session that is not COMPLETED."""

    pass


class EmptyAnswerError(SessionValidationError):
    """Submitted answer text is empty."""

    pass


# ============================================================================
# Lookup errors
# ============================================================================

class SessionNotFoundError(InterviewEngineError):
    """No live session with the given identifier."""

    pass


NotFoundError = SessionNotFoundError


class DuplicateSessionError(InterviewEngineError):
    """A session with the same identifier is already registered."""

    pass


# ============================================================================
# External dependency errors
# ============================================================================

class ExternalDependencyError(InterviewEngineError):
    """An external capability failed; safe to retry."""

    pass


class GenerationError(ExternalDependencyError):
    """Question generator failed or returned unusable output."""

    pass


class QuestionGenerationError(GenerationError):
    """Session creation aborted because questions could not be generated."""

    pass


class EvaluationError(ExternalDependencyError):
    """Answer evaluator failed or returned unusable output."""

    pass
