# Interview Session Engine
"""
Session identity, question sequencing, answer submission and report
synthesis for mock interviews.
"""

from .controller import SessionLifecycleController
from .exceptions import (
    AlreadyCompletedError,
    DuplicateSessionError,
    EmptyAnswerError,
    EvaluationError,
    ExternalDependencyError,
    GenerationError,
    InterviewEngineError,
    InvalidQuestionCountError,
    InvalidQuestionIndexError,
    NotCompleteError,
    NotFoundError,
    QuestionGenerationError,
    QuestionIndexMismatchError,
    SessionNotFoundError,
    SessionTerminalError,
    SessionValidationError,
)
from .interfaces import AnswerEvaluator, QuestionGenerator, SessionPersistence
from .models import QuestionSlot, Report, Session, SessionStatus, SubmissionResult
from .session_store import SessionStore

__all__ = [
    "SessionLifecycleController",
    "SessionStore",
    "QuestionGenerator",
    "AnswerEvaluator",
    "SessionPersistence",
    "Session",
    "QuestionSlot",
    "Report",
    "SessionStatus",
    "SubmissionResult",
    "InterviewEngineError",
    "SessionValidationError",
    "InvalidQuestionCountError",
    "InvalidQuestionIndexError",
    "QuestionIndexMismatchError",
    "SessionTerminalError",
    "AlreadyCompletedError",
    "NotCompleteError",
    "EmptyAnswerError",
    "SessionNotFoundError",
    "NotFoundError",
    "DuplicateSessionError",
    "ExternalDependencyError",
    "GenerationError",
    "QuestionGenerationError",
    "EvaluationError",
]
