# API Request/Response Models
"""
Pydantic models for API request and response schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from mock_interview.config import ENGINE_CONFIG
from mock_interview.engine.models import QuestionSlot, Session, SessionStatus, SubmissionResult


# ============================================================================
# Request Models
# ============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new interview session."""
    resume_text: str = Field(
        ...,
        description="Plain-text résumé used to tailor the questions",
        min_length=1
    )
    question_count: int = Field(
        default=ENGINE_CONFIG["default_question_count"],
        description="Number of interview questions",
        ge=ENGINE_CONFIG["min_question_count"],
        le=ENGINE_CONFIG["max_question_count"]
    )
    resume_id: Optional[int] = Field(
        None,
        description="Identifier of the stored résumé, used to group interview history"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "resume_text": "Backend engineer, 4 years of Java, Spring Boot, Redis, MySQL...",
                "question_count": 5,
                "resume_id": 42
            }
        }
    }


class SubmitAnswerRequest(BaseModel):
    """Answer to the current interview question."""
    question_index: int = Field(..., description="Zero-based index of the question being answered")
    answer: str = Field(..., description="The candidate's answer")

    model_config = {
        "json_schema_extra": {
            "example": {
                "question_index": 0,
                "answer": "I designed the order service around an outbox table..."
            }
        }
    }


# ============================================================================
# Response Models
# ============================================================================

class QuestionResponse(BaseModel):
    """A single interview question with its answer state."""
    question_index: int
    question: str
    category: str
    user_answer: Optional[str] = None
    score: Optional[int] = None
    feedback: Optional[str] = None

    @classmethod
    def from_slot(cls, slot: QuestionSlot) -> "QuestionResponse":
        return cls(
            question_index=slot.index,
            question=slot.question,
            category=slot.category,
            user_answer=slot.answer,
            score=slot.score,
            feedback=slot.feedback,
        )


class SessionResponse(BaseModel):
    """Full session state."""
    session_id: str
    resume_id: Optional[int] = None
    resume_text: str
    status: SessionStatus
    total_questions: int
    current_question_index: int
    questions: List[QuestionResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            resume_id=session.resume_id,
            resume_text=session.resume_text,
            status=session.status,
            total_questions=session.total_questions,
            current_question_index=session.cursor,
            questions=[QuestionResponse.from_slot(slot) for slot in session.slots],
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class SessionSummary(BaseModel):
    """Session entry in the interview history list."""
    session_id: str
    resume_id: Optional[int] = None
    status: SessionStatus
    total_questions: int
    questions_answered: int
    overall_score: Optional[float] = None
    created_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionSummary":
        return cls(
            session_id=session.session_id,
            resume_id=session.resume_id,
            status=session.status,
            total_questions=session.total_questions,
            questions_answered=session.questions_answered,
            overall_score=session.report.overall_score if session.report else None,
            created_at=session.created_at,
        )


class CurrentQuestionResponse(BaseModel):
    """The question awaiting an answer, if any."""
    session_id: str
    completed: bool
    question: Optional[QuestionResponse] = None
    total_questions: int
    message: Optional[str] = None


class SubmitAnswerResponse(BaseModel):
    """Result of an accepted answer."""
    session_id: str
    has_next_question: bool
    next_question: Optional[QuestionResponse] = None
    current_index: int
    total_questions: int
    status: SessionStatus

    @classmethod
    def from_result(cls, session_id: str, result: SubmissionResult) -> "SubmitAnswerResponse":
        return cls(
            session_id=session_id,
            has_next_question=result.has_next_question,
            next_question=(
                QuestionResponse.from_slot(result.next_question)
                if result.next_question else None
            ),
            current_index=result.current_index,
            total_questions=result.total_questions,
            status=result.status,
        )


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str
    session_id: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "SessionNotFoundError",
                "detail": "Session not found: 3f2a9c1e7b6d4e05",
                "session_id": "3f2a9c1e7b6d4e05"
            }
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: datetime
    active_sessions: int
