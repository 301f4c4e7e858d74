# Engine Models
"""
Session state and report models for the interview session engine.

Session and QuestionSlot are plain dataclasses owned by the SessionStore;
the Report and its parts are frozen pydantic models so they can be handed to
persistence and the API without copying.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SessionStatus(str, Enum):
    """Lifecycle status of an interview session."""
    CREATED = "CREATED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    EVALUATED = "EVALUATED"


# ============================================================================
# Report Models
# ============================================================================

class CategoryScore(BaseModel):
    """Mean score of every question sharing a category."""
    category: str
    score: float
    question_count: int

    model_config = {"frozen": True}


class QuestionEvaluation(BaseModel):
    """Evaluated answer for a single question."""
    question_index: int
    question: str
    category: str
    user_answer: str
    score: int = Field(ge=0, le=100)
    feedback: str

    model_config = {"frozen": True}


class ReferenceAnswer(BaseModel):
    """Model answer for a question."""
    question_index: int
    question: str
    reference_answer: str
    key_points: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class Report(BaseModel):
    """Final evaluation report of a session."""
    session_id: str
    total_questions: int
    overall_score: float
    category_scores: List[CategoryScore]
    question_details: List[QuestionEvaluation]
    overall_feedback: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    reference_answers: List[ReferenceAnswer] = Field(default_factory=list)
    evaluated_at: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True}


# ============================================================================
# Session State
# ============================================================================

@dataclass
class QuestionSlot:
    """A question of the interview and its answer/evaluation state."""
    index: int
    question: str
    category: str
    answer: Optional[str] = None
    score: Optional[int] = None
    feedback: Optional[str] = None
    answered_at: Optional[datetime] = None

    @property
    def is_answered(self) -> bool:
        return self.answer is not None


@dataclass
class Session:
    """Complete state of an interview session."""
    session_id: str
    resume_text: str
    slots: List[QuestionSlot]
    resume_id: Optional[int] = None
    cursor: int = 0
    status: SessionStatus = SessionStatus.CREATED
    report: Optional[Report] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def total_questions(self) -> int:
        return len(self.slots)

    @property
    def questions_answered(self) -> int:
        return sum(1 for slot in self.slots if slot.is_answered)

    @property
    def accepts_answers(self) -> bool:
        return self.status in (SessionStatus.CREATED, SessionStatus.IN_PROGRESS)

    @property
    def current_slot(self) -> Optional[QuestionSlot]:
        if 0 <= self.cursor < len(self.slots):
            return self.slots[self.cursor]
        return None

    def to_dict(self) -> dict:
        """JSON-friendly snapshot used by the persistence side-channel."""
        return {
            "session_id": self.session_id,
            "resume_id": self.resume_id,
            "resume_text": self.resume_text,
            "status": self.status.value,
            "cursor": self.cursor,
            "total_questions": self.total_questions,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "questions": [
                {
                    "index": slot.index,
                    "question": slot.question,
                    "category": slot.category,
                    "answer": slot.answer,
                    "score": slot.score,
                    "feedback": slot.feedback,
                    "answered_at": slot.answered_at.isoformat() if slot.answered_at else None,
                }
                for slot in self.slots
            ],
            "report": self.report.model_dump(mode="json") if self.report else None,
        }


@dataclass
class SubmissionResult:
    """Outcome of an accepted answer submission."""
    has_next_question: bool
    next_question: Optional[QuestionSlot]
    current_index: int
    total_questions: int
    status: SessionStatus
