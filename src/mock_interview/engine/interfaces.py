# External Capabilities
"""
Interfaces of the collaborators the engine calls but does not implement:
question generation, answer evaluation and the durable persistence
side-channel.

The payload models double as structured-output schemas for the crewai crews.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .models import Report


# ============================================================================
# Payload Models
# ============================================================================

class GeneratedQuestion(BaseModel):
    """A generated interview question and its category tag."""
    question: str = Field(..., description="The interview question text")
    category: str = Field(..., description="Short category tag, e.g. PROJECT or REDIS")


class GeneratedQuestions(BaseModel):
    """Structured output of the question generation crew."""
    questions: List[GeneratedQuestion]


class AnsweredQuestion(BaseModel):
    """A question together with the candidate's answer."""
    question: str
    category: str
    answer: str


class EvaluationRequest(BaseModel):
    """Everything the evaluator needs to score a finished interview."""
    session_id: str
    resume_text: str
    answered_questions: List[AnsweredQuestion]


class QuestionScore(BaseModel):
    """Score and feedback for one answer."""
    score: int = Field(..., ge=0, le=100)
    feedback: str


class ReferenceAnswerDraft(BaseModel):
    """Reference answer proposed by the evaluator."""
    question: str
    reference_answer: str
    key_points: List[str] = Field(default_factory=list)


class InterviewEvaluation(BaseModel):
    """Structured output of the evaluation crew."""
    per_question: List[QuestionScore]
    overall_feedback: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    reference_answers: List[ReferenceAnswerDraft] = Field(default_factory=list)


# ============================================================================
# Capability Interfaces
# ============================================================================

class QuestionGenerator(ABC):
    """Generates the ordered question list for a new session."""

    @abstractmethod
    async def generate(self, resume_text: str, count: int) -> List[GeneratedQuestion]:
        """
        Generate interview questions tailored to a résumé.

        Raises:
            GenerationError: If the questions could not be produced
        """


class AnswerEvaluator(ABC):
    """Scores every answer of a finished interview in one batch."""

    @abstractmethod
    async def evaluate(
        self,
        resume_text: str,
        answered_questions: List[AnsweredQuestion]
    ) -> InterviewEvaluation:
        """
        Evaluate the ordered answers of an interview.

        Raises:
            EvaluationError: If the evaluation could not be produced
        """


class SessionPersistence(ABC):
    """Durable copy of session state. Written fire-and-forget by the engine."""

    @abstractmethod
    def save(self, session_id: str, snapshot: Dict[str, Any]) -> None: ...

    @abstractmethod
    def append_answer(self, session_id: str, ordinal: int, answer_text: str) -> None: ...

    @abstractmethod
    def save_report(self, session_id: str, report: Report) -> None: ...
