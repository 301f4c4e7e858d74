"""
Shared fixtures and deterministic test doubles for the engine tests.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from mock_interview.engine.controller import SessionLifecycleController
from mock_interview.engine.exceptions import EvaluationError, GenerationError
from mock_interview.engine.interfaces import (
    AnsweredQuestion,
    AnswerEvaluator,
    GeneratedQuestion,
    InterviewEvaluation,
    QuestionGenerator,
    QuestionScore,
    ReferenceAnswerDraft,
    SessionPersistence,
)
from mock_interview.engine.models import QuestionSlot, Report, Session
from mock_interview.engine.persistence import PersistenceDispatcher
from mock_interview.engine.session_store import SessionStore

CATEGORIES = ["PROJECT", "REDIS", "PROJECT", "MYSQL", "SPRING"]

RESUME_TEXT = (
    "Backend engineer with four years of Java and Spring Boot. "
    "Built an order service on MySQL with a Redis cache."
)


class FakeQuestionGenerator(QuestionGenerator):
    """Returns numbered questions cycling through CATEGORIES."""

    def __init__(self, fail: bool = False, delay: float = 0.0, extra: int = 0):
        self.fail = fail
        self.delay = delay
        self.extra = extra
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, resume_text: str, count: int) -> List[GeneratedQuestion]:
        self.calls.append({"resume_text": resume_text, "count": count})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise GenerationError("model unavailable")
        return [
            GeneratedQuestion(
                question=f"Question {i + 1}?",
                category=CATEGORIES[i % len(CATEGORIES)],
            )
            for i in range(count + self.extra)
        ]


class FakeAnswerEvaluator(AnswerEvaluator):
    """Scores answers from a fixed list (or 70 + index when none is given)."""

    def __init__(self, scores: Optional[List[int]] = None, fail: bool = False, delay: float = 0.0):
        self.scores = scores
        self.fail = fail
        self.delay = delay
        self.calls: List[List[AnsweredQuestion]] = []

    async def evaluate(
        self,
        resume_text: str,
        answered_questions: List[AnsweredQuestion]
    ) -> InterviewEvaluation:
        self.calls.append(list(answered_questions))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise EvaluationError("evaluator unavailable")

        scores = self.scores or [70 + i for i in range(len(answered_questions))]
        return InterviewEvaluation(
            per_question=[
                QuestionScore(score=score, feedback=f"Feedback for answer {i + 1}")
                for i, score in enumerate(scores)
            ],
            overall_feedback="Solid fundamentals, go deeper on trade-offs.",
            strengths=["Clear structure"],
            improvements=["Quantify impact"],
            reference_answers=[
                ReferenceAnswerDraft(
                    question=qa.question,
                    reference_answer=f"Reference for {qa.question}",
                    key_points=["point a", "point b"],
                )
                for qa in answered_questions
            ],
        )


class RecordingPersistence(SessionPersistence):
    """Keeps every persistence call in memory."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved: List[tuple] = []
        self.answers: List[tuple] = []
        self.reports: List[tuple] = []

    def save(self, session_id: str, snapshot: Dict[str, Any]) -> None:
        if self.fail:
            raise IOError("disk full")
        self.saved.append((session_id, snapshot))

    def append_answer(self, session_id: str, ordinal: int, answer_text: str) -> None:
        if self.fail:
            raise IOError("disk full")
        self.answers.append((session_id, ordinal, answer_text))

    def save_report(self, session_id: str, report: Report) -> None:
        if self.fail:
            raise IOError("disk full")
        self.reports.append((session_id, report))


def make_session(count: int = 3, session_id: str = "session-1", resume_id: Optional[int] = None) -> Session:
    return Session(
        session_id=session_id,
        resume_text=RESUME_TEXT,
        resume_id=resume_id,
        slots=[
            QuestionSlot(index=i, question=f"Question {i + 1}?", category=CATEGORIES[i % len(CATEGORIES)])
            for i in range(count)
        ],
    )


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def generator():
    return FakeQuestionGenerator()


@pytest.fixture
def evaluator():
    return FakeAnswerEvaluator()


@pytest.fixture
def persistence():
    return RecordingPersistence()


@pytest.fixture
def controller(generator, evaluator, store, persistence):
    dispatcher = PersistenceDispatcher(persistence)
    controller = SessionLifecycleController(
        question_generator=generator,
        answer_evaluator=evaluator,
        store=store,
        dispatcher=dispatcher,
    )
    yield controller
    dispatcher.shutdown()
