# Session Lifecycle Controller
"""
Externally facing orchestrator of the interview session engine.

Composes the SessionStore, the submission pipeline and the report
synthesizer with the external question generator, answer evaluator and the
persistence side-channel.

External calls always happen before anything is committed: a failed,
timed-out or cancelled generation/evaluation leaves the store exactly as it
was.
"""

import asyncio
import logging
import uuid
from typing import Awaitable, List, Optional, TypeVar

from ..config import ENGINE_CONFIG
from .exceptions import (
    EvaluationError,
    GenerationError,
    InterviewEngineError,
    InvalidQuestionCountError,
    NotCompleteError,
    QuestionGenerationError,
)
from .interfaces import AnswerEvaluator, GeneratedQuestion, QuestionGenerator, SessionPersistence
from .models import QuestionSlot, Report, Session, SubmissionResult
from .persistence import PersistenceDispatcher
from .report_synthesizer import ReportSynthesizer
from .sequencer import QuestionSequencer
from .session_store import SessionStore
from .submission import AnswerSubmissionPipeline

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_session_id() -> str:
    """Opaque, globally unique session identifier."""
    return uuid.uuid4().hex[:ENGINE_CONFIG["session_id_length"]]


async def _await_with_timeout(call: Awaitable[T], timeout: Optional[float]) -> T:
    if timeout is None:
        return await call
    return await asyncio.wait_for(call, timeout=timeout)


class SessionLifecycleController:
    """
    Creates sessions, routes answers and generates reports.

    Usage:
        controller = SessionLifecycleController(generator, evaluator)
        session = await controller.create_session(resume_text, 5)
        result = controller.submit_answer(session.session_id, 0, "My answer...")
        ...
        report = await controller.generate_report(session.session_id)
    """

    def __init__(
        self,
        question_generator: QuestionGenerator,
        answer_evaluator: AnswerEvaluator,
        store: Optional[SessionStore] = None,
        persistence: Optional[SessionPersistence] = None,
        dispatcher: Optional[PersistenceDispatcher] = None,
    ):
        self.question_generator = question_generator
        self.answer_evaluator = answer_evaluator
        self.store = store or SessionStore()
        self.dispatcher = dispatcher or PersistenceDispatcher(persistence)
        self.sequencer = QuestionSequencer()
        self.pipeline = AnswerSubmissionPipeline(self.sequencer)
        self.synthesizer = ReportSynthesizer()

    # ========================================================================
    # Session Creation
    # ========================================================================

    @staticmethod
    def validate_question_count(question_count: int) -> None:
        low = ENGINE_CONFIG["min_question_count"]
        high = ENGINE_CONFIG["max_question_count"]
        if not isinstance(question_count, int) or isinstance(question_count, bool):
            raise InvalidQuestionCountError(
                f"Question count must be an integer, got {question_count!r}"
            )
        if not low <= question_count <= high:
            raise InvalidQuestionCountError(
                f"Question count must be between {low} and {high}, got {question_count}"
            )

    def _build_slots(self, questions: List[GeneratedQuestion], count: int) -> List[QuestionSlot]:
        if len(questions) < count:
            raise QuestionGenerationError(
                f"Question generator returned {len(questions)} questions, expected {count}"
            )
        if len(questions) > count:
            logger.warning(
                f"Question generator returned {len(questions)} questions, keeping the first {count}"
            )

        slots = []
        for index, generated in enumerate(questions[:count]):
            text = generated.question.strip()
            if not text:
                raise QuestionGenerationError(f"Question generator returned an empty question at {index}")
            slots.append(QuestionSlot(
                index=index,
                question=text,
                category=(generated.category or "GENERAL").strip() or "GENERAL",
            ))
        return slots

    async def create_session(
        self,
        resume_text: str,
        question_count: int,
        resume_id: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Session:
        """
        Create a new interview session.

        Args:
            resume_text: Candidate résumé used to tailor questions
            question_count: Number of questions, fixed for the session lifetime
            resume_id: Optional reference to a stored résumé
            timeout: Optional limit in seconds for question generation

        Returns:
            Snapshot of the new session (status CREATED)

        Raises:
            InvalidQuestionCountError: Question count outside the allowed range
            QuestionGenerationError: Questions could not be generated
        """
        self.validate_question_count(question_count)
        session_id = new_session_id()

        logger.info(
            f"🚀 Creating session {session_id}: {question_count} questions, resume_id={resume_id}"
        )

        try:
            questions = await _await_with_timeout(
                self.question_generator.generate(resume_text, question_count), timeout
            )
        except QuestionGenerationError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"Session {session_id}: question generation timed out after {timeout}s")
            raise QuestionGenerationError(
                f"Question generation timed out after {timeout}s", session_id
            ) from e
        except GenerationError as e:
            logger.error(f"Session {session_id}: question generation failed: {e}")
            raise QuestionGenerationError(f"Question generation failed: {e}", session_id) from e
        except Exception as e:
            logger.exception(f"Session {session_id}: question generator crashed: {e}")
            raise QuestionGenerationError(f"Question generation failed: {e}", session_id) from e

        session = Session(
            session_id=session_id,
            resume_text=resume_text,
            resume_id=resume_id,
            slots=self._build_slots(questions, question_count),
        )
        self.store.create(session)
        logger.info(f"✅ Session {session_id} created with {session.total_questions} questions")

        self.dispatcher.save(session_id, session.to_dict())
        return self.store.get(session_id)

    # ========================================================================
    # Queries
    # ========================================================================

    def get_session(self, session_id: str) -> Session:
        return self.store.get(session_id)

    def get_current_question(self, session_id: str) -> Optional[QuestionSlot]:
        """The question awaiting an answer, or None if all are answered."""
        return self.sequencer.current_slot(self.store.get(session_id))

    def get_report(self, session_id: str) -> Report:
        session = self.store.get(session_id)
        if session.report is None:
            raise NotCompleteError(
                f"Session {session_id} has no report yet (status {session.status.value})",
                session_id,
            )
        return session.report

    def list_sessions(self, resume_id: Optional[int] = None) -> List[Session]:
        return self.store.list_sessions(resume_id)

    def delete_session(self, session_id: str) -> bool:
        return self.store.delete(session_id)

    # ========================================================================
    # Answer Submission
    # ========================================================================

    def submit_answer(self, session_id: str, ordinal: int, answer_text: str) -> SubmissionResult:
        """
        Submit the answer to the current question.

        Raises:
            SessionNotFoundError: Unknown session
            InvalidQuestionIndexError: Ordinal out of range
            QuestionIndexMismatchError: Ordinal is not the current question
            SessionTerminalError: Session no longer accepts answers
            EmptyAnswerError: Blank answer
        """
        def transition(session: Session) -> SubmissionResult:
            return self.pipeline.apply(session, ordinal, answer_text)

        # Queued under the session lock so writes land in commit order
        def persist(session: Session, result: SubmissionResult) -> None:
            if self.dispatcher.enabled:
                self.dispatcher.append_answer(session_id, ordinal, session.slots[ordinal].answer)
                self.dispatcher.save(session_id, session.to_dict())

        try:
            result = self.store.mutate(session_id, transition, on_commit=persist)
        except InterviewEngineError as e:
            logger.warning(f"Session {session_id}: answer for question {ordinal} rejected: {e}")
            raise

        logger.info(
            f"Session {session_id}: answer {ordinal + 1}/{result.total_questions} accepted, "
            f"status {result.status.value}"
        )
        return result

    # ========================================================================
    # Report Generation
    # ========================================================================

    async def generate_report(self, session_id: str, timeout: Optional[float] = None) -> Report:
        """
        Evaluate a completed interview and attach the final report.

        Args:
            session_id: Session to evaluate
            timeout: Optional limit in seconds for the evaluation call

        Returns:
            The attached Report

        Raises:
            SessionNotFoundError: Unknown session
            NotCompleteError: Session is not COMPLETED (including already EVALUATED)
            EvaluationError: Evaluator failed; the session stays COMPLETED
        """
        request = self.synthesizer.build_request(self.store.get(session_id))

        logger.info(f"🔍 Running evaluation for session {session_id}...")
        try:
            evaluation = await _await_with_timeout(
                self.answer_evaluator.evaluate(request.resume_text, request.answered_questions),
                timeout,
            )
        except EvaluationError:
            logger.error(f"Session {session_id}: evaluation failed, session stays COMPLETED")
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"Session {session_id}: evaluation timed out after {timeout}s")
            raise EvaluationError(f"Evaluation timed out after {timeout}s", session_id) from e
        except Exception as e:
            logger.exception(f"Session {session_id}: evaluator crashed: {e}")
            raise EvaluationError(f"Evaluation failed: {e}", session_id) from e

        def transition(session: Session) -> Report:
            return self.synthesizer.attach(session, evaluation)

        def persist(session: Session, report: Report) -> None:
            if self.dispatcher.enabled:
                self.dispatcher.save_report(session_id, report)
                self.dispatcher.save(session_id, session.to_dict())

        report = self.store.mutate(session_id, transition, on_commit=persist)
        logger.info(f"✅ Evaluation completed for session {session_id}")
        return report

    @property
    def active_session_count(self) -> int:
        return self.store.active_session_count

