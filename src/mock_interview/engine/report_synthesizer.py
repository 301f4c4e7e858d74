# Report Synthesizer
"""
Turns a COMPLETED session and the evaluator's output into the final Report.

Synthesis is split in two so the external evaluation call never runs under
the session lock:
1. build_request() reads a snapshot and produces the evaluation request
2. attach() runs inside SessionStore.mutate once the evaluation is back
"""

import logging
from datetime import datetime
from typing import Dict, List

from .exceptions import EvaluationError, NotCompleteError
from .interfaces import AnsweredQuestion, EvaluationRequest, InterviewEvaluation
from .models import (
    CategoryScore,
    QuestionEvaluation,
    ReferenceAnswer,
    Report,
    Session,
    SessionStatus,
)

logger = logging.getLogger(__name__)


class ReportSynthesizer:
    """Builds evaluation requests and attaches reports to sessions."""

    @staticmethod
    def _require_completed(session: Session) -> None:
        if session.status != SessionStatus.COMPLETED:
            if session.status == SessionStatus.EVALUATED:
                detail = "report already generated"
            else:
                detail = f"{session.questions_answered}/{session.total_questions} questions answered"
            raise NotCompleteError(
                f"Session {session.session_id} is {session.status.value}; "
                f"cannot generate report ({detail})",
                session.session_id,
            )

    def build_request(self, session: Session) -> EvaluationRequest:
        """
        Build the evaluation request for a finished interview.

        Raises:
            NotCompleteError: If the session is not COMPLETED
        """
        self._require_completed(session)
        return EvaluationRequest(
            session_id=session.session_id,
            resume_text=session.resume_text,
            answered_questions=[
                AnsweredQuestion(
                    question=slot.question,
                    category=slot.category,
                    answer=slot.answer or "",
                )
                for slot in session.slots
            ],
        )

    @staticmethod
    def aggregate_categories(scores: List[int], categories: List[str]) -> List[CategoryScore]:
        """Mean score per category, every question weighted equally."""
        totals: Dict[str, List[int]] = {}
        for score, category in zip(scores, categories):
            totals.setdefault(category, []).append(score)

        return [
            CategoryScore(
                category=category,
                score=sum(values) / len(values),
                question_count=len(values),
            )
            for category, values in totals.items()
        ]

    def attach(self, session: Session, evaluation: InterviewEvaluation) -> Report:
        """
        Attach scores, feedback and the Report; move the session to EVALUATED.

        Raises:
            NotCompleteError: If the session is no longer COMPLETED
            EvaluationError: If the evaluation does not cover every question
        """
        self._require_completed(session)

        if len(evaluation.per_question) != len(session.slots):
            raise EvaluationError(
                f"Evaluator returned {len(evaluation.per_question)} scores "
                f"for {len(session.slots)} questions",
                session.session_id,
            )

        details = []
        for slot, result in zip(session.slots, evaluation.per_question):
            details.append(QuestionEvaluation(
                question_index=slot.index,
                question=slot.question,
                category=slot.category,
                user_answer=slot.answer or "",
                score=result.score,
                feedback=result.feedback,
            ))

        scores = [d.score for d in details]
        by_question = {slot.question: slot.index for slot in session.slots}
        reference_answers = [
            ReferenceAnswer(
                question_index=by_question.get(ref.question, position),
                question=ref.question,
                reference_answer=ref.reference_answer,
                key_points=list(ref.key_points),
            )
            for position, ref in enumerate(evaluation.reference_answers)
        ]

        report = Report(
            session_id=session.session_id,
            total_questions=len(session.slots),
            overall_score=sum(scores) / len(scores),
            category_scores=self.aggregate_categories(scores, [d.category for d in details]),
            question_details=details,
            overall_feedback=evaluation.overall_feedback,
            strengths=list(evaluation.strengths),
            improvements=list(evaluation.improvements),
            reference_answers=reference_answers,
            evaluated_at=datetime.now(),
        )

        for slot, detail in zip(session.slots, details):
            slot.score = detail.score
            slot.feedback = detail.feedback
        session.report = report
        session.status = SessionStatus.EVALUATED

        logger.info(
            f"Session {session.session_id}: report attached, "
            f"overall score {report.overall_score:.1f}"
        )
        return report
