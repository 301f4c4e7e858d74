# Evaluation Crew
"""
CrewAI crew for scoring the answers of a finished interview.
"""
import logging
from typing import List

from crewai import LLM, Agent, Crew, Process, Task
from crewai.agents.agent_builder.base_agent import BaseAgent
from crewai.project import CrewBase, agent, crew, task
from pydantic import ValidationError

from mock_interview.config import LLM_CONFIG
from mock_interview.engine.exceptions import EvaluationError
from mock_interview.engine.interfaces import (
    AnsweredQuestion,
    AnswerEvaluator,
    InterviewEvaluation,
)

logger = logging.getLogger(__name__)


@CrewBase
class EvaluationCrew():
    """Crew for analyzing interview performance"""

    agents_config: str = 'config/agents.yaml'
    tasks_config: str = 'config/tasks.yaml'

    agents: List[BaseAgent]
    tasks: List[Task]

    @agent
    def evaluator(self) -> Agent:
        return Agent(
            config=self.agents_config['evaluator'],  # type: ignore[index]
            llm=LLM(model=LLM_CONFIG["model"]),
            verbose=LLM_CONFIG["verbose"]
        )

    @task
    def evaluate_interview(self) -> Task:
        return Task(
            config=self.tasks_config['evaluate_interview'],  # type: ignore[index]
            output_pydantic=InterviewEvaluation
        )

    @crew
    def crew(self) -> Crew:
        """Creates the evaluation crew"""
        return Crew(
            agents=self.agents,
            tasks=self.tasks,
            process=Process.sequential,
            verbose=LLM_CONFIG["verbose"],
        )


def format_transcript(answered_questions: List[AnsweredQuestion]) -> str:
    """
    Format the answered questions into a readable transcript string.

    Args:
        answered_questions: Ordered questions with the candidate's answers

    Returns:
        Formatted transcript string for the evaluation crew
    """
    lines = []
    for i, qa in enumerate(answered_questions, 1):
        lines.append(f"\n[QUESTION {i} - {qa.category}]")
        lines.append(f"Interviewer: {qa.question}")
        lines.append(f"Candidate: {qa.answer}")

    return "\n".join(lines)


def parse_evaluation(result) -> InterviewEvaluation:
    """Extract the structured evaluation from a crew result."""
    output = getattr(result, "pydantic", None)
    if isinstance(output, InterviewEvaluation):
        return output

    raw = getattr(result, "raw", None) or str(result)
    try:
        return InterviewEvaluation.model_validate_json(raw)
    except ValidationError as e:
        raise EvaluationError(f"Evaluation crew returned unparseable output: {e}") from e


class CrewAnswerEvaluator(AnswerEvaluator):
    """AnswerEvaluator that runs the EvaluationCrew."""

    async def evaluate(
        self,
        resume_text: str,
        answered_questions: List[AnsweredQuestion]
    ) -> InterviewEvaluation:
        if not answered_questions:
            raise EvaluationError("Interview transcript cannot be empty")

        logger.info(f"🔍 Running evaluation with {len(answered_questions)} Q&A pairs...")
        try:
            result = await EvaluationCrew().crew().kickoff_async(inputs={
                "resume_text": resume_text or "No résumé provided.",
                "question_count": len(answered_questions),
                "interview_transcript": format_transcript(answered_questions),
            })
        except Exception as e:
            logger.exception(f"❌ Evaluation failed: {e}")
            raise EvaluationError(f"Evaluation failed: {str(e)}") from e

        evaluation = parse_evaluation(result)
        logger.info("✅ Evaluation completed successfully")
        return evaluation
