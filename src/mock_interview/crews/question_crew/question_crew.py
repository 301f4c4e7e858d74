# Question Crew
"""
CrewAI crew for generating résumé-based interview questions.
"""
import logging
from typing import List

from crewai import LLM, Agent, Crew, Process, Task
from crewai.agents.agent_builder.base_agent import BaseAgent
from crewai.project import CrewBase, agent, crew, task
from pydantic import ValidationError

from mock_interview.config import LLM_CONFIG
from mock_interview.engine.exceptions import GenerationError
from mock_interview.engine.interfaces import (
    GeneratedQuestion,
    GeneratedQuestions,
    QuestionGenerator,
)

logger = logging.getLogger(__name__)


@CrewBase
class QuestionCrew():
    """
    Crew for generating interview questions.

    This crew is responsible for:
    - Reading the candidate résumé
    - Producing an ordered list of questions, each tagged with a category
    """

    agents_config: str = 'config/agents.yaml'
    tasks_config: str = 'config/tasks.yaml'

    agents: List[BaseAgent]
    tasks: List[Task]

    @agent
    def interviewer(self) -> Agent:
        """The interviewer agent that writes the questions."""
        return Agent(
            config=self.agents_config['interviewer'],  # type: ignore[index]
            llm=LLM(model=LLM_CONFIG["model"]),
            verbose=LLM_CONFIG["verbose"],
            allow_delegation=False,
            max_iter=5  # Limit iterations for faster responses
        )

    @task
    def generate_interview_questions(self) -> Task:
        """Task for generating the full question list."""
        return Task(
            config=self.tasks_config['generate_interview_questions'],  # type: ignore[index]
            output_pydantic=GeneratedQuestions
        )

    @crew
    def crew(self) -> Crew:
        """Creates the question generation crew."""
        return Crew(
            agents=self.agents,
            tasks=self.tasks,
            process=Process.sequential,
            verbose=LLM_CONFIG["verbose"],
        )


def parse_questions(result) -> List[GeneratedQuestion]:
    """Extract the structured question list from a crew result."""
    output = getattr(result, "pydantic", None)
    if isinstance(output, GeneratedQuestions):
        return list(output.questions)

    raw = getattr(result, "raw", None) or str(result)
    try:
        return list(GeneratedQuestions.model_validate_json(raw).questions)
    except ValidationError as e:
        raise GenerationError(f"Question crew returned unparseable output: {e}") from e


class CrewQuestionGenerator(QuestionGenerator):
    """QuestionGenerator that runs the QuestionCrew."""

    async def generate(self, resume_text: str, count: int) -> List[GeneratedQuestion]:
        logger.info(f"❓ Generating {count} interview questions...")
        try:
            result = await QuestionCrew().crew().kickoff_async(inputs={
                "resume_text": resume_text or "No résumé provided.",
                "question_count": count,
            })
        except Exception as e:
            logger.exception(f"❌ Question generation failed: {e}")
            raise GenerationError(f"Question generation failed: {str(e)}") from e

        questions = parse_questions(result)
        logger.info(f"✅ {len(questions)} questions generated")
        return questions
