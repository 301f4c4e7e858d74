# Crews
"""crewai-backed implementations of the question generator and answer evaluator."""

from .evaluation_crew.evaluation_crew import CrewAnswerEvaluator, EvaluationCrew
from .question_crew.question_crew import CrewQuestionGenerator, QuestionCrew

__all__ = [
    "QuestionCrew",
    "CrewQuestionGenerator",
    "EvaluationCrew",
    "CrewAnswerEvaluator",
]
