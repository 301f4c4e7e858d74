# Controller Wiring
"""
Builds the process-wide SessionLifecycleController used by the API.
"""

import logging
from threading import Lock
from typing import Optional

from mock_interview.config import PERSISTENCE_CONFIG
from mock_interview.engine.controller import SessionLifecycleController
from mock_interview.engine.persistence import JsonFileSessionPersistence, PersistenceDispatcher

logger = logging.getLogger(__name__)

_controller: Optional[SessionLifecycleController] = None
_controller_lock = Lock()


def build_controller() -> SessionLifecycleController:
    """Controller backed by the crewai crews and, if enabled, JSON persistence."""
    from mock_interview.crews import CrewAnswerEvaluator, CrewQuestionGenerator

    persistence = None
    if PERSISTENCE_CONFIG["enabled"]:
        persistence = JsonFileSessionPersistence(PERSISTENCE_CONFIG["directory"])

    return SessionLifecycleController(
        question_generator=CrewQuestionGenerator(),
        answer_evaluator=CrewAnswerEvaluator(),
        dispatcher=PersistenceDispatcher(persistence, max_workers=PERSISTENCE_CONFIG["max_workers"]),
    )


def get_controller() -> SessionLifecycleController:
    """Dependency returning the global controller singleton."""
    global _controller
    if _controller is None:
        with _controller_lock:
            if _controller is None:
                _controller = build_controller()
                logger.info("SessionLifecycleController initialized")
    return _controller


def shutdown_controller() -> None:
    """Drain pending persistence writes."""
    global _controller
    with _controller_lock:
        if _controller is not None:
            _controller.dispatcher.shutdown()
            _controller = None
