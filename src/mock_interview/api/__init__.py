# Mock Interview API Package
"""
FastAPI backend for the mock interview session engine.

Provides REST API endpoints for:
- Starting interview sessions from a résumé
- Getting the current question
- Submitting answers in order
- Generating and retrieving evaluation reports
"""

from .main import app
from .service import build_controller, get_controller

__all__ = [
    "app",
    "build_controller",
    "get_controller",
]
