# API Routes
"""
FastAPI route handlers for the Mock Interview API.

Engine errors are not caught here; the exception handlers registered in
main.py translate them into HTTP responses.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from mock_interview.config import LLM_CONFIG
from mock_interview.engine.controller import SessionLifecycleController
from mock_interview.engine.models import Report

from .models import (
    CreateSessionRequest,
    CurrentQuestionResponse,
    ErrorResponse,
    QuestionResponse,
    SessionResponse,
    SessionSummary,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)
from .service import get_controller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["interview"])


# ============================================================================
# Session Management Endpoints
# ============================================================================

@router.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Start a new interview session",
    description="Generate interview questions from the résumé and open a new session."
)
async def create_session(
    request: CreateSessionRequest,
    controller: SessionLifecycleController = Depends(get_controller)
) -> SessionResponse:
    """
    Start a new interview session.

    Blocks until all questions are generated. Nothing is created if
    generation fails.
    """
    session = await controller.create_session(
        resume_text=request.resume_text,
        question_count=request.question_count,
        resume_id=request.resume_id,
        timeout=LLM_CONFIG["generation_timeout"],
    )
    return SessionResponse.from_session(session)


@router.get(
    "/sessions",
    response_model=List[SessionSummary],
    summary="List interview sessions",
    description="List live sessions, newest first, optionally for a single résumé."
)
async def list_sessions(
    resume_id: Optional[int] = None,
    controller: SessionLifecycleController = Depends(get_controller)
) -> List[SessionSummary]:
    return [SessionSummary.from_session(s) for s in controller.list_sessions(resume_id)]


@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get session status",
    description="Retrieve the current status and questions of an interview session."
)
async def get_session(
    session_id: str,
    controller: SessionLifecycleController = Depends(get_controller)
) -> SessionResponse:
    return SessionResponse.from_session(controller.get_session(session_id))


@router.delete(
    "/sessions/{session_id}",
    responses={404: {"model": ErrorResponse}},
    summary="Delete a session",
    description="Remove an interview session from memory."
)
async def delete_session(
    session_id: str,
    controller: SessionLifecycleController = Depends(get_controller)
) -> dict:
    if not controller.delete_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")

    return {"message": f"Session {session_id} deleted successfully"}


# ============================================================================
# Interview Flow Endpoints
# ============================================================================

@router.get(
    "/sessions/{session_id}/question",
    response_model=CurrentQuestionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get current question",
    description="Get the question the candidate should answer next."
)
async def get_current_question(
    session_id: str,
    controller: SessionLifecycleController = Depends(get_controller)
) -> CurrentQuestionResponse:
    session = controller.get_session(session_id)
    slot = controller.get_current_question(session_id)

    if slot is None:
        return CurrentQuestionResponse(
            session_id=session_id,
            completed=True,
            total_questions=session.total_questions,
            message="All questions answered. Generate the report to see your evaluation."
        )

    return CurrentQuestionResponse(
        session_id=session_id,
        completed=False,
        question=QuestionResponse.from_slot(slot),
        total_questions=session.total_questions
    )


@router.post(
    "/sessions/{session_id}/answers",
    response_model=SubmitAnswerResponse,
    responses={404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
    summary="Submit an answer",
    description="Submit the answer to the current question. Answers must be sent in question order."
)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    controller: SessionLifecycleController = Depends(get_controller)
) -> SubmitAnswerResponse:
    result = controller.submit_answer(session_id, request.question_index, request.answer)
    return SubmitAnswerResponse.from_result(session_id, result)


# ============================================================================
# Results Endpoints
# ============================================================================

@router.post(
    "/sessions/{session_id}/report",
    response_model=Report,
    responses={404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Generate evaluation report",
    description="Score all answers of a completed interview and attach the final report."
)
async def generate_report(
    session_id: str,
    controller: SessionLifecycleController = Depends(get_controller)
) -> Report:
    return await controller.generate_report(
        session_id, timeout=LLM_CONFIG["evaluation_timeout"]
    )


@router.get(
    "/sessions/{session_id}/report",
    response_model=Report,
    responses={404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
    summary="Get evaluation report",
    description="Get the report of an evaluated interview."
)
async def get_report(
    session_id: str,
    controller: SessionLifecycleController = Depends(get_controller)
) -> Report:
    return controller.get_report(session_id)
