# FastAPI Application
"""
Main FastAPI application for the Mock Interview API.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mock_interview.config import API_CONFIG
from mock_interview.engine.controller import SessionLifecycleController
from mock_interview.engine.exceptions import (
    DuplicateSessionError,
    ExternalDependencyError,
    InterviewEngineError,
    SessionNotFoundError,
    SessionValidationError,
)
from mock_interview.logging_config import configure_logging

from .models import HealthResponse
from .routes import router
from .service import get_controller, shutdown_controller

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("🚀 Mock Interview API starting up...")
    yield
    shutdown_controller()
    logger.info("👋 Mock Interview API shutting down...")


# Create FastAPI app
app = FastAPI(
    title=API_CONFIG["title"],
    description="""
    AI-assisted mock interview API.

    ## Workflow

    1. **POST /api/v1/sessions** - Start a session from your résumé
    2. **GET /api/v1/sessions/{id}/question** - Get the current question
    3. **POST /api/v1/sessions/{id}/answers** - Submit your answer
    4. Repeat steps 2-3 until every question is answered
    5. **POST /api/v1/sessions/{id}/report** - Generate your evaluation report
    """,
    version=API_CONFIG["version"],
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(router)


# ============================================================================
# Root Endpoints
# ============================================================================

@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with API info."""
    return {
        "name": API_CONFIG["title"],
        "version": API_CONFIG["version"],
        "docs": "/docs",
        "health": "/health"
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["system"],
    summary="Health check",
    description="Check if the API is running and healthy."
)
async def health_check(
    controller: SessionLifecycleController = Depends(get_controller)
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=API_CONFIG["version"],
        timestamp=datetime.now(),
        active_sessions=controller.active_session_count
    )


# ============================================================================
# Exception Handlers
# ============================================================================

def _error_response(status_code: int, exc: InterviewEngineError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "detail": str(exc),
            "session_id": exc.session_id
        }
    )


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
    """Unknown session identifier."""
    return _error_response(404, exc)


@app.exception_handler(SessionValidationError)
async def validation_error_handler(request: Request, exc: SessionValidationError):
    """Request not valid for the current session state."""
    return _error_response(400, exc)


@app.exception_handler(DuplicateSessionError)
async def duplicate_session_handler(request: Request, exc: DuplicateSessionError):
    return _error_response(409, exc)


@app.exception_handler(ExternalDependencyError)
async def external_dependency_handler(request: Request, exc: ExternalDependencyError):
    """Question generation or evaluation failed; the client may retry."""
    return _error_response(503, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception(f"Unhandled error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "detail": "An unexpected error occurred. Please try again later."
        }
    )


# ============================================================================
# Entry point for running directly
# ============================================================================

def run_server(host: str = API_CONFIG["host"], port: int = API_CONFIG["port"], reload: bool = False):
    """Run the FastAPI server."""
    import uvicorn
    uvicorn.run(
        "mock_interview.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


if __name__ == "__main__":
    run_server(reload=True)
