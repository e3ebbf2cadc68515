"""
FastAPI application: REST adapter for the to-do assistant.

Usage:
    python run_api.py

Or directly:
    uvicorn todo_assistant.adapters.rest.app:app --host 0.0.0.0 --port 3000 --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from todo_assistant import __version__
from todo_assistant.adapters.rest.dependencies import set_factory
from todo_assistant.adapters.rest.routers import chat, todos
from todo_assistant.domain.exceptions import (
    ContractViolation,
    DomainError,
    ModelServiceError,
    ServiceUnavailable,
    StoreError,
)
from todo_assistant.domain.ports import ChatModelPort
from todo_assistant.factory import ServiceFactory
from todo_assistant.infrastructure.config import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception handlers: every failed turn becomes a JSON error body
# ---------------------------------------------------------------------------

def _error(status_code: int, error: str, message: str | None = None, details: str | None = None) -> JSONResponse:
    body = {"error": error}
    if message is not None:
        body["message"] = message
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


async def contract_violation_handler(request: Request, exc: ContractViolation) -> JSONResponse:
    logger.warning("Contract violation on %s: %s", request.url.path, exc)
    return _error(500, "Invalid response format from AI model", details=str(exc))


async def service_unavailable_handler(request: Request, exc: ServiceUnavailable) -> JSONResponse:
    return _error(
        503,
        "AI service unavailable",
        message="The AI model is currently overloaded. Please try again later.",
        details=str(exc),
    )


async def model_service_error_handler(request: Request, exc: ModelServiceError) -> JSONResponse:
    return _error(500, "AI service error", details=str(exc))


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    return _error(500, "Storage error", details=str(exc))


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.error("Unhandled domain error on %s: %s", request.url.path, exc)
    return _error(500, "Internal error", details=str(exc))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s", request.url.path)
    return _error(500, "Internal server error", details=str(exc))


exception_handlers = {
    ContractViolation: contract_violation_handler,
    ServiceUnavailable: service_unavailable_handler,
    ModelServiceError: model_service_error_handler,
    StoreError: store_error_handler,
    DomainError: domain_error_handler,
    Exception: unexpected_error_handler,
}


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(
    config: Optional[Settings] = None,
    llm: Optional[ChatModelPort] = None,
) -> FastAPI:
    """Build the FastAPI app.

    ``config`` defaults to Settings.from_env(); ``llm`` overrides the
    provider-built chat model (tests).
    """
    settings = config or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize ServiceFactory on startup."""
        factory = ServiceFactory(settings, llm=llm)
        await factory.initialize()
        set_factory(factory)
        yield
        # aiosqlite connections are per-operation; nothing to close
        set_factory(None)

    app = FastAPI(
        title="Todo Assistant",
        version=__version__,
        description="Conversational to-do list API powered by an LLM agent loop.",
        lifespan=lifespan,
        exception_handlers=exception_handlers,
    )

    # CORS is permissive by default; restrict with CORS_ALLOW_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(todos.router)
    app.include_router(chat.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
