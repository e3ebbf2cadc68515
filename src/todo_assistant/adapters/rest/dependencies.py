"""
Shared FastAPI dependencies.

- get_factory(): returns the initialized ServiceFactory (set at startup).
- get_session_manager(): returns the process's SessionManager (set at startup).
"""

from __future__ import annotations

from typing import Optional

from todo_assistant.application.sessions import SessionManager
from todo_assistant.factory import ServiceFactory

# Module-level references set by app lifespan
_factory: Optional[ServiceFactory] = None
_sessions: Optional[SessionManager] = None


def set_factory(factory: Optional[ServiceFactory]) -> None:
    global _factory, _sessions
    _factory = factory
    _sessions = factory.create_session_manager() if factory is not None else None


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory


def get_session_manager() -> SessionManager:
    if _sessions is None:
        raise RuntimeError("SessionManager not initialized.")
    return _sessions
