"""
Shared pytest fixtures for the to-do assistant tests.

Provides a temporary SQLite task store, the tool registry over it, and a
helper that wires a complete AgentExecutor the same way the factory does,
but around a ScriptedChatModel.
"""

from __future__ import annotations

import pytest
import pytest_asyncio

from todo_assistant.agent.conversation import Conversation
from todo_assistant.agent.executor import AgentExecutor
from todo_assistant.agent.gateway import ModelGateway
from todo_assistant.agent.prompt import build_system_prompt
from todo_assistant.agent.tools.registry import ToolRegistry
from todo_assistant.application.context import SessionContext
from todo_assistant.infrastructure.persistence.connection import AsyncSQLiteConnection
from todo_assistant.infrastructure.persistence.migrations import run_migrations
from todo_assistant.infrastructure.persistence.task_repo import SQLiteTaskRepository
from tests.helpers import RecordingSleep, ScriptedChatModel, make_registry


# ===== STORE FIXTURES =====


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "todos.db")


@pytest_asyncio.fixture
async def connection(db_path) -> AsyncSQLiteConnection:
    conn = AsyncSQLiteConnection(db_path)
    await run_migrations(conn)
    return conn


@pytest_asyncio.fixture
async def task_repo(connection) -> SQLiteTaskRepository:
    return SQLiteTaskRepository(connection)


@pytest.fixture
def registry(task_repo) -> ToolRegistry:
    return make_registry(task_repo)


@pytest.fixture
def ctx() -> SessionContext:
    return SessionContext(session_id="test-session")


# ===== AGENT FIXTURES =====


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_agent(registry, sleep):
    """Build an AgentExecutor around a ScriptedChatModel.

    Returns (agent, model). Pass ``tools`` to use a registry over another
    repository (e.g. a mock).
    """

    def _make(replies, *, tools: ToolRegistry = None, rollback_on_failure: bool = False):
        tools = tools or registry
        model = ScriptedChatModel(replies)
        gateway = ModelGateway(
            llm=model,
            conversation=Conversation(build_system_prompt(tools)),
            sleep=sleep,
        )
        agent = AgentExecutor(gateway, tools, rollback_on_failure=rollback_on_failure)
        return agent, model

    return _make
