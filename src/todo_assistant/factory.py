"""
factory - Composition root for the to-do assistant.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured repositories, agents and the session manager.

Usage:
    from todo_assistant.factory import ServiceFactory
    from todo_assistant.infrastructure.config import Settings

    config = Settings.from_env()
    factory = ServiceFactory(config)
    await factory.initialize()  # one-time startup

    sessions = factory.create_session_manager()
    result = await sessions.run_turn("default", "add buy milk")
"""

from __future__ import annotations

import logging
from typing import Optional

from todo_assistant.agent.conversation import Conversation
from todo_assistant.agent.executor import AgentExecutor
from todo_assistant.agent.gateway import ModelGateway
from todo_assistant.agent.prompt import build_system_prompt
from todo_assistant.agent.tools.create_todo import CreateTodoTool
from todo_assistant.agent.tools.delete_todo import DeleteTodoTool
from todo_assistant.agent.tools.get_all_todos import GetAllTodosTool
from todo_assistant.agent.tools.registry import ToolRegistry
from todo_assistant.agent.tools.search_todo import SearchTodoTool
from todo_assistant.application.context import SessionContext
from todo_assistant.application.sessions import SessionManager
from todo_assistant.domain.ports import ChatModelPort
from todo_assistant.infrastructure.config import Settings
from todo_assistant.infrastructure.llm.llm_builder import build_llm
from todo_assistant.infrastructure.llm.retry import exponential_delays
from todo_assistant.infrastructure.persistence.connection import AsyncSQLiteConnection
from todo_assistant.infrastructure.persistence.migrations import run_migrations
from todo_assistant.infrastructure.persistence.task_repo import SQLiteTaskRepository

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root: wires all dependencies together.

    Call initialize() once at startup, then create repositories/agents as
    needed. ``llm`` may be passed in to bypass provider construction (tests).
    """

    def __init__(self, config: Settings, llm: Optional[ChatModelPort] = None):
        self._config = config
        self._connection = AsyncSQLiteConnection(config.db_path)
        self._llm = llm
        self._initialized = False

    @property
    def config(self) -> Settings:
        return self._config

    async def initialize(self) -> None:
        """One-time startup: run migrations and build the chat model.

        Must be called before creating agents.
        """
        logger.info("Initializing ServiceFactory...")

        await self.run_migrations()

        if self._llm is None:
            self._llm = build_llm(
                provider=self._config.llm_provider,
                model=self._config.active_llm_model,
                api_key=self._config.model_api_key,
                temperature=self._config.llm_temperature,
                ollama_base_url=self._config.ollama_base_url,
            )

        self._initialized = True
        logger.info(
            "ServiceFactory ready (provider=%s, model=%s)",
            self._config.llm_provider, self._config.active_llm_model,
        )

    async def run_migrations(self) -> None:
        """Create the task table if needed. Enough for direct task listing."""
        await run_migrations(self._connection)
        logger.info("Database migrations complete")

    # ------------------------------------------------------------------
    # Repositories and tools
    # ------------------------------------------------------------------

    def create_task_repository(self) -> SQLiteTaskRepository:
        """Return a task repository for direct listing (REST /todos, CLI)."""
        return SQLiteTaskRepository(self._connection)

    def create_tool_registry(self) -> ToolRegistry:
        """Register the four task-list tools over one repository."""
        repo = self.create_task_repository()
        registry = ToolRegistry()
        registry.register(GetAllTodosTool(repo))
        registry.register(CreateTodoTool(repo))
        registry.register(SearchTodoTool(repo))
        registry.register(DeleteTodoTool(repo))
        return registry

    # ------------------------------------------------------------------
    # Agent creation
    # ------------------------------------------------------------------

    def create_agent(self, ctx: SessionContext) -> AgentExecutor:
        """Create a fully configured AgentExecutor with a fresh conversation.

        Args:
            ctx: Session context the agent will serve.

        Returns:
            AgentExecutor ready for chat.
        """
        self._ensure_initialized()

        registry = self.create_tool_registry()
        conversation = Conversation(build_system_prompt(registry))
        gateway = ModelGateway(
            llm=self._llm,
            conversation=conversation,
            retry_delays=exponential_delays(
                self._config.model_max_retries,
                base=self._config.model_retry_base_delay,
                cap=self._config.model_retry_max_delay,
            ),
        )
        logger.debug("Created agent for session %s", ctx.session_id)
        return AgentExecutor(
            gateway=gateway,
            tools=registry,
            rollback_on_failure=self._config.rollback_on_failure,
        )

    def create_session_manager(self) -> SessionManager:
        """Create the session table that hands out one agent per session."""
        return SessionManager(
            agent_factory=self.create_agent,
            ttl_seconds=self._config.session_ttl_seconds,
            max_sessions=self._config.max_sessions,
            # 0 disables the turn timeout
            turn_timeout=self._config.turn_timeout_seconds or None,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call await factory.initialize() first."
            )
