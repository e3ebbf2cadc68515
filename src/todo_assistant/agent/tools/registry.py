"""
agent.tools.registry - Tool registration, discovery, and dispatch.

Central registry mapping a tool name to its Task-Store-backed tool. The
agent loop hands it an ActionMessage; the registry validates the name,
coerces the input and returns the tool's observation.
"""

from __future__ import annotations

import logging

from todo_assistant.agent.tools.base import BaseTool, ToolResult
from todo_assistant.application.context import SessionContext
from todo_assistant.domain.exceptions import UnknownToolError
from todo_assistant.domain.models import ActionMessage

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Manages tool registration and invocation."""

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool by its name."""
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def get(self, name: str) -> BaseTool:
        """Get a tool by name.

        Raises:
            UnknownToolError: No tool is registered under ``name``.
        """
        if name not in self._tools:
            raise UnknownToolError(f"Tool '{name}' not registered", raw=name)
        return self._tools[name]

    def all(self) -> list[BaseTool]:
        """Return all registered tools."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Return all registered tool names."""
        return list(self._tools.keys())

    async def dispatch(self, action: ActionMessage, ctx: SessionContext) -> ToolResult:
        """Run the tool named by ``action`` and return its observation."""
        tool = self.get(action.function)
        tool_input = tool.coerce_input(action.input)
        logger.info(
            "Dispatching %s (session=%s, request=%s)",
            tool.name, ctx.session_id, ctx.request_id,
        )
        return await tool.execute(ctx, tool_input)

    def describe(self) -> str:
        """One line per tool, for the system prompt."""
        return "\n".join(
            f"- {tool.signature}: {tool.description}" for tool in self._tools.values()
        )
