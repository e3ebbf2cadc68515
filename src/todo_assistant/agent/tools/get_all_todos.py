"""
agent.tools.get_all_todos - List every task.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from todo_assistant.agent.tools.base import BaseTool, ToolResult
from todo_assistant.application.context import SessionContext
from todo_assistant.domain.models import GET_ALL_TODOS
from todo_assistant.domain.ports import TaskRepository


class GetAllTodosInput(BaseModel):
    """getAllTodos takes no input; whatever the model sends is ignored."""

    value: Any = None


class GetAllTodosTool(BaseTool):
    """Return all tasks in store order."""

    name = GET_ALL_TODOS
    signature = "getAllTodos()"
    description = "Get all todos from the database."

    def __init__(self, repository: TaskRepository):
        self._repo = repository

    def get_schema(self) -> type[BaseModel]:
        return GetAllTodosInput

    async def execute(self, ctx: SessionContext, tool_input: BaseModel) -> ToolResult:
        tasks = await self._repo.list_all()
        return ToolResult(observation=[t.to_dict() for t in tasks])
