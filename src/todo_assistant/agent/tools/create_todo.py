"""
agent.tools.create_todo - Create a task and report its id.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from todo_assistant.agent.tools.base import BaseTool, ToolResult
from todo_assistant.application.context import SessionContext
from todo_assistant.domain.models import CREATE_TODO
from todo_assistant.domain.ports import TaskRepository


class CreateTodoInput(BaseModel):
    """Input schema for createTodo: the task text."""

    value: str = Field(min_length=1)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        """Accept numbers as text (e.g. a bare year) and strip whitespace."""
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v


class CreateTodoTool(BaseTool):
    """Insert one task; the observation is the new id."""

    name = CREATE_TODO
    signature = "createTodo(todo: string)"
    description = "Create a todo in the database and return the id of created todo."

    def __init__(self, repository: TaskRepository):
        self._repo = repository

    def get_schema(self) -> type[BaseModel]:
        return CreateTodoInput

    async def execute(self, ctx: SessionContext, tool_input: CreateTodoInput) -> ToolResult:
        task_id = await self._repo.create(tool_input.value)
        return ToolResult(observation=task_id)
