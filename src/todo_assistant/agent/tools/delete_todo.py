"""
agent.tools.delete_todo - Delete a task by id.

Deleting an id that does not exist is not an error, and the observation
never says whether a row was removed: it is always null.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from todo_assistant.agent.tools.base import BaseTool, ToolResult
from todo_assistant.application.context import SessionContext
from todo_assistant.domain.models import DELETE_TODO_BY_ID
from todo_assistant.domain.ports import TaskRepository


# SQLite INTEGER is a signed 64-bit value.
SQLITE_MIN_INT = -(2 ** 63)
SQLITE_MAX_INT = 2 ** 63 - 1


class DeleteTodoInput(BaseModel):
    """Input schema for deleteTodoById: the task id."""

    value: int = Field(ge=SQLITE_MIN_INT, le=SQLITE_MAX_INT)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Accept 7, "7" or " 7 "; reject booleans and non-numeric text."""
        if isinstance(v, bool):
            raise ValueError("task id must be an integer, not a boolean")
        if isinstance(v, str):
            s = v.strip()
            if not s.lstrip("-").isdigit():
                raise ValueError(f"task id must be numeric, got {v!r}")
            return int(s)
        return v


class DeleteTodoTool(BaseTool):
    """Remove one task; the observation is always null."""

    name = DELETE_TODO_BY_ID
    signature = "deleteTodoById(id: number)"
    description = "Delete a todo from the database by id."

    def __init__(self, repository: TaskRepository):
        self._repo = repository

    def get_schema(self) -> type[BaseModel]:
        return DeleteTodoInput

    async def execute(self, ctx: SessionContext, tool_input: DeleteTodoInput) -> ToolResult:
        await self._repo.delete_by_id(tool_input.value)
        return ToolResult(observation=None)
