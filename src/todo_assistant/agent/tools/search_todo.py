"""
agent.tools.search_todo - Case-insensitive "contains" search over task text.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator

from todo_assistant.agent.tools.base import BaseTool, ToolResult
from todo_assistant.application.context import SessionContext
from todo_assistant.domain.models import SEARCH_TODO
from todo_assistant.domain.ports import TaskRepository


class SearchTodoInput(BaseModel):
    """Input schema for searchTodo. A missing search string matches all."""

    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return v


class SearchTodoTool(BaseTool):
    """Return the tasks whose text contains the search string."""

    name = SEARCH_TODO
    signature = "searchTodo(search: string)"
    description = "Search for all todos in the database that match the search string."

    def __init__(self, repository: TaskRepository):
        self._repo = repository

    def get_schema(self) -> type[BaseModel]:
        return SearchTodoInput

    async def execute(self, ctx: SessionContext, tool_input: SearchTodoInput) -> ToolResult:
        tasks = await self._repo.search(tool_input.value)
        return ToolResult(observation=[t.to_dict() for t in tasks])
