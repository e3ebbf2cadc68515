"""
agent.tools.base - Base tool interface and result container.

All agent tools inherit from BaseTool and return ToolResult. The observation
shape of each tool is part of the protocol the system prompt teaches the
model, so tools return plain JSON-serialisable values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

from todo_assistant.application.context import SessionContext
from todo_assistant.domain.exceptions import ToolInputError


@dataclass
class ToolResult:
    """Result returned by a tool execution.

    observation: JSON-serialisable value replayed to the model.
    """
    observation: Any = None


class BaseTool(ABC):
    """Abstract base for all agent tools."""

    name: str
    description: str
    signature: str

    @abstractmethod
    async def execute(self, ctx: SessionContext, tool_input: BaseModel) -> ToolResult:
        """Execute the tool with an already-coerced input model."""
        ...

    @abstractmethod
    def get_schema(self) -> type[BaseModel]:
        """Return the Pydantic schema that coerces this tool's raw input."""
        ...

    def coerce_input(self, raw: Optional[Union[int, str]]) -> BaseModel:
        """Turn an action's raw ``input`` into this tool's input model.

        Raises:
            ToolInputError: The input cannot be coerced.
        """
        schema = self.get_schema()
        try:
            return schema.model_validate({"value": raw})
        except ValidationError as e:
            raise ToolInputError(
                f"Invalid input {raw!r} for tool '{self.name}': {e.error_count()} error(s)",
                raw=None if raw is None else str(raw),
            ) from e
