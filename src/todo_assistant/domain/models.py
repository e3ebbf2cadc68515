"""
domain.models - Value objects exchanged with the model.

AgentMessage is the structured reply contract: every model reply must decode
into exactly one of ActionMessage or OutputMessage, discriminated by "type".
Unknown keys are rejected so that a half-right reply is never silently
accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Tool names
# ---------------------------------------------------------------------------

GET_ALL_TODOS = "getAllTodos"
CREATE_TODO = "createTodo"
SEARCH_TODO = "searchTodo"
DELETE_TODO_BY_ID = "deleteTodoById"

ToolName = Literal["getAllTodos", "createTodo", "searchTodo", "deleteTodoById"]
TOOL_NAMES: tuple[str, ...] = (GET_ALL_TODOS, CREATE_TODO, SEARCH_TODO, DELETE_TODO_BY_ID)


# ---------------------------------------------------------------------------
# Agent messages
# ---------------------------------------------------------------------------

class ActionMessage(BaseModel):
    """The model asks for one tool to be executed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["action"] = "action"
    function: ToolName
    input: Optional[Union[int, str]] = None


class OutputMessage(BaseModel):
    """The model's natural-language answer for the user."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["output"] = "output"
    output: str


AgentMessage = Annotated[
    Union[ActionMessage, OutputMessage],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Conversation turns
# ---------------------------------------------------------------------------

SYSTEM_ROLE = "system"
USER_ROLE = "user"
MODEL_ROLE = "model"
Role = Literal["system", "user", "model"]


@dataclass(frozen=True)
class Turn:
    """One (role, content) entry of a conversation."""
    role: Role
    content: str
