"""
Test doubles shared across the test modules.

ScriptedChatModel stands in for the remote chat model, OverloadedError for a
provider's "try again later" error, and RecordingSleep for asyncio.sleep.
"""

from __future__ import annotations

import json
from typing import Any, List, Sequence, Union

from langchain_core.messages import AIMessage, BaseMessage

from todo_assistant.agent.tools.create_todo import CreateTodoTool
from todo_assistant.agent.tools.delete_todo import DeleteTodoTool
from todo_assistant.agent.tools.get_all_todos import GetAllTodosTool
from todo_assistant.agent.tools.registry import ToolRegistry
from todo_assistant.agent.tools.search_todo import SearchTodoTool


class ScriptedChatModel:
    """Returns (or raises) the scripted replies in order, one per call.

    Each call records a snapshot of the messages it was sent.
    """

    def __init__(self, replies: Sequence[Union[str, BaseException, Any]] = ()):
        self.replies: List[Any] = list(replies)
        self.calls: List[List[BaseMessage]] = []

    async def ainvoke(self, input, **kwargs):
        self.calls.append(list(input))
        if not self.replies:
            raise AssertionError("ScriptedChatModel ran out of replies")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, str):
            return AIMessage(content=reply)
        return reply


class OverloadedError(Exception):
    """Mimics a provider SDK error carrying an HTTP 503."""

    status_code = 503

    def __init__(self, message: str = "[503 Service Unavailable] The model is overloaded."):
        super().__init__(message)


class RecordingSleep:
    """Drop-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def action(function: str, input: Any = "") -> str:
    return json.dumps({"type": "action", "function": function, "input": input})


def output(text: str) -> str:
    return json.dumps({"type": "output", "output": text})


def make_registry(repo) -> ToolRegistry:
    """Register the four task tools over ``repo``, as the factory does."""
    reg = ToolRegistry()
    reg.register(GetAllTodosTool(repo))
    reg.register(CreateTodoTool(repo))
    reg.register(SearchTodoTool(repo))
    reg.register(DeleteTodoTool(repo))
    return reg
