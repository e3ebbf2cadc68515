"""
domain.ports - Abstract interfaces (Protocols) for the system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations; the agent depends only on these.

Using typing.Protocol (structural typing) instead of ABC: any class that
implements the methods satisfies the port without explicit inheritance.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from todo_assistant.domain.entities import Task


@runtime_checkable
class TaskRepository(Protocol):
    """CRUD operations over the single Task entity.

    delete_by_id is idempotent and does not report affected rows.
    """

    async def list_all(self) -> list[Task]: ...
    async def create(self, text: str) -> int: ...
    async def search(self, substring: str) -> list[Task]: ...
    async def delete_by_id(self, task_id: int) -> None: ...


@runtime_checkable
class ChatModelPort(Protocol):
    """The slice of a LangChain chat model the gateway relies on."""

    async def ainvoke(self, input: Sequence[Any], **kwargs: Any) -> Any: ...
