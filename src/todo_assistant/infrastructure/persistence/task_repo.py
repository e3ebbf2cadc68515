"""
infrastructure.persistence.task_repo - SQLite task repository.

Rows come back in rowid order, which is insertion order for an
AUTOINCREMENT key.
"""

from __future__ import annotations

import logging

from todo_assistant.domain.entities import Task
from todo_assistant.infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteTaskRepository:
    """Async SQLite implementation of TaskRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def list_all(self) -> list[Task]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT id, todo FROM todos ORDER BY id",
            )
            return [self._row_to_entity(r) for r in rows]

    async def create(self, text: str) -> int:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                "INSERT INTO todos (todo) VALUES (?)",
                (text,),
            )
            task_id = cursor.lastrowid
        logger.info("Created task %d", task_id)
        return task_id

    async def search(self, substring: str) -> list[Task]:
        """Case-insensitive "contains" match; an empty substring matches all."""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT id, todo FROM todos WHERE icontains(todo, ?) ORDER BY id",
                (substring,),
            )
            return [self._row_to_entity(r) for r in rows]

    async def delete_by_id(self, task_id: int) -> None:
        async with self._conn.acquire() as conn:
            await conn.execute("DELETE FROM todos WHERE id = ?", (task_id,))
        logger.info("Deleted task %d (if present)", task_id)

    @staticmethod
    def _row_to_entity(row) -> Task:
        return Task(id=row[0], todo=row[1])
