"""
infrastructure.persistence.connection - Async SQLite connection manager.

Wraps aiosqlite with a context manager that commits on success, rolls back
on failure, and turns every sqlite/OS failure (and integers SQLite cannot
store) into a StoreError.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiosqlite

from todo_assistant.domain.exceptions import StoreError

logger = logging.getLogger(__name__)


def _icontains(haystack: Optional[str], needle: Optional[str]) -> int:
    """Unicode-aware, case-insensitive substring test registered in SQLite.

    SQLite's LIKE only folds ASCII and treats % and _ as wildcards, which
    would turn a "contains" search into a pattern match.
    """
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


class AsyncSQLiteConnection:
    """Async SQLite connection provider with auto-commit/rollback."""

    def __init__(self, db_path: str):
        self._db_path = db_path

    @property
    def db_path(self) -> str:
        return self._db_path

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an async SQLite connection with the icontains() function.

        Commits on success, rolls back on exception.
        """
        try:
            async with aiosqlite.connect(self._db_path) as conn:
                conn.row_factory = aiosqlite.Row
                await conn.create_function("icontains", 2, _icontains, deterministic=True)
                try:
                    yield conn
                    await conn.commit()
                except Exception:
                    await conn.rollback()
                    logger.exception("Database operation failed, transaction rolled back.")
                    raise
        except (sqlite3.Error, OSError, OverflowError) as e:
            raise StoreError(f"Task store operation failed: {e}") from e
