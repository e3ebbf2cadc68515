"""Task store behaviour: round-trip, idempotent delete, contains-search."""

import pytest

from todo_assistant.domain.entities import Task
from todo_assistant.domain.exceptions import StoreError
from todo_assistant.infrastructure.persistence.connection import AsyncSQLiteConnection
from todo_assistant.infrastructure.persistence.migrations import run_migrations
from todo_assistant.infrastructure.persistence.task_repo import SQLiteTaskRepository


class TestCreateAndList:
    @pytest.mark.asyncio
    async def test_empty_store_lists_nothing(self, task_repo):
        assert await task_repo.list_all() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["Buy milk", "  padded  ", "Ünïcödé ✓", "'; DROP TABLE todos; --"])
    async def test_created_task_is_listed_with_returned_id(self, task_repo, text):
        task_id = await task_repo.create(text)

        tasks = await task_repo.list_all()

        assert Task(id=task_id, todo=text) in tasks

    @pytest.mark.asyncio
    async def test_ids_are_unique_and_duplicates_allowed(self, task_repo):
        first = await task_repo.create("Buy milk")
        second = await task_repo.create("Buy milk")

        assert first != second
        assert [t.todo for t in await task_repo.list_all()] == ["Buy milk", "Buy milk"]

    @pytest.mark.asyncio
    async def test_list_is_in_insertion_order(self, task_repo):
        for text in ("a", "b", "c"):
            await task_repo.create(text)

        assert [t.todo for t in await task_repo.list_all()] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_migrations_are_rerunnable(self, connection, task_repo):
        await task_repo.create("survives")

        await run_migrations(connection)

        assert [t.todo for t in await task_repo.list_all()] == ["survives"]


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_only_that_task(self, task_repo):
        keep = await task_repo.create("keep")
        drop = await task_repo.create("drop")

        await task_repo.delete_by_id(drop)

        assert await task_repo.list_all() == [Task(id=keep, todo="keep")]

    @pytest.mark.asyncio
    async def test_delete_twice_is_a_no_op(self, task_repo):
        task_id = await task_repo.create("once")
        await task_repo.create("other")

        await task_repo.delete_by_id(task_id)
        after_first = await task_repo.list_all()
        await task_repo.delete_by_id(task_id)

        assert await task_repo.list_all() == after_first

    @pytest.mark.asyncio
    async def test_delete_unknown_id_is_not_an_error(self, task_repo):
        assert await task_repo.delete_by_id(999) is None


class TestSearch:
    @pytest.fixture
    def texts(self):
        return ["Buy milk", "call MUM", "Milkshake party", "100% done", "snake_case refactor", "Straße fegen"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("needle", ["milk", "MILK", "mum", "party", "%", "_", "e", "xyz", "STRASSE", "straße"])
    async def test_search_matches_contains_case_insensitively(self, task_repo, texts, needle):
        for text in texts:
            await task_repo.create(text)

        found = [t.todo for t in await task_repo.search(needle)]

        assert found == [t for t in texts if needle.casefold() in t.casefold()]

    @pytest.mark.asyncio
    async def test_empty_search_returns_everything(self, task_repo, texts):
        for text in texts:
            await task_repo.create(text)

        assert await task_repo.search("") == await task_repo.list_all()

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self, task_repo):
        await task_repo.create("abc")

        assert await task_repo.search("a%c") == []
        assert await task_repo.search("a_c") == []


class TestStoreErrors:
    @pytest.mark.asyncio
    async def test_integer_too_large_for_sqlite_raises_store_error(self, task_repo):
        with pytest.raises(StoreError):
            await task_repo.delete_by_id(10 ** 20)

    @pytest.mark.asyncio
    async def test_unopenable_database_raises_store_error(self, tmp_path):
        # A directory cannot be opened as a database file.
        repo = SQLiteTaskRepository(AsyncSQLiteConnection(str(tmp_path)))

        with pytest.raises(StoreError):
            await repo.list_all()

    @pytest.mark.asyncio
    async def test_missing_table_raises_store_error(self, db_path):
        repo = SQLiteTaskRepository(AsyncSQLiteConnection(db_path))

        with pytest.raises(StoreError):
            await repo.create("no schema yet")
