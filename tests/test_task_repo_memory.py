from __future__ import annotations

import pytest

from tasklist.domain.errors import PersistenceError
from tasklist.domain.task_models import TaskCreate, TaskPriority
from tasklist.infra.db.task_repo_memory import InMemoryTaskRepo


@pytest.mark.asyncio
async def test_ids_increase_within_session() -> None:
    repo = InMemoryTaskRepo()
    ids = [(await repo.insert(f"t{i}", False, TaskPriority.medium)).id for i in range(20)]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


@pytest.mark.asyncio
async def test_fetch_all_is_newest_first() -> None:
    repo = InMemoryTaskRepo([TaskCreate(text="old"), TaskCreate(text="new")])
    assert [t.text for t in await repo.fetch_all()] == ["new", "old"]


@pytest.mark.asyncio
async def test_update_and_delete_missing_rows_fail() -> None:
    repo = InMemoryTaskRepo()
    with pytest.raises(PersistenceError):
        await repo.update_done(1, True)
    with pytest.raises(PersistenceError):
        await repo.delete_by_id(1)


@pytest.mark.asyncio
async def test_update_done_and_delete() -> None:
    repo = InMemoryTaskRepo()
    task = await repo.insert("x", False, TaskPriority.low)

    await repo.update_done(task.id, True)
    assert (await repo.fetch_all())[0].done is True

    await repo.delete_by_id(task.id)
    assert await repo.fetch_all() == []
