from __future__ import annotations

import pytest
import pytest_asyncio

from tasklist.domain.task_models import TaskCreate, TaskPriority
from tasklist.services.task_service import TaskListStore
from tests.fakes import FlakyRepo


@pytest.fixture()
def seed() -> list[TaskCreate]:
    return [
        TaskCreate(text="Learn FastAPI", priority=TaskPriority.high),
        TaskCreate(text="Build the task app", priority=TaskPriority.low),
        TaskCreate(text="Wire up the store"),
    ]


@pytest.fixture()
def repo(seed: list[TaskCreate]) -> FlakyRepo:
    return FlakyRepo(seed)


@pytest_asyncio.fixture()
async def store(repo: FlakyRepo) -> TaskListStore:
    s = TaskListStore(repo)
    assert await s.load()
    repo.calls.clear()
    return s
