from __future__ import annotations
from typing import Dict, Iterable, List, Optional
from datetime import datetime, timezone
import time

from tasklist.domain.errors import PersistenceError
from tasklist.domain.task_models import Task, TaskCreate, TaskPriority

# rows a fresh in-memory table starts with when served as the app backend
DEMO_TASKS = (
    TaskCreate(text="Learn FastAPI", priority=TaskPriority.high),
    TaskCreate(text="Build the task app", priority=TaskPriority.low),
    TaskCreate(text="Try the filters", priority=TaskPriority.medium),
)

class InMemoryTaskRepo:
    """
    In-process task table (the local-state variant).
    Ids come from the clock in milliseconds, bumped so they keep increasing
    within the process even when two inserts land in the same millisecond.
    """
    def __init__(self, seed: Optional[Iterable[TaskCreate]] = None):
        self._tasks: Dict[int, Task] = {}
        self._last_id = 0
        for item in seed or ():
            self._put(item.text, False, item.priority)

    def _next_id(self) -> int:
        self._last_id = max(int(time.time() * 1000), self._last_id + 1)
        return self._last_id

    def _put(self, text: str, done: bool, priority: TaskPriority) -> Task:
        task = Task(
            id=self._next_id(),
            text=text,
            done=done,
            priority=priority,
            created_at=datetime.now(timezone.utc),
        )
        self._tasks[task.id] = task
        return task

    async def fetch_all(self) -> List[Task]:
        # newest first; id breaks ties within one clock tick
        return sorted(self._tasks.values(), key=lambda t: (t.created_at, t.id), reverse=True)

    async def insert(self, text: str, done: bool, priority: TaskPriority) -> Task:
        return self._put(text, done, priority)

    async def update_done(self, task_id: int, done: bool) -> None:
        task = self._tasks.get(task_id)
        if task is None:
            raise PersistenceError(f"no task row with id {task_id}")
        self._tasks[task_id] = task.model_copy(update={"done": done})

    async def delete_by_id(self, task_id: int) -> None:
        if self._tasks.pop(task_id, None) is None:
            raise PersistenceError(f"no task row with id {task_id}")

    async def close(self) -> None:
        pass
