from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from pydantic import ValidationError

from tasklist.domain.errors import PersistenceError
from tasklist.domain.task_models import Task, TaskCreate, TaskFilter, TaskPriority

logger = logging.getLogger("tasklist.tasks")


class TaskRepo(Protocol):
    async def fetch_all(self) -> Sequence[Task]: ...
    async def insert(self, text: str, done: bool, priority: TaskPriority) -> Task: ...
    async def update_done(self, task_id: int, done: bool) -> None: ...
    async def delete_by_id(self, task_id: int) -> None: ...
    async def close(self) -> None: ...


class StorePhase(str, Enum):
    loading = "loading"
    ready = "ready"


class Outcome(str, Enum):
    applied = "applied"
    rejected = "rejected"
    not_found = "not_found"
    failed = "failed"


@dataclass(frozen=True)
class MutationResult:
    outcome: Outcome
    task: Optional[Task] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.applied


@dataclass(frozen=True)
class TaskStats:
    total: int
    active: int
    done: int


class TaskListStore:
    """Owns the in-memory task list and keeps it in step with the repo.

    Every mutation is persisted first and only then patched into the list
    (persist-then-patch). The list is a tuple that gets replaced, never edited,
    so a failed call leaves the previous value untouched.
    """

    def __init__(self, repo: TaskRepo):
        self.repo = repo
        self.phase = StorePhase.loading
        self._tasks: Tuple[Task, ...] = ()

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    def _find(self, task_id: int) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    async def load(self) -> bool:
        try:
            rows = await self.repo.fetch_all()
        except PersistenceError:
            logger.exception("task.load.failed", extra={"category": "tasks", "event": "task.load.failed"})
            return False
        self._tasks = tuple(rows)
        self.phase = StorePhase.ready
        logger.info("task.load", extra={"category": "tasks", "event": "task.load", "count": len(self._tasks)})
        return True

    async def add(self, text: str, priority: Union[TaskPriority, str, None] = None) -> MutationResult:
        try:
            data = TaskCreate(text=text, priority=priority or TaskPriority.medium)
        except ValidationError:
            logger.debug("task.add.rejected", extra={"category": "tasks", "event": "task.add.rejected"})
            return MutationResult(Outcome.rejected)

        try:
            task = await self.repo.insert(data.text, False, data.priority)
        except PersistenceError as e:
            logger.exception("task.add.failed", extra={"category": "tasks", "event": "task.add.failed"})
            return MutationResult(Outcome.failed, error=str(e))

        # newest first, same as the store's own ordering
        self._tasks = (task,) + tuple(t for t in self._tasks if t.id != task.id)
        logger.info(
            "task.add",
            extra={"category": "tasks", "event": "task.add", "task_id": task.id, "priority": task.priority.value},
        )
        return MutationResult(Outcome.applied, task=task)

    async def toggle(self, task_id: int) -> MutationResult:
        current = self._find(task_id)
        if current is None:
            return MutationResult(Outcome.not_found)

        done = not current.done
        try:
            await self.repo.update_done(task_id, done)
        except PersistenceError as e:
            logger.exception(
                "task.toggle.failed", extra={"category": "tasks", "event": "task.toggle.failed", "task_id": task_id}
            )
            return MutationResult(Outcome.failed, task=current, error=str(e))

        updated = current.model_copy(update={"done": done})
        self._tasks = tuple(updated if t.id == task_id else t for t in self._tasks)
        logger.info("task.toggle", extra={"category": "tasks", "event": "task.toggle", "task_id": task_id, "done": done})
        return MutationResult(Outcome.applied, task=updated)

    async def delete(self, task_id: int) -> MutationResult:
        current = self._find(task_id)
        if current is None:
            return MutationResult(Outcome.not_found)

        try:
            await self.repo.delete_by_id(task_id)
        except PersistenceError as e:
            logger.exception(
                "task.delete.failed", extra={"category": "tasks", "event": "task.delete.failed", "task_id": task_id}
            )
            return MutationResult(Outcome.failed, task=current, error=str(e))

        self._tasks = tuple(t for t in self._tasks if t.id != task_id)
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id})
        return MutationResult(Outcome.applied, task=current)

    def list(self, flt: Union[TaskFilter, str] = TaskFilter.all) -> List[Task]:
        flt = TaskFilter(flt)
        return [t for t in self._tasks if t.matches(flt)]

    def stats(self) -> TaskStats:
        active = sum(1 for t in self._tasks if not t.done)
        return TaskStats(total=len(self._tasks), active=active, done=len(self._tasks) - active)

    async def close(self) -> None:
        await self.repo.close()
