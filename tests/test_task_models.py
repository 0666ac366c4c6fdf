from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from tasklist.domain.errors import PersistenceError, TaskDecodeError
from tasklist.domain.task_models import Task, TaskCreate, TaskFilter, TaskPriority, decode_task_row


def test_task_create_strips_text_and_defaults_priority() -> None:
    data = TaskCreate(text="  write docs ")
    assert data.text == "write docs"
    assert data.priority is TaskPriority.medium


@pytest.mark.parametrize("text", ["", " ", "\n\t "])
def test_task_create_rejects_blank_text(text: str) -> None:
    with pytest.raises(ValidationError):
        TaskCreate(text=text)


def test_task_is_frozen() -> None:
    task = Task(id=1, text="x")
    with pytest.raises(ValidationError):
        task.done = True  # type: ignore[misc]


@pytest.mark.parametrize(
    "done,flt,expected",
    [
        (False, TaskFilter.all, True),
        (True, TaskFilter.all, True),
        (False, TaskFilter.active, True),
        (True, TaskFilter.active, False),
        (False, TaskFilter.done, False),
        (True, TaskFilter.done, True),
    ],
)
def test_task_matches_filter(done: bool, flt: TaskFilter, expected: bool) -> None:
    assert Task(id=1, text="x", done=done).matches(flt) is expected


def test_decode_task_row_accepts_store_json() -> None:
    task = decode_task_row(
        {
            "id": 42,
            "text": "Ship it",
            "done": True,
            "priority": "high",
            "created_at": "2026-10-18T09:30:00.123456+00:00",
        }
    )
    assert task.id == 42
    assert task.done is True
    assert task.priority is TaskPriority.high
    assert isinstance(task.created_at, datetime)


def test_decode_task_row_allows_missing_created_at() -> None:
    task = decode_task_row({"id": 1, "text": "a", "done": False, "priority": "low"})
    assert task.created_at is None


@pytest.mark.parametrize(
    "row",
    [
        {"text": "a", "done": False, "priority": "low"},
        {"id": 1, "done": False, "priority": "low"},
        {"id": 1, "text": "a", "priority": "low"},
        {"id": 1, "text": "a", "done": False},
        {"id": "1", "text": "a", "done": False, "priority": "low"},
        {"id": 1, "text": "a", "done": "false", "priority": "low"},
        {"id": 1, "text": "a", "done": False, "priority": "urgent"},
        {"id": 1, "text": None, "done": False, "priority": "low"},
        {"id": 1, "text": "   ", "done": False, "priority": "low"},
        {"id": 1, "text": "", "done": False, "priority": "low"},
        ["id", 1],
        None,
    ],
)
def test_decode_task_row_rejects_malformed_rows(row) -> None:
    with pytest.raises(TaskDecodeError):
        decode_task_row(row)


def test_decode_error_is_a_persistence_error() -> None:
    assert issubclass(TaskDecodeError, PersistenceError)
