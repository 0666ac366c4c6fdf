from __future__ import annotations
from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StringConstraints, ValidationError
from enum import Enum
from datetime import datetime
from typing import Annotated, Any, Optional

from tasklist.domain.errors import TaskDecodeError

class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

class TaskFilter(str, Enum):
    all = "all"
    active = "active"
    done = "done"

TaskText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class TaskCreate(BaseModel):
    text: TaskText
    priority: TaskPriority = TaskPriority.medium

class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: StrictInt
    text: TaskText
    done: StrictBool = False
    priority: TaskPriority = TaskPriority.medium
    created_at: Optional[datetime] = None

    def matches(self, flt: TaskFilter) -> bool:
        if flt is TaskFilter.active:
            return not self.done
        if flt is TaskFilter.done:
            return self.done
        return True

REQUIRED_FIELDS = ("id", "text", "done", "priority")

def decode_task_row(row: Any) -> Task:
    """Validate a row returned by a persistence backend.

    Rows are never trusted as-is: anything missing or mis-typed raises
    TaskDecodeError instead of reaching the in-memory list.
    """
    if not isinstance(row, dict):
        raise TaskDecodeError(f"expected a row object, got {type(row).__name__}")
    missing = [k for k in REQUIRED_FIELDS if k not in row]
    if missing:
        raise TaskDecodeError(f"row is missing fields: {', '.join(missing)}")
    try:
        return Task.model_validate(row)
    except ValidationError as e:
        raise TaskDecodeError(f"malformed task row: {e.errors(include_url=False)}") from e
