from __future__ import annotations


class TaskListError(Exception):
    """Base class for tasklist errors."""


class PersistenceError(TaskListError):
    """A persistence backend failed; the operation must be treated as not applied."""


class TaskDecodeError(PersistenceError):
    """A backend returned a row that does not match the Task shape."""


class ConfigError(TaskListError):
    pass
