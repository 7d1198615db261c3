"""Error hierarchy for the task manager.

Errors raised by store or persistence operations travel up to the click
group, which is the single place that turns them into a message on stderr
and a process exit code.

    TaskManagerError (base)
    ├── TaskNotFoundError - a command referenced an id the store lacks
    └── StorageError      - the backing file could not be read, parsed or written
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional, Union

EXIT_FAILURE = 1


class TaskManagerError(Exception):
    """Base exception for all task manager errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with additional context.
        exit_code: Process exit status the top-level handler should use.
    """

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class TaskNotFoundError(TaskManagerError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"No task found with ID {task_id}", {"task_id": task_id})
        self.task_id = task_id


class StorageError(TaskManagerError):
    """The store file is unreadable, corrupt, or could not be written."""

    def __init__(self, message: str, path: Union[str, Path], cause: Optional[BaseException] = None) -> None:
        details: Dict[str, Any] = {"path": str(path)}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message, details)
        self.path = Path(path)

    def __str__(self) -> str:
        cause = self.details.get("cause")
        return f"{self.message} ({cause})" if cause else self.message
