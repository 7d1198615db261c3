"""Task store: holds tasks keyed by id, id allocation, and task mutation.

Ids come from a counter that only ever grows; removing a task never frees
its id for reuse.
"""
from __future__ import annotations
import copy
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import structlog

from errors import TaskNotFoundError
from models import Task, TaskStatus, format_timestamp, utc_now

Clock = Callable[[], datetime]

log = structlog.get_logger(__name__)


class TaskManager:
    def __init__(self, clock: Optional[Clock] = None):
        self.tasks: Dict[int, Task] = {}
        self.next_id: int = 1
        self._clock: Clock = clock or utc_now

    # -------------------- loading --------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any], clock: Optional[Clock] = None) -> "TaskManager":
        """Rebuild a store from its persisted document.

        Raises KeyError/ValueError/TypeError on a malformed document; the
        caller decides how fatal that is.
        """
        manager = cls(clock)
        raw_tasks = data['tasks']
        if not isinstance(raw_tasks, Mapping):
            raise TypeError("'tasks' must be an object keyed by id")
        for key, raw in raw_tasks.items():
            task = Task.from_dict(raw)
            if str(task.id) != str(key):
                raise ValueError(f"task stored under key {key!r} has id {task.id}")
            manager.tasks[task.id] = task
        next_id = data['next_id']
        if isinstance(next_id, bool) or not isinstance(next_id, int):
            raise ValueError(f"'next_id' must be an integer, got {next_id!r}")
        # a hand-edited document must not make us reissue an existing id
        highest = max(manager.tasks, default=0)
        manager.next_id = max(next_id, highest + 1)
        return manager

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tasks': {str(tid): task.to_dict() for tid, task in sorted(self.tasks.items())},
            'next_id': self.next_id,
        }

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        nid = self.next_id
        self.next_id += 1
        return nid

    def _now(self) -> str:
        return format_timestamp(self._clock())

    # -------------------- queries --------------------
    def get(self, task_id: int) -> Optional[Task]:
        """Return a detached copy of the task, or None when absent."""
        task = self.tasks.get(task_id)
        return copy.copy(task) if task is not None else None

    def get_mutable(self, task_id: int) -> Optional[Task]:
        """Return the stored task itself so the caller can change it."""
        return self.tasks.get(task_id)

    def require(self, task_id: int) -> Task:
        task = self.get_mutable(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def list(self) -> List[Task]:
        return sorted(self.tasks.values(), key=lambda t: t.id)

    def list_by_status(self, status: TaskStatus) -> List[Task]:
        return [t for t in self.list() if t.status == status]

    def summary(self) -> Dict[TaskStatus, int]:
        return {status: len(self.list_by_status(status)) for status in TaskStatus}

    # -------------------- task operations --------------------
    def add(self, description: str) -> int:
        task = Task.create(self._allocate_id(), description, self._now())
        self.tasks[task.id] = task
        log.debug("task.added", task_id=task.id, next_id=self.next_id)
        return task.id

    def remove(self, task_id: int) -> Optional[Task]:
        task = self.tasks.pop(task_id, None)
        if task is not None:
            log.debug("task.removed", task_id=task_id)
        return task

    def set_status(self, task_id: int, status: TaskStatus) -> Task:
        task = self.require(task_id)
        previous = task.status
        task.set_status(status, self._now())
        log.debug("task.status_changed", task_id=task_id, old=previous.value, new=task.status.value)
        return task

    def update_description(self, task_id: int, description: str) -> Tuple[Task, str]:
        """Replace a task's description; returns the task and the old text."""
        task = self.require(task_id)
        old_description = task.description
        task.set_description(description, self._now())
        log.debug("task.updated", task_id=task_id)
        return task, old_description

    def __len__(self) -> int:
        return len(self.tasks)
