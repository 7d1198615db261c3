"""Data models for the task manager.

Exposes the Task dataclass and the closed TaskStatus enumeration. Timestamps
are stored as preformatted UTC strings ("2024-05-01 09:30:00 UTC"); the fixed
width format keeps string order equal to chronological order.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELED = "Canceled"

    def __str__(self) -> str:
        return self.value


def format_timestamp(moment: datetime) -> str:
    """Render an aware or naive datetime as a UTC timestamp string."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Task:
    """A single to-do record.

    Fields:
        id: Positive integer assigned by the store; never reused.
        description: Free-form text (no emptiness or length checks).
        status: One of TaskStatus.
        created_at: Timestamp captured at creation.
        updated_at: Timestamp refreshed by every mutation.
    """
    id: int
    description: str
    status: TaskStatus
    created_at: str
    updated_at: str

    @classmethod
    def create(cls, task_id: int, description: str, timestamp: Optional[str] = None) -> "Task":
        now = timestamp or format_timestamp(utc_now())
        return cls(
            id=task_id,
            description=description,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    def set_status(self, status: TaskStatus, timestamp: Optional[str] = None) -> None:
        # any transition is allowed, a no-op still touches updated_at
        self.status = TaskStatus(status)
        self._touch(timestamp)

    def set_description(self, description: str, timestamp: Optional[str] = None) -> None:
        self.description = description
        self._touch(timestamp)

    def _touch(self, timestamp: Optional[str]) -> None:
        now = timestamp or format_timestamp(utc_now())
        # clock skew must not move updated_at behind created_at
        self.updated_at = max(now, self.created_at)

    # -------------------- serialization --------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'description': self.description,
            'status': self.status.value,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from its persisted form.

        Raises KeyError for a missing field and ValueError for an unknown
        status, a non-integer id or a non-string text field.
        """
        tid = raw['id']
        if isinstance(tid, bool) or not isinstance(tid, int):
            raise ValueError(f"task id must be an integer, got {tid!r}")
        for key in ('description', 'created_at', 'updated_at'):
            if not isinstance(raw[key], str):
                raise ValueError(f"task {key} must be a string, got {raw[key]!r}")
        return cls(
            id=tid,
            description=raw['description'],
            status=TaskStatus(raw['status']),
            created_at=raw['created_at'],
            updated_at=raw['updated_at'],
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, description={self.description}, status={self.status})"
