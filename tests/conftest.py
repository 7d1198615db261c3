"""Shared fixtures: isolated working directory, a stepping clock, store paths."""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from log_config import configure_logging


class SteppingClock:
    """Clock that moves forward by `step` every time it is read."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test in an empty directory without TASKMANAGER_* settings."""
    for key in ("TASKMANAGER_FILE", "TASKMANAGER_LOG_LEVEL", "TASKMANAGER_LOG_MODE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    configure_logging()
    return tmp_path


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock(datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "tasks.json"
