"""Persistence for the task store.

The whole store (every task plus the id counter) lives in one JSON
document:

    {"tasks": {"1": {"id": 1, ...}}, "next_id": 2}

A missing file is the empty-store case, not an error. Anything else that
stops a clean read or write is raised as StorageError.
"""
from __future__ import annotations
import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from errors import StorageError
from manager import Clock, TaskManager

log = structlog.get_logger(__name__)


class Storage:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, clock: Optional[Clock] = None) -> TaskManager:
        """Load the store from disk.

        Missing file -> fresh store with next_id 1.
        Unreadable file, invalid JSON or a malformed document -> StorageError.
        """
        if not self.exists():
            log.debug("store.missing", path=str(self.path))
            return TaskManager(clock)
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Could not read task file {self.path}", self.path, exc) from exc
        except json.JSONDecodeError as exc:
            raise StorageError(f"Task file {self.path} is not valid JSON", self.path, exc) from exc
        if not isinstance(data, dict):
            raise StorageError(f"Task file {self.path} does not contain a task store", self.path)
        try:
            manager = TaskManager.from_dict(data, clock)
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Task file {self.path} is malformed", self.path, exc) from exc
        log.debug("store.loaded", path=str(self.path), tasks=len(manager), next_id=manager.next_id)
        return manager

    def _file_mode(self) -> int:
        """Mode for the saved file: the current file's, else 0666 minus umask."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def save(self, manager: TaskManager) -> None:
        """Persist the store (pretty-printed), replacing the file in one step.

        The document is written to a temporary file beside the target and
        moved over it, so the old file stays intact if the write fails.
        The replacement keeps the permissions of the file it overwrites.
        """
        directory = self.path.parent
        tmp_name: Optional[str] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix='.tmp', dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(manager.to_dict(), f, indent=4, ensure_ascii=False)
                f.write('\n')
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"Could not write task file {self.path}", self.path, exc) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        log.debug("store.saved", path=str(self.path), tasks=len(manager), next_id=manager.next_id)
