"""Configuration helpers.

Settings come from the process environment, optionally seeded from a
``.env`` file in the working directory. Priority: real env var > .env
override > built-in default.
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Dict, Iterable, Optional

DEFAULT_TASKS_FILE = 'tasks.json'
DEFAULT_LOG_LEVEL = 'WARNING'
DEFAULT_LOG_MODE = 'dev'

ENV_FILE = 'TASKMANAGER_FILE'
ENV_LOG_LEVEL = 'TASKMANAGER_LOG_LEVEL'
ENV_LOG_MODE = 'TASKMANAGER_LOG_MODE'

KNOWN_KEYS = frozenset({
    ENV_FILE, ENV_LOG_LEVEL, ENV_LOG_MODE,
    'TASKMANAGER_PRIMARY', 'TASKMANAGER_PENDING', 'TASKMANAGER_COMPLETED', 'TASKMANAGER_CANCELED',
})


def truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def read_dotenv(path: Path, keys: Iterable[str] = KNOWN_KEYS) -> Dict[str, str]:
    """Parse KEY=VALUE lines from a .env file, keeping only known keys.

    Blank lines, comments and lines without '=' are skipped. Surrounding
    quotes on values are stripped. A missing, unreadable or undecodable
    file yields an empty dict.
    """
    wanted = set(keys)
    overrides: Dict[str, str] = {}
    if not path.is_file():
        return overrides
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError):
        return overrides
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k in wanted:
            overrides[k] = v
    return overrides


def get_setting(key: str, default: Optional[str] = None, env_path: Optional[Path] = None) -> Optional[str]:
    value = os.environ.get(key)
    if value:
        return value
    dotenv = read_dotenv(env_path if env_path is not None else Path.cwd() / '.env')
    return dotenv.get(key, default)


def resolve_store_path(explicit: Optional[str] = None) -> Path:
    """Pick the store file: explicit argument, then env/.env, then tasks.json."""
    if explicit:
        return Path(explicit)
    return Path(get_setting(ENV_FILE, DEFAULT_TASKS_FILE) or DEFAULT_TASKS_FILE)
