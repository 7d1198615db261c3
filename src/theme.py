"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via environment or a .env file in the
  working directory (TASKMANAGER_PRIMARY / _PENDING / _COMPLETED / _CANCELED).
"""
from __future__ import annotations
import os, sys
from pathlib import Path

from config import read_dotenv, truthy_env
from models import TaskStatus

_FORCE = truthy_env(os.environ.get("FORCE_COLOR"), default=False)
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _is_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

def _fg_truecolor(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    """Convert a hex color code to an ANSI escape sequence."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return _fg_truecolor(r, g, b)
    return _fg_256(r, g, b)

RESET = _code('0')
BOLD = _code('1')

HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_PENDING_DEFAULT = '#F6FF99'
HEX_COMPLETED_DEFAULT = '#A7E399'
HEX_CANCELED_DEFAULT = '#E38A8A'

_ENV_OVERRIDES = {k: '#' + v.lstrip('#') for k, v in read_dotenv(Path.cwd() / '.env').items() if _is_hex(v)}

def _resolve(key: str, default: str) -> str:
    """Real env var > .env override > default; invalid hex falls back."""
    value = os.environ.get(key) or _ENV_OVERRIDES.get(key, default)
    return value if _is_hex(value) else default

HEX_PRIMARY = _resolve('TASKMANAGER_PRIMARY', HEX_PRIMARY_DEFAULT)
HEX_PENDING = _resolve('TASKMANAGER_PENDING', HEX_PENDING_DEFAULT)
HEX_COMPLETED = _resolve('TASKMANAGER_COMPLETED', HEX_COMPLETED_DEFAULT)
HEX_CANCELED = _resolve('TASKMANAGER_CANCELED', HEX_CANCELED_DEFAULT)

PRIMARY = _from_hex(HEX_PRIMARY)

STATUS_COLOR = {
    TaskStatus.PENDING: _from_hex(HEX_PENDING),
    TaskStatus.COMPLETED: _from_hex(HEX_COMPLETED),
    TaskStatus.CANCELED: _from_hex(HEX_CANCELED),
}

HEADER_COLOR = PRIMARY
ID_COLOR = PRIMARY + BOLD
ERROR_COLOR = STATUS_COLOR[TaskStatus.CANCELED] + BOLD

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

def status_label(status: TaskStatus) -> str:
    return color(status.value, STATUS_COLOR.get(status, ''))

__all__ = [
    'color','status_label','RESET','BOLD','STATUS_COLOR','HEADER_COLOR','ID_COLOR','ERROR_COLOR',
]
