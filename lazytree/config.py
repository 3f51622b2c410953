"""JSON preferences loaded once at startup.

Stores the highlight style, preferred editor, listing options and pane width.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazytree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_LEFT_PANE_WIDTH = 40
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Resolved preferences; CLI flags are applied on top by the caller."""

    style: str = "monokai"
    editor: str | None = None
    show_hidden: bool = True
    sort_entries: bool = False
    refresh_on_revisit: bool = False
    left_pane_width: int = DEFAULT_LEFT_PANE_WIDTH
    log_level: str = "WARNING"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _load_str(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    """Only explicit booleans are accepted."""
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _load_positive_int(data: dict[str, object], key: str, default: int) -> int:
    """Booleans and non-integers are treated as invalid."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _load_log_level(data: dict[str, object]) -> str:
    value = _load_str(data, "log_level")
    if value is None or value.upper() not in LOG_LEVELS:
        return Settings.log_level
    return value.upper()


def load_settings() -> Settings:
    """Build ``Settings`` from the config file, keeping defaults for bad values."""
    data = load_config()
    return Settings(
        style=_load_str(data, "style") or Settings.style,
        editor=_load_str(data, "editor"),
        show_hidden=_load_bool(data, "show_hidden", Settings.show_hidden),
        sort_entries=_load_bool(data, "sort_entries", Settings.sort_entries),
        refresh_on_revisit=_load_bool(data, "refresh_on_revisit", Settings.refresh_on_revisit),
        left_pane_width=_load_positive_int(data, "left_pane_width", DEFAULT_LEFT_PANE_WIDTH),
        log_level=_load_log_level(data),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "LOG_LEVELS",
    "Settings",
    "load_config",
    "load_settings",
]
