"""Filesystem listing helpers feeding tree-node materialization."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .types import DirectoryChild

logger = logging.getLogger(__name__)


def directory_sort_key(child: DirectoryChild) -> tuple[bool, str]:
    """Directories first, then case-folded name."""
    return (not child.is_dir, child.name.casefold())


def list_directory_children(
    directory: Path,
    show_hidden: bool = True,
    sort_entries: bool = False,
) -> tuple[list[DirectoryChild], OSError | None]:
    """List ``directory`` in one scan pass.

    Returns ``(children, scan_error)``. Entries keep the order the platform
    returns them unless ``sort_entries`` is set. ``scan_error`` is set, and
    ``children`` is empty, when the directory cannot be scanned.
    Symlinks are never followed when classifying entries.
    """
    children: list[DirectoryChild] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                name = entry.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                children.append(DirectoryChild(name=name, path=Path(entry.path), is_dir=is_dir))
    except OSError as exc:
        logger.warning("listing %s failed: %s", directory, exc)
        return [], exc

    if sort_entries:
        children.sort(key=directory_sort_key)
    return children, None


__all__ = [
    "directory_sort_key",
    "list_directory_children",
]
