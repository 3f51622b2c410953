"""Error taxonomy shared by the tree model, preview and editor layers.

Filesystem and editor failures are recoverable and end up as preview text.
``InvariantViolation`` marks caller defects and is never caught by the core.
"""

from __future__ import annotations

import os
from pathlib import Path


def describe_os_error(exc: OSError) -> str:
    """Return a short human description for ``exc``."""
    if exc.strerror:
        return exc.strerror
    if exc.errno is not None:
        return os.strerror(exc.errno)
    return str(exc) or type(exc).__name__


class LazyTreeError(Exception):
    """Base class for all lazytree errors."""


class FilesystemError(LazyTreeError):
    """Directory listing, file read, or stat failure for one path."""

    def __init__(self, path: Path, action: str, cause: OSError) -> None:
        self.path = path
        self.action = action
        self.cause = cause
        super().__init__(f"Cannot {action} {path}: {describe_os_error(cause)}")


class RenderError(LazyTreeError):
    """Tokenizer or style lookup failure; callers fall back to literal text."""


class EditorLaunchError(LazyTreeError):
    """No editor could be resolved, or the editor process failed to start."""


class InvariantViolation(LazyTreeError, RuntimeError):
    """Raised when a caller sequences tree or focus operations incorrectly."""


__all__ = [
    "LazyTreeError",
    "FilesystemError",
    "RenderError",
    "EditorLaunchError",
    "InvariantViolation",
    "describe_os_error",
]
