"""Input-focus state machine for the tree, preview and editor surfaces.

Transitions happen only through named methods; anything else (for example
suspending twice) raises ``InvariantViolation``.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import InvariantViolation

logger = logging.getLogger(__name__)


class FocusState(enum.Enum):
    TREE_FOCUSED = "tree"
    PREVIEW_FOCUSED = "preview"
    EDITOR_SUSPENDED = "editor"


@dataclass(frozen=True)
class PendingEditSession:
    """Edit in flight between suspend and resume."""

    path: Path
    command: tuple[str, ...]
    process: subprocess.Popen | None = None


class FocusStateMachine:
    """Tracks which surface owns keyboard input."""

    def __init__(self) -> None:
        self._state = FocusState.TREE_FOCUSED
        self._pending: PendingEditSession | None = None

    @property
    def state(self) -> FocusState:
        return self._state

    @property
    def pending(self) -> PendingEditSession | None:
        return self._pending

    @property
    def suspended(self) -> bool:
        return self._state is FocusState.EDITOR_SUSPENDED

    def toggle_preview(self) -> FocusState:
        """Swap between tree and preview focus."""
        self._require_interactive("toggle focus")
        if self._state is FocusState.TREE_FOCUSED:
            return self._set(FocusState.PREVIEW_FOCUSED)
        return self._set(FocusState.TREE_FOCUSED)

    def focus_tree(self) -> FocusState:
        self._require_interactive("focus tree")
        return self._set(FocusState.TREE_FOCUSED)

    def focus_preview(self) -> FocusState:
        self._require_interactive("focus preview")
        return self._set(FocusState.PREVIEW_FOCUSED)

    def suspend(self, session: PendingEditSession) -> None:
        """Hand input to an external editor session."""
        self._require_interactive("suspend")
        self._pending = session
        self._set(FocusState.EDITOR_SUSPENDED)

    def attach_process(self, process: subprocess.Popen) -> None:
        """Record the launched process on the pending session."""
        if self._pending is None:
            raise InvariantViolation("no pending edit session to attach a process to")
        self._pending = PendingEditSession(
            path=self._pending.path,
            command=self._pending.command,
            process=process,
        )

    def resume(self, focus: FocusState = FocusState.TREE_FOCUSED) -> PendingEditSession:
        """Leave the editor session and return the finished record."""
        if not self.suspended or self._pending is None:
            raise InvariantViolation("resume without a suspended editor session")
        if focus is FocusState.EDITOR_SUSPENDED:
            raise InvariantViolation("cannot resume into the suspended state")
        session = self._pending
        self._pending = None
        self._set(focus)
        return session

    def _require_interactive(self, action: str) -> None:
        if self.suspended:
            raise InvariantViolation(f"cannot {action} while an editor session is suspended")

    def _set(self, state: FocusState) -> FocusState:
        if state is not self._state:
            logger.debug("focus %s -> %s", self._state.value, state.value)
        self._state = state
        return state


__all__ = [
    "FocusState",
    "PendingEditSession",
    "FocusStateMachine",
]
