"""External editor resolution and the suspend/edit/resume cycle.

The terminal leaves TUI mode for the duration of the editor process and is
restored on every exit path. Focus never stays suspended: errors are turned
into preview text after the tree regains focus.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Callable, Mapping, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import EditorLaunchError
from .focus import FocusStateMachine, PendingEditSession
from .navigation import NavigationController
from .tree_model import TreeNode

logger = logging.getLogger(__name__)

EDITOR_ENV_VARS: tuple[str, ...] = ("VISUAL", "EDITOR")
DEFAULT_EDITOR_CANDIDATES: tuple[str, ...] = ("nvim", "vim", "vi", "nano", "emacs")


class SuspendableTerminal(Protocol):
    def suspended(self) -> AbstractContextManager[None]: ...


def _split_command(value: str) -> list[str]:
    try:
        return shlex.split(value)
    except ValueError as exc:
        raise EditorLaunchError(f"Cannot edit: invalid editor command {value!r}: {exc}") from exc


def resolve_editor_command(
    environ: Mapping[str, str] | None = None,
    preferred: str | None = None,
    candidates: Sequence[str] = DEFAULT_EDITOR_CANDIDATES,
    which: Callable[[str], str | None] = shutil.which,
) -> tuple[str, ...]:
    """Return the editor command as an argv prefix.

    Order: ``$VISUAL``, ``$EDITOR``, the configured ``preferred`` command,
    then the first of ``candidates`` found on ``PATH``. The environment is
    read on every call.
    """
    env = os.environ if environ is None else environ
    for name in EDITOR_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            command = _split_command(value)
            if command:
                return tuple(command)

    if preferred:
        command = _split_command(preferred)
        if command and which(command[0]) is not None:
            return tuple(command)

    for candidate in candidates:
        if which(candidate) is not None:
            return (candidate,)

    tried = ", ".join(["$VISUAL", "$EDITOR", *([preferred] if preferred else []), *candidates])
    raise EditorLaunchError(f"Cannot edit: no editor available (tried {tried}).")


def _wait_or_kill(process: subprocess.Popen) -> int:
    """Wait for ``process``; kill and reap it when the wait is interrupted."""
    try:
        return process.wait()
    except BaseException:
        process.kill()
        process.wait()
        raise


@dataclass(frozen=True)
class EditOutcome:
    """Result of one edit cycle."""

    path: Path | None
    returncode: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EditorSession:
    """Runs the edit cycle against the focus machine and terminal."""

    def __init__(
        self,
        focus: FocusStateMachine,
        terminal: SuspendableTerminal,
        navigation: NavigationController,
        *,
        preferred_editor: str | None = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        resolve_command: Callable[..., tuple[str, ...]] = resolve_editor_command,
    ) -> None:
        self.focus = focus
        self.terminal = terminal
        self.navigation = navigation
        self.preferred_editor = preferred_editor
        self.popen = popen
        self.resolve_command = resolve_command

    def edit(self, node: TreeNode | None) -> EditOutcome:
        """Edit ``node`` in an external editor, then reload and focus the preview."""
        if node is None or node.is_dir:
            message = "Only files can be edited."
            self.navigation.show_error(message)
            return EditOutcome(path=None if node is None else node.path, error=message)

        path = node.path
        try:
            command = self.resolve_command(preferred=self.preferred_editor)
        except EditorLaunchError as exc:
            self.navigation.show_error(exc)
            return EditOutcome(path=path, error=str(exc))

        self.focus.suspend(PendingEditSession(path=path, command=command))
        returncode: int | None = None
        launch_error: EditorLaunchError | None = None
        try:
            with self.terminal.suspended():
                logger.info("launching %s for %s", command, path)
                process = self.popen([*command, str(path)])
                self.focus.attach_process(process)
                returncode = _wait_or_kill(process)
        except KeyboardInterrupt:
            launch_error = EditorLaunchError(f"Editor {command[0]} was interrupted.")
        except Exception as exc:
            launch_error = EditorLaunchError(f"Failed to launch editor {command[0]}: {exc}")
        finally:
            self.focus.resume()

        if launch_error is not None:
            self.navigation.show_error(launch_error)
            return EditOutcome(path=path, error=str(launch_error))

        message: str | None = None
        if returncode:
            message = f"Editor exited with status {returncode}."
            logger.warning("editor %s exited with status %s for %s", command[0], returncode, path)
        self.navigation.load_file(path)
        self.focus.focus_preview()
        return EditOutcome(path=path, returncode=returncode, error=message)


__all__ = [
    "EDITOR_ENV_VARS",
    "DEFAULT_EDITOR_CANDIDATES",
    "resolve_editor_command",
    "EditOutcome",
    "EditorSession",
]
