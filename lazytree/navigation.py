"""Selection handling: materialize, toggle, or preview the current node.

Directory selections drive the tree model; file selections read the whole
file and hand it to the token renderer. Filesystem failures become red
preview text and never change tree state.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path

from .ansi import sanitize_single_line, sanitize_terminal_text
from .errors import FilesystemError
from .highlight import DEFAULT_STYLE, render
from .tree_model import NodeKind, TreeNode, materialize_children, refresh_children, toggle_expansion
from .ui_theme import error_text

logger = logging.getLogger(__name__)

PREVIEW_TITLE = "Preview"


class SelectionOutcome(enum.Enum):
    MATERIALIZED = "materialized"
    TOGGLED = "toggled"
    REFRESHED = "refreshed"
    PREVIEWED = "previewed"
    FAILED = "failed"


@dataclass
class PreviewState:
    """Title and text currently shown by the preview surface."""

    title: str = PREVIEW_TITLE
    text: str = ""
    path: Path | None = None
    is_error: bool = False

    def show(self, text: str, path: Path) -> None:
        self.title = f"{PREVIEW_TITLE}: {sanitize_single_line(path.name)}"
        self.text = text
        self.path = path
        self.is_error = False

    def show_error(self, message: str) -> None:
        self.text = error_text(sanitize_terminal_text(message))
        self.is_error = True


class NavigationController:
    """Reacts to node selections with tree-model and preview updates."""

    def __init__(
        self,
        preview: PreviewState,
        *,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
        show_hidden: bool = True,
        sort_entries: bool = False,
        refresh_on_revisit: bool = False,
    ) -> None:
        self.preview = preview
        self.style = style
        self.no_color = no_color
        self.show_hidden = show_hidden
        self.sort_entries = sort_entries
        self.refresh_on_revisit = refresh_on_revisit
        self.current: TreeNode | None = None

    def select(self, node: TreeNode) -> SelectionOutcome:
        """Handle a selection event for ``node``."""
        self.current = node
        try:
            node.path.stat()
        except OSError as exc:
            self.show_error(FilesystemError(node.path, "stat", exc))
            return SelectionOutcome.FAILED

        if node.kind is NodeKind.FILE:
            return SelectionOutcome.PREVIEWED if self.load_file(node.path) else SelectionOutcome.FAILED

        if not node.materialized:
            error = self._materialize(node)
            if error is not None:
                self.show_error(error)
                return SelectionOutcome.FAILED
            node.expanded = True
            return SelectionOutcome.MATERIALIZED

        if self.refresh_on_revisit and not node.expanded:
            error = self._refresh(node)
            if error is not None:
                self.show_error(error)
                return SelectionOutcome.FAILED
            node.expanded = True
            return SelectionOutcome.REFRESHED

        toggle_expansion(node)
        return SelectionOutcome.TOGGLED

    def refresh(self, node: TreeNode) -> bool:
        """Re-list a directory on demand, expanding it on success."""
        if not node.is_dir:
            return False
        self.current = node
        error = self._refresh(node)
        if error is not None:
            self.show_error(error)
            return False
        node.expanded = True
        return True

    def load_file(self, path: Path) -> bool:
        """Read, render and display ``path``; return ``False`` on read failure."""
        try:
            content = path.read_bytes()
        except OSError as exc:
            self.show_error(FilesystemError(path, "read", exc))
            return False
        self.preview.show(render(content, path, self.style, self.no_color), path)
        return True

    def show_error(self, error: Exception | str) -> None:
        logger.warning("%s", error)
        self.preview.show_error(str(error))

    def _materialize(self, node: TreeNode) -> FilesystemError | None:
        return materialize_children(node, show_hidden=self.show_hidden, sort_entries=self.sort_entries)

    def _refresh(self, node: TreeNode) -> FilesystemError | None:
        return refresh_children(node, show_hidden=self.show_hidden, sort_entries=self.sort_entries)


__all__ = [
    "PREVIEW_TITLE",
    "SelectionOutcome",
    "PreviewState",
    "NavigationController",
]
