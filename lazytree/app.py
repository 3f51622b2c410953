"""Interactive browser session: key dispatch and the main loop.

``BrowserSession`` owns the tree root, the focus state machine and the
preview. Keys are routed by focus: tree keys move the selection and select
nodes, preview keys scroll, and ``e`` runs the editor cycle from either.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .ansi import build_screen_lines
from .config import Settings
from .editor import EditorSession
from .focus import FocusState, FocusStateMachine
from .input import read_key
from .navigation import NavigationController, PreviewState, SelectionOutcome
from .screen import RenderContext, clamp_left_width, content_rows, render_frame
from .tree_model import NodeKind, TreeNode, TreeRow, find_row_index, parent_row_index, visible_rows

logger = logging.getLogger(__name__)

KEY_POLL_MS = 200
QUIT_KEYS = {"q", "CTRL_C"}


class SessionTerminal(Protocol):
    def size(self) -> tuple[int, int]: ...

    def write(self, text: str) -> None: ...

    def raw_mode(self): ...

    def suspended(self): ...


class BrowserSession:
    """State and key handling for one run of the browser."""

    def __init__(
        self,
        root_path: Path,
        settings: Settings,
        terminal: SessionTerminal,
        *,
        no_color: bool = False,
        initial_file: Path | None = None,
        editor_session_factory: Callable[..., EditorSession] = EditorSession,
    ) -> None:
        self.settings = settings
        self.terminal = terminal
        self.root = TreeNode.root(root_path)
        self.preview = PreviewState()
        self.focus = FocusStateMachine()
        self.navigation = NavigationController(
            self.preview,
            style=settings.style,
            no_color=no_color,
            show_hidden=settings.show_hidden,
            sort_entries=settings.sort_entries,
            refresh_on_revisit=settings.refresh_on_revisit,
        )
        self.editor = editor_session_factory(
            self.focus,
            terminal,
            self.navigation,
            preferred_editor=settings.editor,
        )
        self.rows: list[TreeRow] = []
        self.selected_idx = 0
        self.tree_start = 0
        self.preview_start = 0
        self.preview_lines: list[str] = []
        self._preview_key: tuple[str, int] | None = None
        self.status_message = ""
        self.width, self.height = terminal.size()
        self.dirty = True

        # The root starts expanded.
        self.navigation.select(self.root)
        self.rebuild_rows()
        if initial_file is not None:
            self._open_initial_file(initial_file)

    # Layout

    @property
    def left_width(self) -> int:
        return clamp_left_width(self.width, self.settings.left_pane_width)

    @property
    def right_width(self) -> int:
        return max(1, self.width - self.left_width - 2)

    @property
    def visible_rows_count(self) -> int:
        return content_rows(self.height)

    @property
    def selected_node(self) -> TreeNode | None:
        if not self.rows:
            return None
        return self.rows[self.selected_idx].node

    def sync_size(self) -> None:
        size = self.terminal.size()
        if size != (self.width, self.height):
            self.width, self.height = size
            self.dirty = True

    def rebuild_rows(self, keep: TreeNode | None = None) -> None:
        """Re-flatten the tree, keeping ``keep`` (or the current row) selected."""
        target = keep if keep is not None else self.selected_node
        self.rows = visible_rows(self.root)
        self.selected_idx = 0
        if target is not None:
            for idx, row in enumerate(self.rows):
                if row.node is target:
                    self.selected_idx = idx
                    break
        self._scroll_tree_to_selection()
        self.dirty = True

    def refresh_preview_lines(self) -> None:
        key = (self.preview.text, self.right_width)
        if key == self._preview_key:
            return
        self._preview_key = key
        self.preview_lines = build_screen_lines(self.preview.text, self.right_width, wrap=True)
        self.preview_start = min(self.preview_start, self._max_preview_start())

    def _max_preview_start(self) -> int:
        return max(0, len(self.preview_lines) - self.visible_rows_count)

    def _scroll_tree_to_selection(self) -> None:
        rows = self.visible_rows_count
        if self.selected_idx < self.tree_start:
            self.tree_start = self.selected_idx
        elif self.selected_idx >= self.tree_start + rows:
            self.tree_start = self.selected_idx - rows + 1
        self.tree_start = max(0, min(self.tree_start, max(0, len(self.rows) - 1)))

    def _open_initial_file(self, path: Path) -> None:
        idx = find_row_index(self.rows, path.absolute())
        if idx is None:
            self.navigation.load_file(path)
            return
        self.selected_idx = idx
        self.select_current()

    # Actions

    def move_selection(self, delta: int) -> None:
        if not self.rows:
            return
        new_idx = max(0, min(len(self.rows) - 1, self.selected_idx + delta))
        if new_idx != self.selected_idx:
            self.selected_idx = new_idx
            self._scroll_tree_to_selection()
            self.dirty = True

    def select_current(self) -> SelectionOutcome | None:
        node = self.selected_node
        if node is None:
            return None
        previous_text = self.preview.text
        outcome = self.navigation.select(node)
        if outcome is not SelectionOutcome.PREVIEWED:
            self.rebuild_rows(keep=node)
        if self.preview.text != previous_text:
            self.preview_start = 0
        self.status_message = ""
        self.dirty = True
        return outcome

    def collapse_or_parent(self) -> None:
        node = self.selected_node
        if node is None:
            return
        if node.is_dir and node.expanded:
            node.expanded = False
            self.rebuild_rows(keep=node)
            return
        parent_idx = parent_row_index(self.rows, self.selected_idx)
        if parent_idx is not None:
            self.move_selection(parent_idx - self.selected_idx)

    def expand_or_open(self) -> None:
        node = self.selected_node
        if node is None:
            return
        if node.is_dir and node.expanded:
            self.move_selection(1)
            return
        self.select_current()

    def refresh_selected(self) -> None:
        node = self.selected_node
        if node is None or not node.is_dir:
            return
        self.navigation.refresh(node)
        self.rebuild_rows(keep=node)

    def edit_target(self) -> TreeNode | None:
        """Tree focus edits the selected row; preview focus edits the shown file."""
        if self.focus.state is FocusState.PREVIEW_FOCUSED and self.preview.path is not None:
            path = self.preview.path
            for row in self.rows:
                if row.node.path == path:
                    return row.node
            return TreeNode(label=path.name, path=path, kind=NodeKind.FILE)
        return self.selected_node

    def edit(self) -> None:
        outcome = self.editor.edit(self.edit_target())
        self.status_message = outcome.error or ""
        if outcome.ok:
            self.preview_start = 0
        self.dirty = True

    def scroll_preview(self, delta: int) -> None:
        self.refresh_preview_lines()
        new_start = max(0, min(self._max_preview_start(), self.preview_start + delta))
        if new_start != self.preview_start:
            self.preview_start = new_start
            self.dirty = True

    def toggle_focus(self) -> None:
        self.focus.toggle_preview()
        self.dirty = True

    # Key dispatch

    def handle_key(self, key: str) -> bool:
        """Handle one key; return ``True`` when the session should end."""
        if key in QUIT_KEYS:
            return True
        if key == "TAB":
            self.toggle_focus()
            return False
        if key == "e":
            self.edit()
            return False
        if key == "CTRL_L":
            self.dirty = True
            return False
        if self.focus.state is FocusState.PREVIEW_FOCUSED:
            self._handle_preview_key(key)
        else:
            self._handle_tree_key(key)
        return False

    def _handle_tree_key(self, key: str) -> None:
        if key in {"j", "DOWN"}:
            self.move_selection(1)
        elif key in {"k", "UP"}:
            self.move_selection(-1)
        elif key in {"ENTER", " "}:
            self.select_current()
        elif key in {"l", "RIGHT"}:
            self.expand_or_open()
        elif key in {"h", "LEFT"}:
            self.collapse_or_parent()
        elif key in {"g", "HOME"}:
            self.move_selection(-self.selected_idx)
        elif key in {"G", "END"}:
            self.move_selection(len(self.rows) - 1 - self.selected_idx)
        elif key == "PAGE_DOWN":
            self.move_selection(self.visible_rows_count)
        elif key == "PAGE_UP":
            self.move_selection(-self.visible_rows_count)
        elif key == "R":
            self.refresh_selected()

    def _handle_preview_key(self, key: str) -> None:
        page = max(1, self.visible_rows_count - 1)
        if key == "ESC":
            self.focus.focus_tree()
            self.dirty = True
        elif key in {"j", "DOWN"}:
            self.scroll_preview(1)
        elif key in {"k", "UP"}:
            self.scroll_preview(-1)
        elif key in {"PAGE_DOWN", " ", "CTRL_D"}:
            self.scroll_preview(page)
        elif key in {"PAGE_UP", "b", "CTRL_U"}:
            self.scroll_preview(-page)
        elif key in {"g", "HOME"}:
            self.scroll_preview(-self.preview_start)
        elif key in {"G", "END"}:
            self.scroll_preview(self._max_preview_start() - self.preview_start)

    # Painting and loop

    def render_context(self) -> RenderContext:
        self.refresh_preview_lines()
        return RenderContext(
            rows=self.rows,
            selected_idx=self.selected_idx,
            tree_start=self.tree_start,
            preview_lines=self.preview_lines,
            preview_start=self.preview_start,
            preview_title=self.preview.title,
            focus=self.focus.state,
            width=self.width,
            height=self.height,
            left_width=self.left_width,
            status_message=self.status_message,
        )

    def paint(self) -> None:
        self.terminal.write(render_frame(self.render_context()))
        self.dirty = False

    def run(self, stdin_fd: int) -> None:
        """Run the interactive loop until a quit key is pressed."""
        with self.terminal.raw_mode():
            while True:
                self.sync_size()
                if self.dirty:
                    self.paint()
                key = read_key(stdin_fd, timeout_ms=KEY_POLL_MS)
                if not key:
                    continue
                if self.handle_key(key):
                    break
        logger.info("session ended at %s", self.root.path)


__all__ = ["KEY_POLL_MS", "BrowserSession"]
