"""Flattening and formatting of visible tree rows."""

from __future__ import annotations

from pathlib import Path

from ..ansi import sanitize_single_line
from ..ui_theme import DEFAULT_THEME, UITheme
from .types import TreeNode, TreeRow


def visible_rows(root: TreeNode) -> list[TreeRow]:
    """Return rows for ``root`` and every descendant under expanded nodes."""
    rows: list[TreeRow] = []
    stack: list[tuple[TreeNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        rows.append(TreeRow(node=node, depth=depth))
        if node.expanded:
            for child in reversed(node.children):
                stack.append((child, depth + 1))
    return rows


def find_row_index(rows: list[TreeRow], path: Path) -> int | None:
    for idx, row in enumerate(rows):
        if row.node.path == path:
            return idx
    return None


def parent_row_index(rows: list[TreeRow], index: int) -> int | None:
    """Return the index of the nearest shallower row above ``index``."""
    if not 0 <= index < len(rows):
        return None
    depth = rows[index].depth
    for idx in range(index - 1, -1, -1):
        if rows[idx].depth < depth:
            return idx
    return None


def file_color_for(path: Path, theme: UITheme | None = None) -> str:
    """Return ANSI color used for file names based on suffix."""
    active_theme = theme or DEFAULT_THEME
    if path.suffix.lower() in {".py", ".pyi", ".pyw"}:
        return active_theme.tree_file_python
    return active_theme.tree_file_default


def format_tree_row(row: TreeRow, theme: UITheme | None = None) -> str:
    """Render one tree row as ANSI-styled display text."""
    active_theme = theme or DEFAULT_THEME
    node = row.node
    reset = active_theme.reset
    label = sanitize_single_line(node.label)
    indent = "  " * row.depth
    if row.depth == 0:
        color = active_theme.tree_root
    elif node.is_dir:
        color = active_theme.tree_dir
    else:
        color = file_color_for(node.path, active_theme)

    if node.is_dir:
        marker = "▾ " if node.expanded else "▸ "
        name = label if label.endswith("/") else f"{label}/"
        return f"{indent}{active_theme.tree_marker}{marker}{reset}{color}{name}{reset}"
    return f"{indent}  {color}{label}{reset}"


__all__ = [
    "visible_rows",
    "find_row_index",
    "parent_row_index",
    "file_color_for",
    "format_tree_row",
]
