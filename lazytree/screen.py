"""Frame painting for the split tree/preview layout.

Builds one full-screen ANSI frame from a ``RenderContext`` snapshot; the
caller writes it to the terminal.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import clip_ansi_line, pad_ansi_line, sanitize_single_line
from .focus import FocusState
from .tree_model import TreeRow, format_tree_row
from .ui_theme import DEFAULT_THEME, UITheme

MIN_LEFT_WIDTH = 12
MIN_RIGHT_WIDTH = 20
KEY_HINT = "│ ⏎ open  e edit  ⇥ focus  q quit"


@dataclass(frozen=True)
class RenderContext:
    """Everything needed to paint one frame."""

    rows: list[TreeRow]
    selected_idx: int
    tree_start: int
    preview_lines: list[str]
    preview_start: int
    preview_title: str
    focus: FocusState
    width: int
    height: int
    left_width: int
    status_message: str = ""
    theme: UITheme = DEFAULT_THEME


def clamp_left_width(total_width: int, left_width: int) -> int:
    """Keep the tree pane within bounds that leave room for the preview."""
    max_left = max(1, total_width - MIN_RIGHT_WIDTH - 1)
    min_left = min(MIN_LEFT_WIDTH, max_left)
    return max(min_left, min(left_width, max_left))


def content_rows(height: int) -> int:
    """Rows available to the panes (title row and status line excluded)."""
    return max(1, height - 2)


def selected_with_ansi(text: str, theme: UITheme = DEFAULT_THEME) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return theme.reverse + text.replace("\033[0m", "\033[0;7m") + theme.reset


def build_status_line(left_text: str, width: int, right_text: str = KEY_HINT) -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _title_row(context: RenderContext, left_width: int, right_width: int) -> str:
    theme = context.theme
    tree_title = " Files"
    preview_title = f" {context.preview_title}"
    if context.focus is FocusState.TREE_FOCUSED:
        tree_part = selected_with_ansi(pad_ansi_line(tree_title, left_width), theme)
        preview_part = f"{theme.preview_title}{clip_ansi_line(preview_title, right_width)}{theme.reset}"
    else:
        tree_part = pad_ansi_line(tree_title, left_width)
        preview_part = selected_with_ansi(pad_ansi_line(preview_title, right_width), theme)
    return f"{tree_part}{theme.divider}│{theme.reset}{preview_part}"


def render_frame(context: RenderContext) -> str:
    """Return the ANSI text for one complete frame."""
    theme = context.theme
    width = max(1, context.width)
    left_width = clamp_left_width(width, context.left_width)
    right_width = max(1, width - left_width - 2)
    rows = content_rows(context.height)

    out: list[str] = ["\033[H\033[J"]
    out.append(_title_row(context, left_width, right_width))
    out.append("\r\n")
    for row in range(rows):
        tree_idx = context.tree_start + row
        if tree_idx < len(context.rows):
            tree_text = format_tree_row(context.rows[tree_idx], theme)
            tree_text = pad_ansi_line(tree_text, left_width)
            if tree_idx == context.selected_idx:
                tree_text = selected_with_ansi(tree_text, theme)
        else:
            tree_text = " " * left_width
        out.append(tree_text)
        out.append(f"{theme.divider}│{theme.reset}")

        text_idx = context.preview_start + row
        if text_idx < len(context.preview_lines):
            text_raw = clip_ansi_line(context.preview_lines[text_idx], right_width)
            out.append(text_raw)
            if "\033" in text_raw:
                out.append(theme.reset)
        out.append("\r\n")

    current = context.rows[context.selected_idx].node.path if context.rows else ""
    left_status = sanitize_single_line(context.status_message or f"{current} [{context.focus.value}]")
    out.append(theme.reverse)
    out.append(build_status_line(left_status, width))
    out.append(theme.reset)
    return "".join(out)


__all__ = [
    "KEY_HINT",
    "RenderContext",
    "clamp_left_width",
    "content_rows",
    "selected_with_ansi",
    "build_status_line",
    "render_frame",
]
