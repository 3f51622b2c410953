"""UI palette for tree rows, pane chrome and error text.

Syntax highlighting colors come from the Pygments style instead; this palette
only styles the browser itself.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    tree_marker: str
    tree_root: str
    tree_dir: str
    tree_file_python: str
    tree_file_default: str
    preview_title: str
    error: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    tree_marker="\033[38;5;44m",
    tree_root="\033[1;31m",
    tree_dir="\033[1;32m",
    tree_file_python="\033[38;5;110m",
    tree_file_default="\033[38;5;252m",
    preview_title="\033[1;38;5;81m",
    error="\033[31m",
)


def error_text(message: str, theme: UITheme | None = None) -> str:
    """Wrap ``message`` in the error color, closed on every line."""
    active_theme = theme or DEFAULT_THEME
    return "\n".join(
        f"{active_theme.error}{line}{active_theme.reset}" if line else line
        for line in message.split("\n")
    )


__all__ = ["UITheme", "DEFAULT_THEME", "error_text"]
