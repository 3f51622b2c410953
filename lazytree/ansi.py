"""Column arithmetic for text that carries SGR color sequences.

Both panes are clipped, padded and wrapped here so escapes never count
as columns and wide characters take their real two cells.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
_RESET_SGR = {"\x1b[0m", "\x1b[m", "\x1b[39m"}
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def char_display_width(ch: str, col: int) -> int:
    """Cells occupied by ``ch`` when drawn at column ``col``.

    A tab runs to the next multiple of ``TAB_STOP``, combining marks take no
    cells and wide or fullwidth characters take two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def sanitize_single_line(source: str) -> str:
    """Escape control bytes and line breaks for one-row labels."""
    text = sanitize_terminal_text(source)
    if "\n" not in text and "\r" not in text:
        return text
    return text.replace("\r", "\\x0d").replace("\n", "\\x0a")


def display_width(text: str) -> int:
    """Cells needed to draw ``text`` once its escapes are removed."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` so it fills no more than ``max_cols`` cells.

    Escapes are copied through untouched and tabs become the spaces they
    would have drawn.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and right-pad it with spaces."""
    clipped = clip_ansi_line(text, width)
    used = display_width(clipped)
    if "\x1b" in clipped:
        clipped += "\x1b[0m"
    return clipped + " " * max(0, width - used)


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Break ``text`` into pieces of at most ``width`` cells each.

    A color scope that is open where a chunk breaks is re-opened at the start
    of the next chunk, so every chunk renders with its original colors.
    """
    if width <= 0 or not text:
        return [""]

    wrapped: list[str] = []
    chunk: list[str] = []
    active_sgr = ""
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                if seq.endswith("m"):
                    active_sgr = "" if seq in _RESET_SGR else seq
                chunk.append(seq)
                i = match.end()
                continue

        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > width and chunk:
            wrapped.append("".join(chunk))
            chunk = [active_sgr] if active_sgr else []
            col = 0
            w = char_display_width(ch, col)
        chunk.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    wrapped.append("".join(chunk))
    return wrapped


def build_screen_lines(rendered: str, width: int, wrap: bool = True) -> list[str]:
    """Split rendered output into displayable screen lines without terminators."""
    lines = rendered.split("\n")
    if lines and lines[-1] == "" and len(lines) > 1:
        lines.pop()
    if not wrap:
        return [line.rstrip("\r") for line in lines]
    out: list[str] = []
    for line in lines:
        out.extend(wrap_ansi_line(line.rstrip("\r"), width))
    return out


__all__ = [
    "ANSI_ESCAPE_RE",
    "TAB_STOP",
    "char_display_width",
    "strip_ansi",
    "sanitize_terminal_text",
    "sanitize_single_line",
    "display_width",
    "clip_ansi_line",
    "pad_ansi_line",
    "wrap_ansi_line",
    "build_screen_lines",
]
