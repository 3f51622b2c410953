"""File content decoding, tokenization, and color markup emission.

Maps a path hint to a language, tokenizes with Pygments and wraps each
colored fragment in its own foreground open/reset pair. Any tokenizer or
style failure falls back to the literal text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.styles import get_style_by_name
from pygments.token import _TokenType
from pygments.util import ClassNotFound

from .ansi import sanitize_terminal_text
from .errors import RenderError

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
COLOR_RESET = "\033[39m"

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".go": "go",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".md": "markdown",
    ".sh": "bash",
    ".toml": "toml",
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
    ".rs": "rust",
    ".c": "c",
    ".h": "c",
    ".java": "java",
    ".rb": "ruby",
    ".html": "html",
    ".css": "css",
    ".txt": "text",
}

_ANSI_FOREGROUND: dict[str, int] = {
    "ansiblack": 30,
    "ansired": 31,
    "ansigreen": 32,
    "ansiyellow": 33,
    "ansiblue": 34,
    "ansimagenta": 35,
    "ansicyan": 36,
    "ansigray": 37,
    "ansibrightblack": 90,
    "ansibrightred": 91,
    "ansibrightgreen": 92,
    "ansibrightyellow": 93,
    "ansibrightblue": 94,
    "ansibrightmagenta": 95,
    "ansibrightcyan": 96,
    "ansiwhite": 97,
}

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")

_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
_COLOR_CACHE: dict[tuple[str, _TokenType], str | None] = {}


def decode_text(content: bytes) -> str:
    """Decode file bytes as UTF-8, falling back to Latin-1."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def detect_language(path_hint: str | Path) -> str:
    """Return the language tag for ``path_hint``'s extension, or ``""``."""
    suffix = Path(path_hint).suffix.lower()
    return LANGUAGE_BY_EXTENSION.get(suffix, "")


def build_lexer(text: str, language: str) -> Lexer:
    """Return a lexer for ``language``, guessing from ``text`` when unknown."""
    # Keep the token stream byte-for-byte equal to the input text.
    options = {"stripnl": False, "ensurenl": False}
    lexer: Lexer | None = None
    if language:
        try:
            lexer = get_lexer_by_name(language, **options)
        except ClassNotFound:
            logger.debug("no lexer named %r, guessing from content", language)
    if lexer is None:
        try:
            lexer = guess_lexer(text, **options)
        except ClassNotFound:
            lexer = TextLexer(**options)
    lexer.add_filter("tokenmerge")
    return lexer


def tokenize(text: str, language: str) -> Iterator[tuple[str, _TokenType]]:
    """Yield ``(fragment, token_type)`` pairs for ``text``."""
    lexer = build_lexer(text, language)
    for token_type, fragment in lexer.get_tokens(text):
        yield fragment, token_type


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, otherwise the default style."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE

    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        logger.warning("unknown style %r, using %s", style, DEFAULT_STYLE)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def color_for(token_type: _TokenType, style_name: str = DEFAULT_STYLE) -> str | None:
    """Return the foreground color the style defines for ``token_type``.

    Colors are six-digit hex strings or Pygments ``ansi*`` names; ``None``
    means the category (and its parents) define no color.
    """
    key = (style_name, token_type)
    if key in _COLOR_CACHE:
        return _COLOR_CACHE[key]
    style = get_style_by_name(style_name)
    color = style.style_for_token(token_type).get("color") or None
    _COLOR_CACHE[key] = color
    return color


def color_open_sequence(color: str) -> str | None:
    """Return the SGR sequence selecting ``color`` as foreground."""
    ansi_code = _ANSI_FOREGROUND.get(color)
    if ansi_code is not None:
        return f"\033[{ansi_code}m"
    match = _HEX_COLOR_RE.match(color)
    if match is None:
        return None
    value = match.group(1)
    red, green, blue = (int(value[idx : idx + 2], 16) for idx in (0, 2, 4))
    return f"\033[38;2;{red};{green};{blue}m"


def colorize_fragment(fragment: str, color: str | None) -> str:
    """Wrap ``fragment`` in a color scope that never crosses a newline."""
    fragment = sanitize_terminal_text(fragment)
    opener = color_open_sequence(color) if color else None
    if opener is None:
        return fragment
    return "\n".join(
        f"{opener}{piece}{COLOR_RESET}" if piece else piece
        for piece in fragment.split("\n")
    )


def highlight_text(text: str, language: str, style: str = DEFAULT_STYLE) -> str:
    """Tokenize ``text`` and emit color markup; raises ``RenderError``."""
    style = normalize_style(style)
    out: list[str] = []
    try:
        for fragment, token_type in tokenize(text, language):
            out.append(colorize_fragment(fragment, color_for(token_type, style)))
    except Exception as exc:
        raise RenderError(f"tokenization failed for language {language!r}: {exc}") from exc
    return "".join(out)


def render(
    content: bytes,
    path_hint: str | Path,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> str:
    """Render file bytes as ANSI-annotated text; never raises.

    The result is empty exactly when ``content`` is empty. On tokenizer or
    style failure the decoded text is returned without markup.
    """
    if not content:
        return ""
    text = decode_text(content)
    if no_color:
        return sanitize_terminal_text(text)

    language = detect_language(path_hint)
    try:
        rendered = highlight_text(text, language, style)
    except RenderError as exc:
        logger.debug("render fallback for %s: %s", path_hint, exc)
        return sanitize_terminal_text(text)
    # The lexer drops a lone byte-order mark.
    if not rendered:
        return sanitize_terminal_text(text)
    return rendered


__all__ = [
    "DEFAULT_STYLE",
    "LANGUAGE_BY_EXTENSION",
    "decode_text",
    "detect_language",
    "build_lexer",
    "tokenize",
    "normalize_style",
    "color_for",
    "color_open_sequence",
    "colorize_fragment",
    "highlight_text",
    "render",
]
