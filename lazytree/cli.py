"""Command-line front door for lazytree.

Parses CLI options, merges them over the config file, and resolves the root.
Then dispatches into the interactive browser session.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from .config import LOG_LEVELS, Settings, load_settings
from .errors import FilesystemError
from .highlight import render
from .logs import configure_logging

logger = logging.getLogger(__name__)


def _existing_path(value: str) -> Path:
    """argparse type for paths that must exist."""
    path = Path(value).expanduser()
    if not path.exists():
        raise argparse.ArgumentTypeError(f"Path not found: {path}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazytree",
        description="Browse a directory tree with syntax-highlighted file previews.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory or file. Defaults to current directory.")
    parser.add_argument("--style", default=None, help="Pygments style name for previews.")
    parser.add_argument("--no-color", action="store_true", help="Show previews without color markup.")
    parser.add_argument(
        "--sort",
        action="store_true",
        help="List directories first, then names; default keeps filesystem order.",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Re-list a directory each time it is expanded again.",
    )
    parser.add_argument("--hide-hidden", action="store_true", help="Skip dot-prefixed entries.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, default=None, help="Log file level.")
    parser.add_argument("--render", metavar="FILE", type=_existing_path, help="Print the rendered FILE and exit.")
    return parser


def apply_arguments(settings: Settings, args: argparse.Namespace) -> Settings:
    """Overlay explicit CLI flags on config-file settings."""
    changes: dict[str, object] = {}
    if args.style:
        changes["style"] = args.style
    if args.sort:
        changes["sort_entries"] = True
    if args.refresh:
        changes["refresh_on_revisit"] = True
    if args.hide_hidden:
        changes["show_hidden"] = False
    if args.log_level:
        changes["log_level"] = args.log_level
    return dataclasses.replace(settings, **changes)


def resolve_root(path: Path) -> tuple[Path, Path | None]:
    """Return ``(root_directory, initial_file)`` for a CLI path argument."""
    if path.is_dir():
        return path, None
    return path.absolute().parent, path.absolute()


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch the browser on a directory or file.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used. A file path roots the tree at its parent directory and
    opens the file in the preview.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = apply_arguments(load_settings(), args)
    configure_logging(settings.log_level)

    if args.render is not None:
        if args.path is not None:
            raise SystemExit("Cannot combine positional path with --render.")
        if args.render.is_dir():
            raise SystemExit(f"Not a file: {args.render}")
        try:
            content = args.render.read_bytes()
        except OSError as exc:
            raise SystemExit(str(FilesystemError(args.render, "read", exc))) from exc
        sys.stdout.write(render(content, args.render, settings.style, args.no_color))
        return

    path = Path(args.path) if args.path is not None else (default_path or Path.cwd())
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("lazytree needs an interactive terminal (use --render FILE to print one file).")

    from .app import BrowserSession
    from .terminal import TerminalController

    root, initial_file = resolve_root(path)
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    logger.info("starting at %s (pid %s)", root, os.getpid())
    session = BrowserSession(
        root,
        settings,
        terminal,
        no_color=args.no_color,
        initial_file=initial_file,
    )
    session.run(stdin_fd)


if __name__ == "__main__":
    main()
