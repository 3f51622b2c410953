"""Tests for ANSI line shaping and full-frame painting."""

from __future__ import annotations

import unittest
from pathlib import Path

from lazytree.ansi import (
    build_screen_lines,
    clip_ansi_line,
    display_width,
    pad_ansi_line,
    sanitize_single_line,
    strip_ansi,
    wrap_ansi_line,
)
from lazytree.focus import FocusState
from lazytree.screen import (
    KEY_HINT,
    RenderContext,
    build_status_line,
    clamp_left_width,
    content_rows,
    render_frame,
)
from lazytree.tree_model import NodeKind, TreeNode, TreeRow, format_tree_row, visible_rows


class AnsiHelperTests(unittest.TestCase):
    def test_display_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\x1b[31mab\x1b[39m"), 2)
        self.assertEqual(display_width("日本"), 4)
        self.assertEqual(display_width("a\tb"), 9)

    def test_clip_keeps_escapes_and_expands_tabs(self) -> None:
        self.assertEqual(clip_ansi_line("\x1b[31mabcdef", 3), "\x1b[31mabc")
        self.assertEqual(clip_ansi_line("\tb", 10), " " * 8 + "b")
        self.assertEqual(clip_ansi_line("a\tb", 4), "a")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_pad_resets_styled_text(self) -> None:
        self.assertEqual(pad_ansi_line("ab", 4), "ab  ")
        self.assertEqual(pad_ansi_line("\x1b[31mab", 4), "\x1b[31mab\x1b[0m  ")

    def test_wrap_reopens_active_color_on_continuation(self) -> None:
        wrapped = wrap_ansi_line("\x1b[31mabcdef\x1b[39m", 3)

        self.assertEqual(wrapped, ["\x1b[31mabc", "\x1b[31mdef\x1b[39m"])

    def test_wrap_after_reset_does_not_reopen(self) -> None:
        wrapped = wrap_ansi_line("\x1b[31mab\x1b[39mcdef", 3)

        self.assertEqual(wrapped[1], "def")

    def test_build_screen_lines_drops_trailing_terminator(self) -> None:
        self.assertEqual(build_screen_lines("a\nb\n", 10), ["a", "b"])
        self.assertEqual(build_screen_lines("a\r\nb", 10, wrap=False), ["a", "b"])
        self.assertEqual(build_screen_lines("", 10), [""])

    def test_single_line_sanitizing_escapes_controls_and_breaks(self) -> None:
        self.assertEqual(sanitize_single_line("plain name.txt"), "plain name.txt")
        self.assertEqual(sanitize_single_line("a\x1b[2Jb"), "a\\x1b[2Jb")
        self.assertEqual(sanitize_single_line("a\nb\rc"), "a\\x0ab\\x0dc")

    def test_tree_row_label_cannot_emit_escapes(self) -> None:
        node = TreeNode(label="evil\x1b[2J.txt", path=Path("/tmp/evil"), kind=NodeKind.FILE)

        text = format_tree_row(TreeRow(node=node, depth=1))

        self.assertNotIn("\x1b[2J", text)
        self.assertEqual(strip_ansi(text), "    evil\\x1b[2J.txt")


class LayoutTests(unittest.TestCase):
    def test_clamp_left_width(self) -> None:
        self.assertEqual(clamp_left_width(100, 40), 40)
        self.assertEqual(clamp_left_width(100, 5), 12)
        self.assertEqual(clamp_left_width(40, 40), 19)

    def test_content_rows_never_drops_below_one(self) -> None:
        self.assertEqual(content_rows(24), 22)
        self.assertEqual(content_rows(1), 1)

    def test_status_line_fills_width_and_keeps_hint(self) -> None:
        line = build_status_line("left", 60)

        self.assertEqual(len(line), 59)
        self.assertTrue(line.startswith("left"))
        self.assertTrue(line.endswith(KEY_HINT))

    def test_status_line_on_narrow_terminal_shows_hint_tail(self) -> None:
        self.assertEqual(build_status_line("left", 10), KEY_HINT[-9:])


class RenderFrameTests(unittest.TestCase):
    def _context(self, **overrides) -> RenderContext:
        root = TreeNode(label="demo", path=Path("/tmp/demo"), kind=NodeKind.DIRECTORY, expanded=True, materialized=True)
        root.children = [
            TreeNode(label="b", path=Path("/tmp/demo/b"), kind=NodeKind.DIRECTORY),
            TreeNode(label="a.txt", path=Path("/tmp/demo/a.txt"), kind=NodeKind.FILE),
        ]
        values = dict(
            rows=visible_rows(root),
            selected_idx=2,
            tree_start=0,
            preview_lines=["\x1b[38;2;1;2;3mhello\x1b[39m"],
            preview_start=0,
            preview_title="Preview: a.txt",
            focus=FocusState.TREE_FOCUSED,
            width=80,
            height=6,
            left_width=30,
        )
        values.update(overrides)
        return RenderContext(**values)

    def test_frame_has_title_panes_and_status(self) -> None:
        frame = render_frame(self._context())
        lines = [strip_ansi(line) for line in frame.split("\r\n")]

        self.assertEqual(len(lines), 6)
        self.assertIn("Files", lines[0])
        self.assertIn("Preview: a.txt", lines[0])
        self.assertIn("▾ demo/", lines[1])
        self.assertIn("hello", lines[1])
        self.assertIn("▸ b/", lines[2])
        self.assertIn("a.txt", lines[3])
        self.assertIn("/tmp/demo/a.txt [tree]", lines[-1])

    def test_tree_pane_is_padded_to_left_width(self) -> None:
        frame = render_frame(self._context())
        body = strip_ansi(frame.split("\r\n")[2])

        self.assertEqual(body.index("│"), 30)

    def test_status_message_replaces_path(self) -> None:
        frame = render_frame(self._context(status_message="Editor exited with status 1."))

        self.assertIn("Editor exited with status 1.", strip_ansi(frame))
        self.assertNotIn("[tree]", strip_ansi(frame))

    def test_status_message_is_kept_on_one_row(self) -> None:
        frame = render_frame(self._context(status_message="bad\nname\x07"))

        self.assertEqual(len(frame.split("\r\n")), 6)
        self.assertIn("bad\\x0aname\\x07", strip_ansi(frame))

    def test_preview_focus_is_shown_in_status(self) -> None:
        frame = render_frame(self._context(focus=FocusState.PREVIEW_FOCUSED))

        self.assertIn("[preview]", strip_ansi(frame))


if __name__ == "__main__":
    unittest.main()
