"""Tests for lazy materialization, expansion and row flattening."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazytree.errors import FilesystemError, InvariantViolation
from lazytree.tree_model import (
    NodeKind,
    TreeNode,
    find_row_index,
    format_tree_row,
    is_leaf,
    list_directory_children,
    materialize_children,
    parent_row_index,
    refresh_children,
    toggle_expansion,
    visible_rows,
)
from lazytree.ansi import strip_ansi


def _make_demo(root: Path) -> None:
    (root / "a.txt").write_text("hello", encoding="utf-8")
    (root / "b").mkdir()
    (root / "b" / "c.go").write_text("package main\n", encoding="utf-8")


class MaterializeChildrenTests(unittest.TestCase):
    def test_materialize_creates_one_child_per_entry_in_listing_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_demo(root)
            node = TreeNode.root(root)

            error = materialize_children(node)

            self.assertIsNone(error)
            self.assertTrue(node.materialized)
            self.assertFalse(node.expanded)
            expected_order = [entry.name for entry in os.scandir(root)]
            self.assertEqual([child.label for child in node.children], expected_order)
            kinds = {child.label: child.kind for child in node.children}
            self.assertEqual(kinds, {"a.txt": NodeKind.FILE, "b": NodeKind.DIRECTORY})
            self.assertEqual(
                {child.path for child in node.children},
                {root / "a.txt", root / "b"},
            )

    def test_materialize_twice_keeps_the_same_children(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_demo(root)
            node = TreeNode.root(root)

            materialize_children(node)
            first = list(node.children)
            (root / "late.txt").write_text("x", encoding="utf-8")
            error = materialize_children(node)

            self.assertIsNone(error)
            self.assertEqual(len(node.children), len(first))
            for before, after in zip(first, node.children):
                self.assertIs(before, after)

    def test_listing_failure_leaves_node_untouched(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            node = TreeNode.root(Path(tmp))
            denied = PermissionError(13, "Permission denied", tmp)
            with mock.patch("lazytree.tree_model.fs.os.scandir", side_effect=denied):
                error = materialize_children(node)

            self.assertIsInstance(error, FilesystemError)
            assert error is not None
            self.assertIsInstance(error.cause, PermissionError)
            self.assertIn("Permission denied", str(error))
            self.assertFalse(node.materialized)
            self.assertEqual(node.children, [])

    def test_vanished_directory_reports_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            gone = Path(tmp) / "gone"
            gone.mkdir()
            node = TreeNode.root(gone)
            gone.rmdir()

            error = materialize_children(node)

            self.assertIsInstance(error, FilesystemError)
            self.assertFalse(node.materialized)

    def test_materialize_file_node_is_invariant_violation(self) -> None:
        node = TreeNode(label="a.txt", path=Path("/nowhere/a.txt"), kind=NodeKind.FILE)
        with self.assertRaises(InvariantViolation):
            materialize_children(node)

    def test_symlinked_directory_is_not_followed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "real").mkdir()
            os.symlink(root / "real", root / "link")
            node = TreeNode.root(root)

            materialize_children(node)

            kinds = {child.label: child.kind for child in node.children}
            self.assertEqual(kinds["real"], NodeKind.DIRECTORY)
            self.assertEqual(kinds["link"], NodeKind.FILE)


class ListingOptionsTests(unittest.TestCase):
    def test_sort_entries_lists_directories_first(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "Zeta.txt").write_text("", encoding="utf-8")
            (root / "alpha.txt").write_text("", encoding="utf-8")
            (root / "mid").mkdir()

            children, error = list_directory_children(root, sort_entries=True)

            self.assertIsNone(error)
            self.assertEqual([child.name for child in children], ["mid", "alpha.txt", "Zeta.txt"])

    def test_hidden_entries_are_skipped_only_on_request(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".secret").write_text("", encoding="utf-8")
            (root / "plain").write_text("", encoding="utf-8")

            shown, _ = list_directory_children(root)
            hidden, _ = list_directory_children(root, show_hidden=False)

            self.assertEqual({child.name for child in shown}, {".secret", "plain"})
            self.assertEqual([child.name for child in hidden], ["plain"])


class ToggleAndLeafTests(unittest.TestCase):
    def test_toggle_before_materialize_is_invariant_violation(self) -> None:
        node = TreeNode(label="d", path=Path("/nowhere/d"), kind=NodeKind.DIRECTORY)
        with self.assertRaises(InvariantViolation):
            toggle_expansion(node)
        self.assertFalse(node.expanded)

    def test_toggle_is_its_own_inverse(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            node = TreeNode.root(Path(tmp))
            materialize_children(node)
            original = node.expanded

            toggle_expansion(node)
            self.assertEqual(node.expanded, not original)
            toggle_expansion(node)
            self.assertEqual(node.expanded, original)

    def test_is_leaf(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "empty").mkdir()
            (root / "f.txt").write_text("x", encoding="utf-8")
            node = TreeNode.root(root)
            self.assertFalse(is_leaf(node))

            materialize_children(node)
            by_label = {child.label: child for child in node.children}
            self.assertTrue(is_leaf(by_label["f.txt"]))
            self.assertFalse(is_leaf(by_label["empty"]))
            materialize_children(by_label["empty"])
            self.assertTrue(is_leaf(by_label["empty"]))
            self.assertFalse(is_leaf(node))


class RefreshChildrenTests(unittest.TestCase):
    def test_refresh_picks_up_new_entries_and_keeps_open_subtrees(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_demo(root)
            node = TreeNode.root(root)
            materialize_children(node)
            sub = next(child for child in node.children if child.label == "b")
            materialize_children(sub)
            sub.expanded = True

            (root / "new.md").write_text("# new", encoding="utf-8")
            (root / "a.txt").unlink()
            error = refresh_children(node)

            self.assertIsNone(error)
            self.assertEqual({child.label for child in node.children}, {"b", "new.md"})
            kept = next(child for child in node.children if child.label == "b")
            self.assertIs(kept, sub)
            self.assertTrue(kept.expanded)

    def test_refresh_failure_keeps_previous_children(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_demo(root)
            node = TreeNode.root(root)
            materialize_children(node)
            before = list(node.children)

            with mock.patch("lazytree.tree_model.fs.os.scandir", side_effect=OSError(5, "I/O error")):
                error = refresh_children(node)

            self.assertIsInstance(error, FilesystemError)
            self.assertEqual(node.children, before)


class VisibleRowsTests(unittest.TestCase):
    def test_rows_include_only_expanded_descendants(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_demo(root)
            node = TreeNode.root(root)
            materialize_children(node)

            self.assertEqual(len(visible_rows(node)), 1)

            node.expanded = True
            rows = visible_rows(node)
            self.assertEqual(len(rows), 3)
            self.assertEqual([row.depth for row in rows], [0, 1, 1])

            sub = next(child for child in node.children if child.label == "b")
            materialize_children(sub)
            sub.expanded = True
            rows = visible_rows(node)
            go_idx = find_row_index(rows, root / "b" / "c.go")
            self.assertIsNotNone(go_idx)
            assert go_idx is not None
            self.assertEqual(rows[go_idx].depth, 2)
            self.assertEqual(rows[parent_row_index(rows, go_idx)].node, sub)
            self.assertIsNone(parent_row_index(rows, 0))

    def test_format_tree_row_marks_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_demo(root)
            node = TreeNode.root(root)
            materialize_children(node)
            node.expanded = True
            rows = visible_rows(node)

            root_text = strip_ansi(format_tree_row(rows[0]))
            self.assertTrue(root_text.startswith("▾ "))
            self.assertTrue(root_text.endswith("/"))

            by_label = {row.node.label: row for row in rows[1:]}
            self.assertEqual(strip_ansi(format_tree_row(by_label["b"])), "  ▸ b/")
            self.assertEqual(strip_ansi(format_tree_row(by_label["a.txt"])), "    a.txt")


if __name__ == "__main__":
    unittest.main()
