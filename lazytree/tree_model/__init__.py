"""Lazily-populated in-memory tree mirroring a filesystem subtree.

This package contains non-UI tree primitives:
- node datatypes with a tagged directory/file kind
- single-pass directory listing
- materialize / toggle / refresh operations
- flattening of expanded nodes into display rows
"""

from __future__ import annotations

from .types import DirectoryChild, NodeKind, TreeNode, TreeRow
from .fs import directory_sort_key, list_directory_children
from .ops import is_leaf, materialize_children, refresh_children, toggle_expansion
from .rows import file_color_for, find_row_index, format_tree_row, parent_row_index, visible_rows

__all__ = [
    "NodeKind",
    "DirectoryChild",
    "TreeNode",
    "TreeRow",
    "directory_sort_key",
    "list_directory_children",
    "materialize_children",
    "refresh_children",
    "toggle_expansion",
    "is_leaf",
    "visible_rows",
    "find_row_index",
    "parent_row_index",
    "file_color_for",
    "format_tree_row",
]
