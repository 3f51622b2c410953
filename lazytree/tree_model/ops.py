"""Lazy materialization and expansion operations on ``TreeNode``."""

from __future__ import annotations

import logging

from ..errors import FilesystemError, InvariantViolation
from .fs import list_directory_children
from .types import TreeNode

logger = logging.getLogger(__name__)


def materialize_children(
    node: TreeNode,
    *,
    show_hidden: bool = True,
    sort_entries: bool = False,
) -> FilesystemError | None:
    """Load ``node``'s children from disk once.

    Returns ``None`` on success, including when the node is already
    materialized (existing children are kept as-is). On a listing failure the
    node is left untouched and unmaterialized and the error is returned.
    """
    if not node.is_dir:
        raise InvariantViolation(f"cannot materialize file node {node.path}")
    if node.materialized:
        return None

    children, scan_error = list_directory_children(
        node.path,
        show_hidden=show_hidden,
        sort_entries=sort_entries,
    )
    if scan_error is not None:
        return FilesystemError(node.path, "list", scan_error)

    node.children = [TreeNode.for_child(child) for child in children]
    node.materialized = True
    logger.debug("materialized %s (%d entries)", node.path, len(node.children))
    return None


def refresh_children(
    node: TreeNode,
    *,
    show_hidden: bool = True,
    sort_entries: bool = False,
) -> FilesystemError | None:
    """Re-list a materialized directory, keeping surviving subtrees.

    Child directories that still exist keep their materialized children and
    expansion state. On failure the node keeps its previous children.
    """
    if not node.is_dir:
        raise InvariantViolation(f"cannot refresh file node {node.path}")
    if not node.materialized:
        return materialize_children(node, show_hidden=show_hidden, sort_entries=sort_entries)

    children, scan_error = list_directory_children(
        node.path,
        show_hidden=show_hidden,
        sort_entries=sort_entries,
    )
    if scan_error is not None:
        return FilesystemError(node.path, "list", scan_error)

    previous = {(child.path, child.kind): child for child in node.children}
    refreshed: list[TreeNode] = []
    for child in children:
        fresh = TreeNode.for_child(child)
        refreshed.append(previous.get((fresh.path, fresh.kind), fresh))
    node.children = refreshed
    logger.debug("refreshed %s (%d entries)", node.path, len(node.children))
    return None


def toggle_expansion(node: TreeNode) -> None:
    """Flip ``expanded`` on a materialized directory."""
    if not node.materialized:
        raise InvariantViolation(f"toggle_expansion before materialize_children: {node.path}")
    node.expanded = not node.expanded


def is_leaf(node: TreeNode) -> bool:
    """Files are leaves; so are materialized directories with no entries."""
    if not node.is_dir:
        return True
    return node.materialized and not node.children


__all__ = [
    "materialize_children",
    "refresh_children",
    "toggle_expansion",
    "is_leaf",
]
