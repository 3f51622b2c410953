"""In-memory tree node datatypes mirroring a filesystem subtree."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class NodeKind(enum.Enum):
    """Tagged kind carried directly on each node."""

    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class DirectoryChild:
    """One directory entry as reported by a single listing pass."""

    name: str
    path: Path
    is_dir: bool


@dataclass(eq=False)
class TreeNode:
    """One filesystem entry; children are owned exclusively by this node.

    A directory's ``children`` is non-empty only once ``materialized`` is set,
    and ``expanded`` implies ``materialized``. Nodes compare by identity.
    """

    label: str
    path: Path
    kind: NodeKind
    expanded: bool = False
    materialized: bool = False
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @classmethod
    def root(cls, path: Path) -> "TreeNode":
        """Create the root node; the label shows the path as given."""
        kind = NodeKind.DIRECTORY if path.is_dir() else NodeKind.FILE
        return cls(label=str(path), path=path.absolute(), kind=kind)

    @classmethod
    def for_child(cls, child: DirectoryChild) -> "TreeNode":
        kind = NodeKind.DIRECTORY if child.is_dir else NodeKind.FILE
        return cls(label=child.name, path=child.path, kind=kind)


@dataclass(frozen=True)
class TreeRow:
    """One visible row of the flattened tree."""

    node: TreeNode
    depth: int


__all__ = [
    "NodeKind",
    "DirectoryChild",
    "TreeNode",
    "TreeRow",
]
