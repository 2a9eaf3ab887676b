"""A small ordered n-ary tree used to hold property-list values."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from typing import Any, TextIO


class TreeNode:
    """A node carrying arbitrary data and an ordered list of children."""

    def __init__(self, data: Any = None, parent: TreeNode | None = None) -> None:
        self.data = data
        self.depth = 0
        self.is_root = True
        self.is_leaf = True
        self.parent: TreeNode | None = None
        self._children: list[TreeNode] = []
        if parent is not None:
            parent.attach(self)

    def _adopt(self, child: TreeNode) -> None:
        if not isinstance(child, TreeNode):
            raise TypeError(f"expected a TreeNode, got {type(child).__name__}")
        child.is_leaf = not child._children
        child.is_root = False
        child.parent = self
        child._set_depth(self.depth + 1)
        self.is_leaf = False

    def _set_depth(self, depth: int) -> None:
        self.depth = depth
        for child in self._children:
            child._set_depth(depth + 1)

    def attach(self, child: TreeNode) -> None:
        """Append ``child`` as the last child of this node."""
        self._adopt(child)
        self._children.append(child)

    def insert(self, index: int, child: TreeNode) -> None:
        """Insert ``child`` at ``index``; an index past the end appends."""
        if index < 0:
            raise IndexError("child index must not be negative")
        self._adopt(child)
        if index >= len(self._children):
            self._children.append(child)
        else:
            self._children.insert(index, child)

    def detach(self, child: TreeNode) -> int:
        """Remove ``child`` from this node and return the position it had.

        The child keeps its parent reference and root flag, as a detached
        node is normally either discarded or re-attached elsewhere.
        """
        position = self.child_position(child)
        del self._children[position]
        return position

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(list(self._children))

    def first_child(self) -> TreeNode | None:
        """Return the first child, or None when there are no children."""
        return self._children[0] if self._children else None

    def nth_child(self, n: int) -> TreeNode | None:
        """Return the child at position ``n``, or None if there is none."""
        if 0 <= n < len(self._children):
            return self._children[n]
        return None

    def child_position(self, child: TreeNode) -> int:
        """Return the position of ``child``; raise ValueError if absent."""
        for position, candidate in enumerate(self._children):
            if candidate is child:
                return position
        raise ValueError("node is not a child of this node")

    @property
    def next_sibling(self) -> TreeNode | None:
        """The node following this one under the same parent, if any."""
        return self._sibling(1)

    @property
    def prev_sibling(self) -> TreeNode | None:
        """The node preceding this one under the same parent, if any."""
        return self._sibling(-1)

    def _sibling(self, offset: int) -> TreeNode | None:
        if self.parent is None:
            return None
        try:
            position = self.parent.child_position(self)
        except ValueError:
            return None
        return self.parent.nth_child(position + offset) if position + offset >= 0 else None

    def copy_deep(self, copy_func: Callable[[Any], Any] | None = None) -> TreeNode:
        """Return a detached copy of this subtree.

        Each node's data is passed through ``copy_func``; without one the
        copies carry no data.
        """
        data = copy_func(self.data) if copy_func is not None else None
        copy = TreeNode(data)
        for child in self._children:
            copy.attach(child.copy_deep(copy_func))
        return copy

    def debug_lines(self) -> Iterator[str]:
        """Yield an indented outline of the subtree, one line per node."""
        indent = "\t" * self.depth
        if self.is_root:
            yield f"{indent}ROOT"
        if self.is_leaf and not self.is_root:
            yield f"{indent}LEAF"
            return
        if not self.is_root:
            yield f"{indent}NODE"
        for child in self._children:
            yield from child.debug_lines()

    def debug(self, file: TextIO | None = None) -> None:
        """Print the outline produced by :meth:`debug_lines`."""
        out = file if file is not None else sys.stdout
        for line in self.debug_lines():
            print(line, file=out)

    def __repr__(self) -> str:
        return f"TreeNode(data={self.data!r}, children={len(self._children)})"