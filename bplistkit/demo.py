"""A small demonstration that builds a tree and prints its outline."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from bplistkit.tree import TreeNode


def _build(announce: Callable[[str], None]) -> TreeNode:
    announce("Creating root node")
    root = TreeNode()
    announce("Creating child 1 node")
    one = TreeNode(None, root)
    announce("Creating child 2 node")
    TreeNode(None, root)
    announce("Creating child 3 node")
    TreeNode(None, one)
    return root


def build_sample_tree() -> TreeNode:
    """Return a root with two children, the first of which has one child."""
    return _build(lambda message: None)


def main(argv: Sequence[str] | None = None) -> int:
    """Build the sample tree, print its outline and return 0."""
    root = _build(print)
    print("Debugging root node")
    root.debug()
    print("Destroying root node")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())