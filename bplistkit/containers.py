"""Array and dictionary wrappers around property-list tree nodes."""

from __future__ import annotations

from collections.abc import Iterator
from typing import ClassVar

from bplistkit.bplist_reader import from_bin as _read_bin
from bplistkit.bplist_writer import to_bin as _write_bin
from bplistkit.model import PlistData, PlistType, new_node
from bplistkit.nodes import Boolean, Data, Date, Integer, Key, Node, Real, String, Uid
from bplistkit.tree import TreeNode

_SCALARS: dict[PlistType, type[Node]] = {
    PlistType.BOOLEAN: Boolean,
    PlistType.UINT: Integer,
    PlistType.REAL: Real,
    PlistType.STRING: String,
    PlistType.KEY: Key,
    PlistType.UID: Uid,
    PlistType.DATE: Date,
    PlistType.DATA: Data,
}


class Structure(Node):
    """A property-list value that holds other values."""

    _plist_type: ClassVar[PlistType | None] = None

    def _init_tree(self, tree: TreeNode | None, parent: Node | None) -> None:
        if tree is None:
            tree = new_node(self._plist_type)
        Node.__init__(self, tree, parent)
        if self.tree.data.type is not self._plist_type:
            raise TypeError(
                f"{type(self).__name__} cannot wrap a node of type {self.tree.data.type!r}"
            )

    def __len__(self) -> int:
        if self.tree is None:
            return 0
        if self.type is PlistType.ARRAY:
            return len(self.tree)
        if self.type is PlistType.DICT:
            return len(self.tree) // 2
        return 0

    def to_bin(self) -> bytes:
        """Serialize this structure as a binary property list."""
        return _write_bin(self.tree)

    @staticmethod
    def from_bin(data: bytes) -> Structure:
        """Parse a binary property list whose root is an array or dictionary."""
        tree = _read_bin(data)
        if tree.data.type not in (PlistType.ARRAY, PlistType.DICT):
            raise ValueError(
                f"root object is a {tree.data.type.name.lower()}, not an array or dictionary"
            )
        return from_tree(tree)

    def _claim(self, node: Node) -> Node:
        """Return an independent copy of ``node`` owned by this structure."""
        if not isinstance(node, Node):
            raise TypeError(f"expected a Node, got {type(node).__name__}")
        if node.tree is None:
            raise ValueError("cannot add an empty node")
        copy = node.clone()
        copy.parent = self
        return copy


class Array(Structure):
    """An ordered sequence of property-list values."""

    _plist_type = PlistType.ARRAY

    def __init__(self, tree: TreeNode | None = None, parent: Node | None = None) -> None:
        self._init_tree(tree, parent)
        self._items: list[Node] = [from_tree(child, self) for child in self.tree]

    def __getitem__(self, index: int) -> Node:
        return self._items[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._items))

    def append(self, node: Node) -> None:
        """Append a copy of ``node``."""
        copy = self._claim(node)
        self.tree.attach(copy.tree)
        self._items.append(copy)

    def insert(self, node: Node, pos: int) -> None:
        """Insert a copy of ``node`` at ``pos``; a position past the end appends."""
        if pos < 0:
            raise IndexError("array position must not be negative")
        copy = self._claim(node)
        self.tree.insert(pos, copy.tree)
        self._items.insert(pos, copy)

    def remove(self, item: Node | int) -> None:
        """Remove an element given either as the node itself or by position."""
        if isinstance(item, Node):
            position = self.index(item)
        elif isinstance(item, int) and not isinstance(item, bool):
            position = item
        else:
            raise TypeError(f"expected a Node or an int, got {type(item).__name__}")
        removed = self._items.pop(position)
        self.tree.detach(removed.tree)
        removed.parent = None

    def index(self, node: Node) -> int:
        """Return the position of ``node``; raise ValueError if it is not here."""
        for position, candidate in enumerate(self._items):
            if candidate is node:
                return position
        raise ValueError("node is not an element of this array")

    def clone(self) -> Array:
        """Return an independent deep copy that belongs to no container."""
        return Array(self.tree.copy_deep(PlistData.copy))

    def __repr__(self) -> str:
        return f"Array({self._items!r})"


def _key_text(key_tree: TreeNode) -> str:
    data = key_tree.data
    if not isinstance(data, PlistData) or data.type not in (PlistType.KEY, PlistType.STRING):
        raise TypeError("dictionary key node does not hold a string")
    return data.value


class Dictionary(Structure):
    """A mapping from string keys to property-list values, iterated in key order."""

    _plist_type = PlistType.DICT

    def __init__(self, tree: TreeNode | None = None, parent: Node | None = None) -> None:
        self._init_tree(tree, parent)
        self._map: dict[str, Node] = {}
        children = list(self.tree)
        for key_tree, value_tree in zip(children[0::2], children[1::2]):
            self._map[_key_text(key_tree)] = from_tree(value_tree, self)

    def __getitem__(self, key: str) -> Node:
        return self._map[key]

    def __setitem__(self, key: str, node: Node) -> None:
        if not isinstance(key, str):
            raise TypeError(f"dictionary keys must be str, got {type(key).__name__}")
        copy = self._claim(node)
        old = self._map.get(key)
        if old is None:
            self.tree.attach(new_node(PlistType.KEY, key))
            self.tree.attach(copy.tree)
        else:
            position = self.tree.detach(old.tree)
            self.tree.insert(position, copy.tree)
            old.parent = None
        self._map[key] = copy

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._map))

    def items(self) -> list[tuple[str, Node]]:
        """Return the (key, value) pairs in key order."""
        return [(key, self._map[key]) for key in sorted(self._map)]

    def remove(self, item: Node | str) -> None:
        """Remove an entry given either by key or as the value node itself."""
        if isinstance(item, Node):
            key = self.key_of(item)
        elif isinstance(item, str):
            if item not in self._map:
                raise KeyError(item)
            key = item
        else:
            raise TypeError(f"expected a Node or a str, got {type(item).__name__}")
        node = self._map.pop(key)
        position = self.tree.detach(node.tree)
        if position > 0:
            self.tree.detach(self.tree.nth_child(position - 1))
        node.parent = None

    def key_of(self, node: Node) -> str:
        """Return the key under which ``node`` is stored; raise ValueError if absent."""
        for key, candidate in self._map.items():
            if candidate is node:
                return key
        raise ValueError("node is not a value of this dictionary")

    def clone(self) -> Dictionary:
        """Return an independent deep copy that belongs to no container."""
        return Dictionary(self.tree.copy_deep(PlistData.copy))

    def __repr__(self) -> str:
        return f"Dictionary({dict(self.items())!r})"


def from_tree(tree: TreeNode | None, parent: Node | None = None) -> Node | None:
    """Wrap ``tree`` in the node class matching its value type."""
    if tree is None:
        return None
    if not isinstance(tree, TreeNode):
        raise TypeError(f"expected a TreeNode, got {type(tree).__name__}")
    data = tree.data
    if not isinstance(data, PlistData):
        raise TypeError("tree node carries no property-list payload")
    if data.type is PlistType.ARRAY:
        return Array(tree, parent)
    if data.type is PlistType.DICT:
        return Dictionary(tree, parent)
    cls = _SCALARS.get(data.type)
    if cls is None:
        raise ValueError(f"cannot wrap a node of type {data.type!r}")
    return cls._adopt(tree, parent)