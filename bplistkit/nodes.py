"""Object wrappers around property-list tree nodes holding scalar values."""

from __future__ import annotations

import calendar
import datetime as _dt
from typing import Any, ClassVar

from bplistkit.model import PlistData, PlistType, new_node
from bplistkit.tree import TreeNode

_EPOCH = _dt.datetime(1970, 1, 1)


class Node:
    """A property-list value backed by a tree node.

    ``tree`` is the :class:`TreeNode` holding the value's payload, or None
    for an empty node; ``parent`` is the container object this node
    belongs to, if any.
    """

    _plist_type: ClassVar[PlistType | None] = None

    def __init__(self, tree: TreeNode | None = None, parent: Node | None = None) -> None:
        if tree is not None:
            if not isinstance(tree, TreeNode):
                raise TypeError(f"expected a TreeNode, got {type(tree).__name__}")
            if not isinstance(tree.data, PlistData):
                raise TypeError("tree node carries no property-list payload")
        self.tree = tree
        self.parent = parent

    @property
    def type(self) -> PlistType:
        """The kind of value held, or NONE for an empty node."""
        if self.tree is None:
            return PlistType.NONE
        return self.tree.data.type

    @classmethod
    def _adopt(cls, tree: TreeNode, parent: Node | None = None) -> Node:
        """Wrap an existing tree node without creating a new payload."""
        expected = cls._plist_type
        if expected is not None and tree is not None:
            actual = tree.data.type if isinstance(tree.data, PlistData) else None
            if actual is not expected:
                raise TypeError(f"{cls.__name__} cannot wrap a node of type {actual!r}")
        node = cls.__new__(cls)
        Node.__init__(node, tree, parent)
        return node

    def clone(self) -> Node:
        """Return an independent copy that belongs to no container."""
        if self.tree is None:
            return type(self)._adopt(None)
        return type(self)._adopt(self.tree.copy_deep(PlistData.copy))

    def __repr__(self) -> str:
        if self.tree is None:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}({self.tree.data.value!r})"


class _Scalar(Node):
    """A node whose payload is a single value."""

    @property
    def value(self) -> Any:
        return self.tree.data.value

    @value.setter
    def value(self, new_value: Any) -> None:
        self.tree.data = new_node(self._plist_type, new_value).data


class Boolean(_Scalar):
    """A true or false value."""

    _plist_type = PlistType.BOOLEAN

    def __init__(self, value: bool = False, parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.BOOLEAN, value), parent)


class Integer(_Scalar):
    """An unsigned 64-bit integer."""

    _plist_type = PlistType.UINT

    def __init__(self, value: int = 0, parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.UINT, value), parent)


class Real(_Scalar):
    """A floating-point number."""

    _plist_type = PlistType.REAL

    def __init__(self, value: float = 0.0, parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.REAL, value), parent)


class String(_Scalar):
    """A text value."""

    _plist_type = PlistType.STRING

    def __init__(self, value: str = "", parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.STRING, value), parent)


class Key(_Scalar):
    """A dictionary key."""

    _plist_type = PlistType.KEY

    def __init__(self, value: str = "", parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.KEY, value), parent)


class Uid(_Scalar):
    """An unsigned 64-bit object reference identifier."""

    _plist_type = PlistType.UID

    def __init__(self, value: int = 0, parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.UID, value), parent)


class Data(_Scalar):
    """A block of raw bytes."""

    _plist_type = PlistType.DATA

    def __init__(self, value: bytes = b"", parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.DATA, value), parent)


class Date(_Scalar):
    """A point in time held as whole seconds and microseconds."""

    _plist_type = PlistType.DATE

    def __init__(self, seconds: int = 0, microseconds: int = 0, parent: Node | None = None) -> None:
        super().__init__(new_node(PlistType.DATE, (seconds, microseconds)), parent)

    @property
    def seconds(self) -> int:
        return self.value[0]

    @property
    def microseconds(self) -> int:
        return self.value[1]

    def to_datetime(self) -> _dt.datetime:
        """Return the stored time as a naive UTC datetime."""
        seconds, microseconds = self.value
        return _EPOCH + _dt.timedelta(seconds=seconds, microseconds=microseconds)

    @classmethod
    def from_datetime(cls, moment: _dt.datetime, parent: Node | None = None) -> Date:
        """Create a date from ``moment``; naive datetimes are taken as UTC."""
        if not isinstance(moment, _dt.datetime):
            raise TypeError(f"expected a datetime, got {type(moment).__name__}")
        if moment.tzinfo is not None:
            fields = moment.utctimetuple()
        else:
            fields = moment.timetuple()
        return cls(calendar.timegm(fields), moment.microsecond, parent)