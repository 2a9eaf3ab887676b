"""Value types and per-node payloads for property-list trees."""

from __future__ import annotations

import copy as _copy
import enum
from dataclasses import dataclass
from typing import Any

from bplistkit.tree import TreeNode

_UINT64_LIMIT = 1 << 64


class PlistType(enum.Enum):
    """The kind of value a property-list node holds."""

    BOOLEAN = enum.auto()
    UINT = enum.auto()
    REAL = enum.auto()
    STRING = enum.auto()
    ARRAY = enum.auto()
    DICT = enum.auto()
    DATE = enum.auto()
    DATA = enum.auto()
    KEY = enum.auto()
    UID = enum.auto()
    NONE = enum.auto()


@dataclass
class PlistData:
    """The payload stored in a tree node.

    ``value`` holds a bool, int, float, str, bytes or a ``(seconds,
    microseconds)`` tuple depending on ``type``; containers keep their
    entries as child nodes and carry no value. ``length`` records the
    encoded size of the value: 8 or 16 bytes for integers, the UTF-8 byte
    count for strings, the byte count for data.
    """

    type: PlistType
    value: Any = None
    length: int = 0

    def copy(self) -> PlistData:
        """Return an independent copy of this payload."""
        return PlistData(self.type, _copy.copy(self.value), self.length)


def _check_unsigned(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} value must be an int, got {type(value).__name__}")
    if not 0 <= value < _UINT64_LIMIT:
        raise ValueError(f"{what} value {value} does not fit in 64 unsigned bits")
    return value


def _check_date(value: Any) -> tuple[int, int]:
    try:
        seconds, microseconds = value
    except (TypeError, ValueError):
        raise TypeError("date value must be a (seconds, microseconds) pair") from None
    for part in (seconds, microseconds):
        if isinstance(part, bool) or not isinstance(part, int):
            raise TypeError("date seconds and microseconds must be ints")
    return seconds, microseconds


def new_node(plist_type: PlistType, value: Any = None) -> TreeNode:
    """Create a detached tree node holding a value of ``plist_type``.

    Without a value each type gets its empty default: False, 0, 0.0, an
    empty string, empty data or the epoch date.
    """
    if plist_type is PlistType.BOOLEAN:
        data = PlistData(plist_type, bool(value) if value is not None else False, 1)
    elif plist_type in (PlistType.UINT, PlistType.UID):
        number = _check_unsigned(0 if value is None else value, plist_type.name.lower())
        data = PlistData(plist_type, number, 8)
    elif plist_type is PlistType.REAL:
        if isinstance(value, bool) or not isinstance(value, (int, float, type(None))):
            raise TypeError(f"real value must be a number, got {type(value).__name__}")
        data = PlistData(plist_type, float(value or 0.0), 8)
    elif plist_type in (PlistType.STRING, PlistType.KEY):
        text = "" if value is None else value
        if not isinstance(text, str):
            raise TypeError(f"string value must be a str, got {type(text).__name__}")
        data = PlistData(plist_type, text, len(text.encode("utf-8")))
    elif plist_type is PlistType.DATA:
        if isinstance(value, str):
            raise TypeError("data value must be bytes-like, not str")
        raw = b"" if value is None else bytes(value)
        data = PlistData(plist_type, raw, len(raw))
    elif plist_type is PlistType.DATE:
        data = PlistData(plist_type, _check_date((0, 0) if value is None else value), 8)
    elif plist_type in (PlistType.ARRAY, PlistType.DICT):
        if value is not None:
            raise ValueError("containers take no value; attach children instead")
        data = PlistData(plist_type, None, 0)
    else:
        raise ValueError(f"cannot create a node of type {plist_type!r}")
    return TreeNode(data)