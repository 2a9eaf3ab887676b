"""Writing of node trees as binary property lists ("bplist00")."""

from __future__ import annotations

import struct
from collections.abc import Hashable

from bplistkit.model import PlistData, PlistType
from bplistkit.tree import TreeNode

_MAGIC = b"bplist"
_VERSION = b"00"
_PAD = bytes(6)

_MARK_FALSE = 0x08
_MARK_TRUE = 0x09
_MARK_UINT = 0x10
_MARK_REAL = 0x20
_MARK_DATE = 0x30
_MARK_DATA = 0x40
_MARK_STRING = 0x50
_MARK_UNICODE = 0x60
_MARK_UID = 0x80
_MARK_ARRAY = 0xA0
_MARK_DICT = 0xD0

_LOG2 = {1: 0, 2: 1, 4: 2, 8: 3}


def _needed_bytes(value: int) -> int:
    """Return the smallest of 1, 2, 3, 4 or 8 bytes that holds ``value``."""
    for width in (1, 2, 3, 4):
        if value < 1 << (8 * width):
            return width
    return 8


def _sized_int(marker: int, value: int) -> bytes:
    width = _needed_bytes(value)
    if width == 3:
        # Three-byte integer objects are not written.
        width = 4
    return bytes([marker | _LOG2[width]]) + value.to_bytes(width, "big")


def _count_header(marker: int, count: int) -> bytes:
    if count < 15:
        return bytes([marker | count])
    return bytes([marker | 0x0F]) + _sized_int(_MARK_UINT, count)


def _real(value: float) -> bytes:
    try:
        single = struct.pack(">f", value)
    except OverflowError:
        single = None
    if single is not None and struct.unpack(">f", single)[0] == value:
        return bytes([_MARK_REAL | 2]) + single
    return bytes([_MARK_REAL | 3]) + struct.pack(">d", value)


def _text(value: str) -> bytes:
    text = value.split("\0", 1)[0]
    if text.isascii():
        raw = text.encode("ascii")
        return _count_header(_MARK_STRING, len(raw)) + raw
    raw = text.encode("utf-16-be", errors="surrogatepass")
    return _count_header(_MARK_UNICODE, len(raw) // 2) + raw


def _payload(node: TreeNode) -> PlistData:
    data = node.data
    if not isinstance(data, PlistData):
        raise TypeError(f"tree node carries {type(data).__name__}, not PlistData")
    return data


def _identity(node: TreeNode) -> Hashable:
    """Key under which equal scalar objects are written only once."""
    data = _payload(node)
    kind = data.type
    if kind in (PlistType.DATA, PlistType.ARRAY, PlistType.DICT):
        return ("node", id(node))
    if kind is PlistType.REAL:
        return (kind, struct.pack(">d", data.value))
    if kind is PlistType.UINT:
        return (kind, data.value, data.length)
    return (kind, data.value)


def _collect(root: TreeNode) -> tuple[list[TreeNode], dict[Hashable, int]]:
    """List the objects to write in pre-order, skipping duplicates."""
    objects: list[TreeNode] = []
    refs: dict[Hashable, int] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        key = _identity(node)
        if key in refs:
            continue
        refs[key] = len(objects)
        objects.append(node)
        stack.extend(reversed(list(node)))
    return objects, refs


def _encode(node: TreeNode, refs: dict[Hashable, int], ref_size: int) -> bytes:
    data = _payload(node)
    kind = data.type

    def ref(child: TreeNode) -> bytes:
        return refs[_identity(child)].to_bytes(ref_size, "big")

    if kind is PlistType.BOOLEAN:
        return bytes([_MARK_TRUE if data.value else _MARK_FALSE])
    if kind is PlistType.UINT:
        if data.length == 16:
            return bytes([_MARK_UINT | 4]) + bytes(8) + data.value.to_bytes(8, "big")
        return _sized_int(_MARK_UINT, data.value)
    if kind is PlistType.REAL:
        return _real(data.value)
    if kind in (PlistType.STRING, PlistType.KEY):
        return _text(data.value)
    if kind is PlistType.DATA:
        raw = bytes(data.value)
        return _count_header(_MARK_DATA, len(raw)) + raw
    if kind is PlistType.ARRAY:
        children = list(node)
        return _count_header(_MARK_ARRAY, len(children)) + b"".join(ref(c) for c in children)
    if kind is PlistType.DICT:
        children = list(node)
        pairs = len(children) // 2
        keys = children[0:2 * pairs:2]
        values = children[1:2 * pairs:2]
        return (
            _count_header(_MARK_DICT, pairs)
            + b"".join(ref(k) for k in keys)
            + b"".join(ref(v) for v in values)
        )
    if kind is PlistType.DATE:
        seconds, microseconds = data.value
        return bytes([_MARK_DATE | 3]) + struct.pack(">d", seconds + microseconds / 1000000)
    if kind is PlistType.UID:
        return _sized_int(_MARK_UID, data.value)
    raise ValueError(f"cannot write a node of type {kind!r}")


def to_bin(root: TreeNode) -> bytes:
    """Serialize the tree under ``root`` as a binary property list.

    Equal scalar values are stored once and shared by reference; data,
    arrays and dictionaries are stored once per node.
    """
    if not isinstance(root, TreeNode):
        raise TypeError(f"expected a TreeNode, got {type(root).__name__}")

    objects, refs = _collect(root)
    ref_size = _needed_bytes(len(objects))

    out = bytearray(_MAGIC + _VERSION)
    offsets: list[int] = []
    for node in objects:
        offsets.append(len(out))
        out += _encode(node, refs, ref_size)

    offset_table = len(out)
    offset_size = _needed_bytes(offset_table)
    for offset in offsets:
        out += offset.to_bytes(offset_size, "big")

    out += _PAD
    out += bytes([offset_size, ref_size])
    out += struct.pack(">QQQ", len(objects), 0, offset_table)
    return bytes(out)