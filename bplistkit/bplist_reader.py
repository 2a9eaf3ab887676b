"""Reading of binary property lists ("bplist00") into node trees."""

from __future__ import annotations

import struct
from collections.abc import Sequence

from bplistkit.model import PlistData, PlistType
from bplistkit.tree import TreeNode

_MAGIC = b"bplist"
_VERSION = b"00"
_TRAILER_SIZE = 26
_HEADER_SIZE = len(_MAGIC) + len(_VERSION)

_MARK_SPECIAL = 0x00
_MARK_UINT = 0x10
_MARK_REAL = 0x20
_MARK_DATE = 0x30
_MARK_DATA = 0x40
_MARK_STRING = 0x50
_MARK_UNICODE = 0x60
_MARK_UNK_0X70 = 0x70
_MARK_UID = 0x80
_MARK_ARRAY = 0xA0
_MARK_SET = 0xC0
_MARK_DICT = 0xD0

_SPECIAL_FALSE = 0x08
_SPECIAL_TRUE = 0x09
_EXTENDED_LENGTH = 0x0F


class BinaryPlistError(ValueError):
    """Raised when data is not a readable binary property list."""


def _utf16_to_text(units: Sequence[int]) -> str:
    """Decode UTF-16 code units, dropping malformed surrogates."""
    chars: list[str] = []
    pending: int | None = None
    for unit in units:
        if 0xD800 <= unit <= 0xDBFF:
            # A second lead surrogate in a row cancels the first one.
            pending = 0x10000 + ((unit & 0x3FF) << 10) if pending is None else None
        elif 0xDC00 <= unit <= 0xDFFF:
            if pending is not None:
                chars.append(chr(pending | (unit & 0x3FF)))
                pending = None
        else:
            chars.append(chr(unit))
    return "".join(chars)


def _until_nul(text: str) -> str:
    return text.split("\0", 1)[0]


class _ObjectReader:
    """Decodes single objects of a binary property list."""

    def __init__(self, data: bytes, ref_size: int) -> None:
        self.data = data
        self.ref_size = ref_size

    def take(self, pos: int, count: int) -> bytes:
        end = pos + count
        if pos < 0 or end > len(self.data):
            raise BinaryPlistError(f"object at offset {pos} runs past the end of the data")
        return self.data[pos:end]

    def uint(self, pos: int, nibble: int) -> tuple[PlistData, int] | None:
        width = 1 << nibble
        if width in (1, 2, 4, 8):
            value = int.from_bytes(self.take(pos, width), "big")
            return PlistData(PlistType.UINT, value, 8), pos + width
        if width == 16:
            value = int.from_bytes(self.take(pos, 16)[8:], "big")
            return PlistData(PlistType.UINT, value, 16), pos + 16
        return None

    def count(self, pos: int, nibble: int) -> tuple[int, int] | None:
        if nibble != _EXTENDED_LENGTH:
            return nibble, pos
        marker = self.take(pos, 1)[0]
        if marker & 0xF0 != _MARK_UINT:
            return None
        parsed = self.uint(pos + 1, marker & 0x0F)
        if parsed is None:
            return None
        size_data, after = parsed
        return size_data.value, after

    def refs(self, pos: int, count: int) -> list[int]:
        raw = self.take(pos, count * self.ref_size)
        step = self.ref_size
        return [int.from_bytes(raw[start:start + step], "big") for start in range(0, len(raw), step)]

    def real(self, pos: int, nibble: int) -> float | None:
        width = 1 << nibble
        if width == 4:
            return struct.unpack(">f", self.take(pos, 4))[0]
        if width == 8:
            return struct.unpack(">d", self.take(pos, 8))[0]
        return None

    def parse(self, pos: int) -> tuple[PlistData | None, list[int] | None]:
        """Decode the object at ``pos``; containers also return their references."""
        marker = self.take(pos, 1)[0]
        kind, nibble = marker & 0xF0, marker & 0x0F
        pos += 1

        if kind == _MARK_SPECIAL:
            if nibble == _SPECIAL_TRUE:
                return PlistData(PlistType.BOOLEAN, True, 1), None
            if nibble == _SPECIAL_FALSE:
                return PlistData(PlistType.BOOLEAN, False, 1), None
            return None, None

        if kind == _MARK_UINT:
            parsed = self.uint(pos, nibble)
            return (parsed[0] if parsed else None), None

        if kind == _MARK_REAL:
            value = self.real(pos, nibble)
            if value is None:
                return None, None
            return PlistData(PlistType.REAL, value, 8), None

        if kind == _MARK_DATE:
            if nibble != 3:
                return None, None
            moment = self.real(pos, nibble)
            try:
                seconds = int(moment)
                microseconds = int((moment - seconds) * 1000000)
            except (ValueError, OverflowError):
                return None, None
            return PlistData(PlistType.DATE, (seconds, microseconds), 8), None

        if kind == _MARK_UID:
            width = 1 << nibble
            if width not in (1, 2, 4, 8):
                return None, None
            value = int.from_bytes(self.take(pos, width), "big")
            return PlistData(PlistType.UID, value, 8), None

        sized = self.count(pos, nibble)
        if sized is None:
            return None, None
        count, pos = sized

        if kind == _MARK_DATA:
            raw = self.take(pos, count)
            return PlistData(PlistType.DATA, raw, len(raw)), None
        if kind == _MARK_STRING:
            text = _until_nul(self.take(pos, count).decode("utf-8", errors="replace"))
            return PlistData(PlistType.STRING, text, len(text.encode("utf-8"))), None
        if kind == _MARK_UNICODE:
            units = struct.unpack(f">{count}H", self.take(pos, 2 * count))
            text = _until_nul(_utf16_to_text(units))
            return PlistData(PlistType.STRING, text, len(text.encode("utf-8"))), None
        if kind in (_MARK_UNK_0X70, _MARK_ARRAY):
            return PlistData(PlistType.ARRAY), self.refs(pos, count)
        if kind in (_MARK_SET, _MARK_DICT):
            return PlistData(PlistType.DICT), self.refs(pos, 2 * count)
        return None, None


def _is_ancestor(candidate: TreeNode, node: TreeNode) -> bool:
    current: TreeNode | None = node
    while current is not None:
        if current is candidate:
            return True
        current = current.parent
    return False


def _claim(nodes: list[TreeNode | None], index: int, parent: TreeNode) -> tuple[TreeNode, bool] | None:
    """Return the node to attach for ``index`` and whether it is a copy."""
    if index >= len(nodes):
        return None
    target = nodes[index]
    if target is None:
        return None
    if target.is_root:
        if _is_ancestor(target, parent):
            raise BinaryPlistError(f"object {index} refers to itself through its children")
        return target, False
    return target.copy_deep(PlistData.copy), True


def _link_array(nodes: list[TreeNode | None], parent: TreeNode, refs: list[int]) -> None:
    for index in refs:
        claimed = _claim(nodes, index, parent)
        if claimed is not None:
            parent.attach(claimed[0])


def _link_dict(nodes: list[TreeNode | None], parent: TreeNode, refs: list[int]) -> None:
    half = len(refs) // 2
    for key_index, value_index in zip(refs[:half], refs[half:]):
        claimed = _claim(nodes, key_index, parent)
        if claimed is not None:
            key_node = claimed[0]
            if key_node.data.type not in (PlistType.STRING, PlistType.KEY):
                raise BinaryPlistError(f"dictionary key object {key_index} is not a string")
            key_node.data.type = PlistType.KEY
            parent.attach(key_node)

        claimed = _claim(nodes, value_index, parent)
        if claimed is not None:
            value_node, copied = claimed
            if copied and value_node.data.type is PlistType.KEY:
                value_node.data.type = PlistType.STRING
            parent.attach(value_node)


def from_bin(data: bytes) -> TreeNode:
    """Parse a binary property list and return the root node of its tree.

    Objects that cannot be decoded are left out, as are references to them
    or to objects that do not exist. An object referenced from more than
    one place is copied for every reference after the first.
    """
    data = bytes(data)
    if len(data) < _HEADER_SIZE + _TRAILER_SIZE:
        raise BinaryPlistError("data is too short to be a binary property list")
    if not data.startswith(_MAGIC):
        raise BinaryPlistError("missing binary property list magic")
    if data[len(_MAGIC):_HEADER_SIZE] != _VERSION:
        raise BinaryPlistError("unsupported binary property list version")

    trailer = data[-_TRAILER_SIZE:]
    offset_size, ref_size = trailer[0], trailer[1]
    num_objects, root_object, offset_table = struct.unpack(">QQQ", trailer[2:])

    if num_objects == 0:
        raise BinaryPlistError("binary property list holds no objects")
    if offset_size == 0 or ref_size == 0:
        raise BinaryPlistError("offset and reference sizes must not be zero")
    if offset_table + num_objects * offset_size > len(data):
        raise BinaryPlistError("offset table runs past the end of the data")
    if root_object >= num_objects:
        raise BinaryPlistError(f"root object {root_object} does not exist")

    reader = _ObjectReader(data, ref_size)
    nodes: list[TreeNode | None] = []
    references: list[list[int] | None] = []
    for number in range(num_objects):
        start = offset_table + number * offset_size
        offset = int.from_bytes(data[start:start + offset_size], "big")
        payload, refs = reader.parse(offset)
        nodes.append(TreeNode(payload) if payload is not None else None)
        references.append(refs)

    for node, refs in zip(nodes, references):
        if node is None or refs is None:
            continue
        if node.data.type is PlistType.DICT:
            _link_dict(nodes, node, refs)
        else:
            _link_array(nodes, node, refs)

    root = nodes[root_object]
    if root is None:
        raise BinaryPlistError("root object could not be decoded")
    return root