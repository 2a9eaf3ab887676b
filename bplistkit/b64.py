"""Base64 encoding and a lenient, whitespace-tolerant decoder."""

from __future__ import annotations

import base64
import re
import string

_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"
_VALUES = {char: index for index, char in enumerate(_ALPHABET)}
_WHITESPACE = re.compile(r"[\r\n\t ]+")


def encode(data: bytes) -> str:
    """Encode ``data`` as padded base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def _decode_chunk(chunk: str) -> bytearray:
    out = bytearray()
    usable = len(chunk) - len(chunk) % 4
    for start in range(0, usable, 4):
        w1, w2, w3, w4 = (_VALUES.get(char, -1) for char in chunk[start:start + 4])
        if w2 >= 0:
            out.append((w1 * 4 + (w2 >> 4)) & 255)
        if w3 >= 0:
            out.append((w2 * 16 + (w3 >> 2)) & 255)
        if w4 >= 0:
            out.append((w3 * 64 + w4) & 255)
    return out


def decode(text: str) -> bytes:
    """Decode base64 ``text``.

    Runs of spaces, tabs and line breaks separate independent chunks. Each
    chunk is read in whole groups of four characters; characters outside
    the alphabet, padding included, contribute no output byte, and a
    trailing partial group is ignored.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("latin-1")
    out = bytearray()
    for chunk in _WHITESPACE.split(text):
        if chunk:
            out += _decode_chunk(chunk)
    return bytes(out)