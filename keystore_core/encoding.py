"""
Byte codecs used by the keystore document.

  - hex: bytes <-> lowercase hexadecimal text
  - utf8: bytes <-> text of the serialized document
"""

from __future__ import annotations

from keystore_core.errors import FormatError


def hex_encode(data: bytes) -> str:
    """Lowercase hex of *data*."""
    return bytes(data).hex()


def hex_decode(text: str, field: str = "value") -> bytes:
    """Decode hex *text*; raise FormatError naming *field* when it is not hex."""
    if not isinstance(text, str):
        raise FormatError(f"{field} must be a hex string")
    if len(text) % 2:
        raise FormatError(f"{field} has odd hex length")
    try:
        out = bytes.fromhex(text)
    except ValueError as exc:
        raise FormatError(f"{field} is not valid hex") from exc
    # fromhex skips whitespace between pairs
    if len(out) * 2 != len(text):
        raise FormatError(f"{field} is not valid hex")
    return out


def utf8_encode(text: str) -> bytes:
    return text.encode("utf-8")


def utf8_decode(data: bytes) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError("keystore is not valid UTF-8 text") from exc
