"""Conversions between text encodings and raw byte buffers.

Supported: UTF-8 text, case-tolerant hexadecimal, standard Base64 and raw
bytes. ``Encoding.AUTO`` is only meaningful for ciphertext handed to
decryption, where hex and Base64 are told apart by their character set.
"""
from __future__ import annotations

import base64
import binascii
import re
from enum import Enum
from typing import Union

from cipherforge.cipher.errors import ConfigurationError


BytesLike = Union[bytes, bytearray, memoryview]

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")
_WS_RE = re.compile(r"\s+")

_ALIASES = {
    "utf-8": "utf8",
    "text": "utf8",
    "b64": "base64",
    "raw": "bytes",
}


class Encoding(str, Enum):
    UTF8 = "utf8"
    HEX = "hex"
    BASE64 = "base64"
    BYTES = "bytes"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: Union[str, "Encoding"]) -> "Encoding":
        if isinstance(value, Encoding):
            return value
        if not isinstance(value, str):
            raise ConfigurationError(f"Encoding name must be a string, got {type(value).__name__}")
        name = value.strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            allowed = ", ".join(e.value for e in cls)
            raise ConfigurationError(f"Unknown encoding '{value}' (expected one of: {allowed})") from None


def is_bytes_like(value: object) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


def hex_to_bytes(text: str) -> bytes:
    clean = _WS_RE.sub("", text)
    if len(clean) % 2 != 0:
        raise ConfigurationError("Invalid hex length (must be even)")
    if not _HEX_RE.match(clean):
        raise ConfigurationError("Invalid hex string")
    return bytes.fromhex(clean)


def base64_to_bytes(text: str) -> bytes:
    clean = _WS_RE.sub("", text)
    try:
        return base64.b64decode(clean, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError(f"Invalid base64 string: {exc}") from exc


def guess_encoding(text: str) -> Encoding:
    """Tell hex from Base64 by character set: even-length hex wins, otherwise Base64."""
    clean = _WS_RE.sub("", text)
    if clean and len(clean) % 2 == 0 and _HEX_RE.match(clean):
        return Encoding.HEX
    return Encoding.BASE64


def to_bytes(value: Union[str, BytesLike], encoding: Union[str, Encoding]) -> bytes:
    """Decode ``value`` into bytes according to ``encoding``.

    Bytes-like values are passed through unchanged whatever the declared
    encoding. Strings are decoded as declared; a string declared as ``bytes``
    is rejected rather than guessed at.
    """
    if is_bytes_like(value):
        return bytes(value)
    if not isinstance(value, str):
        raise ConfigurationError(f"Expected str or bytes, got {type(value).__name__}")

    enc = Encoding.parse(encoding)
    if enc is Encoding.AUTO:
        enc = guess_encoding(value)

    if enc is Encoding.UTF8:
        return value.encode("utf-8")
    if enc is Encoding.HEX:
        return hex_to_bytes(value)
    if enc is Encoding.BASE64:
        return base64_to_bytes(value)
    raise ConfigurationError("Encoding 'bytes' expects a bytes-like value, got str")


def from_bytes(data: BytesLike, encoding: Union[str, Encoding]) -> Union[str, bytes]:
    """Encode raw bytes for output."""
    data = bytes(data)
    enc = Encoding.parse(encoding)
    if enc is Encoding.BYTES:
        return data
    if enc is Encoding.HEX:
        return data.hex()
    if enc is Encoding.BASE64:
        return base64.b64encode(data).decode("ascii")
    if enc is Encoding.UTF8:
        # Undecodable sequences become U+FFFD, as a wrong key yields garbage.
        return data.decode("utf-8", errors="replace")
    raise ConfigurationError("Encoding 'auto' is not valid for output")
