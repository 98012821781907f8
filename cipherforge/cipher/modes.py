"""ECB and CBC chaining over 16-byte aligned buffers.

Padding and trimming are not handled here: every buffer entering or leaving
this module is a multiple of the block size.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

from .block import decrypt_block, encrypt_block
from .errors import ConfigurationError, DataShapeError
from .key_schedule import KeySchedule, build_schedule
from .tables import BLOCK_SIZE

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    ECB = "ECB"
    CBC = "CBC"

    @classmethod
    def parse(cls, value: Union[str, "Mode"]) -> "Mode":
        if isinstance(value, Mode):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ConfigurationError(f'Unsupported mode "{value}". Use "CBC" or "ECB".') from None


class Direction(str, Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


KeyMaterial = Union[bytes, KeySchedule]


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings of equal length."""
    if len(a) != len(b):
        raise DataShapeError("xor_bytes length mismatch")
    return bytes(x ^ y for x, y in zip(a, b))


def _schedule(key: KeyMaterial) -> KeySchedule:
    if isinstance(key, KeySchedule):
        return key
    return build_schedule(key)


def _check_data(data: bytes) -> None:
    if len(data) % BLOCK_SIZE != 0:
        raise DataShapeError(f"Data length must be a multiple of {BLOCK_SIZE} bytes, got {len(data)}")


def _check_iv(iv: Optional[bytes]) -> bytes:
    if iv is None:
        raise ConfigurationError("CBC mode requires an IV")
    if len(iv) != BLOCK_SIZE:
        raise ConfigurationError(f"IV must be {BLOCK_SIZE} bytes (got {len(iv)})")
    return bytes(iv)


def encrypt_ecb(key: KeyMaterial, data: bytes) -> bytes:
    _check_data(data)
    sched = _schedule(key)
    out = bytearray()
    for pos in range(0, len(data), BLOCK_SIZE):
        out += encrypt_block(sched, data[pos:pos + BLOCK_SIZE])
    return bytes(out)


def decrypt_ecb(key: KeyMaterial, data: bytes) -> bytes:
    _check_data(data)
    sched = _schedule(key)
    out = bytearray()
    for pos in range(0, len(data), BLOCK_SIZE):
        out += decrypt_block(sched, data[pos:pos + BLOCK_SIZE])
    return bytes(out)


def encrypt_cbc(key: KeyMaterial, data: bytes, iv: Optional[bytes]) -> bytes:
    """C[i] = E(P[i] ^ v); v starts as the IV and becomes C[i]."""
    _check_data(data)
    vector = _check_iv(iv)
    sched = _schedule(key)
    out = bytearray()
    for pos in range(0, len(data), BLOCK_SIZE):
        vector = encrypt_block(sched, xor_bytes(data[pos:pos + BLOCK_SIZE], vector))
        out += vector
    return bytes(out)


def decrypt_cbc(key: KeyMaterial, data: bytes, iv: Optional[bytes]) -> bytes:
    """P[i] = D(C[i]) ^ v; v starts as the IV and becomes the input block C[i]."""
    _check_data(data)
    vector = _check_iv(iv)
    sched = _schedule(key)
    out = bytearray()
    for pos in range(0, len(data), BLOCK_SIZE):
        block = data[pos:pos + BLOCK_SIZE]
        out += xor_bytes(decrypt_block(sched, block), vector)
        vector = block
    return bytes(out)


def run(
    mode: Union[str, Mode],
    direction: Union[str, Direction],
    key: KeyMaterial,
    iv: Optional[bytes],
    data: bytes,
) -> bytes:
    """Apply the block transform across ``data`` in the given mode and direction."""
    mode = Mode.parse(mode)
    try:
        direction = Direction(direction)
    except ValueError:
        raise ConfigurationError(f"Unknown direction: {direction}") from None
    data = bytes(data)
    logger.debug("%s %s: %d blocks", mode.value, direction.value, len(data) // BLOCK_SIZE)

    if mode is Mode.ECB:
        if direction is Direction.ENCRYPT:
            return encrypt_ecb(key, data)
        return decrypt_ecb(key, data)

    if direction is Direction.ENCRYPT:
        return encrypt_cbc(key, data, iv)
    return decrypt_cbc(key, data, iv)
