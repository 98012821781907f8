"""Single-block Twofish transform.

Input whitening, 16 Feistel rounds (two F applications per loop iteration),
output whitening. Decryption walks the same structure with the subkeys
consumed in reverse and the one-bit rotations mirrored.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import struct

from .errors import DataShapeError
from .key_schedule import KeySchedule
from .round_function import round_function
from .tables import BLOCK_SIZE, INPUT_WHITEN, OUTPUT_WHITEN, ROUND_SUBKEYS, ROUNDS, TOTAL_SUBKEYS, rol32, ror32

_BLOCK = struct.Struct("<4I")


def _check_block(block: bytes) -> None:
    if len(block) != BLOCK_SIZE:
        raise DataShapeError(f"Block must be {BLOCK_SIZE} bytes, got {len(block)}")


def encrypt_block(schedule: KeySchedule, block: bytes) -> bytes:
    """Encrypt exactly one 16-byte block."""
    _check_block(block)
    sk = schedule.subkeys
    x0, x1, x2, x3 = _BLOCK.unpack(block)

    x0 ^= sk[INPUT_WHITEN]
    x1 ^= sk[INPUT_WHITEN + 1]
    x2 ^= sk[INPUT_WHITEN + 2]
    x3 ^= sk[INPUT_WHITEN + 3]

    k = ROUND_SUBKEYS
    for _ in range(ROUNDS // 2):
        f0, f1 = round_function(schedule, x0, x1, sk[k], sk[k + 1])
        x2 = ror32(x2 ^ f0, 1)
        x3 = rol32(x3, 1) ^ f1

        f0, f1 = round_function(schedule, x2, x3, sk[k + 2], sk[k + 3])
        x0 = ror32(x0 ^ f0, 1)
        x1 = rol32(x1, 1) ^ f1
        k += 4

    # Undo the last swap: the output order is (x2, x3, x0, x1).
    return _BLOCK.pack(
        x2 ^ sk[OUTPUT_WHITEN],
        x3 ^ sk[OUTPUT_WHITEN + 1],
        x0 ^ sk[OUTPUT_WHITEN + 2],
        x1 ^ sk[OUTPUT_WHITEN + 3],
    )


def decrypt_block(schedule: KeySchedule, block: bytes) -> bytes:
    """Decrypt exactly one 16-byte block."""
    _check_block(block)
    sk = schedule.subkeys
    x2, x3, x0, x1 = _BLOCK.unpack(block)

    x2 ^= sk[OUTPUT_WHITEN]
    x3 ^= sk[OUTPUT_WHITEN + 1]
    x0 ^= sk[OUTPUT_WHITEN + 2]
    x1 ^= sk[OUTPUT_WHITEN + 3]

    k = TOTAL_SUBKEYS - 1
    for _ in range(ROUNDS // 2):
        f0, f1 = round_function(schedule, x2, x3, sk[k - 1], sk[k])
        x1 = ror32(x1 ^ f1, 1)
        x0 = rol32(x0, 1) ^ f0

        f0, f1 = round_function(schedule, x0, x1, sk[k - 3], sk[k - 2])
        x3 = ror32(x3 ^ f1, 1)
        x2 = rol32(x2, 1) ^ f0
        k -= 4

    return _BLOCK.pack(
        x0 ^ sk[INPUT_WHITEN],
        x1 ^ sk[INPUT_WHITEN + 1],
        x2 ^ sk[INPUT_WHITEN + 2],
        x3 ^ sk[INPUT_WHITEN + 3],
    )
