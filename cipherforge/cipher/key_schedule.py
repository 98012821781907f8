"""Twofish key schedule.

Derives, once per key:
- the S-box key words (RS reduction of each 64-bit key group)
- 40 subkeys: 8 whitening words followed by 32 round subkeys
- four 256-entry key-dependent tables (q-permutations folded into the MDS columns)

The result is an immutable ``KeySchedule`` value which the round function,
block transform and chaining driver receive explicitly.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .errors import ConfigurationError
from .tables import (
    KEY_GRANULARITY,
    MASK32,
    MAX_KEY_BYTES,
    MDS_COLUMNS,
    Q_CHAIN,
    SK_BUMP,
    SK_ROTL,
    SK_STEP,
    TOTAL_SUBKEYS,
    byte_of,
    rol32,
    rs_mds_encode,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeySchedule:
    """Precomputed material for one key. Never mutated after construction."""
    key_length: int                               # normalized length: 8, 16, 24 or 32
    sbox: Tuple[Tuple[int, ...], ...]             # 4 x 256 words
    subkeys: Tuple[int, ...]                      # 40 words
    sbox_key: Tuple[int, ...]                     # 1..4 words

    @property
    def k64_count(self) -> int:
        return self.key_length // 8


def normalize_key(key: bytes) -> bytes:
    """Truncate to 32 bytes and zero-extend to the next multiple of 8."""
    key = bytes(key)[:MAX_KEY_BYTES]
    return key + b"\x00" * (-len(key) % KEY_GRANULARITY)


def split_key_words(key: bytes) -> Tuple[List[int], List[int]]:
    """Split a normalized key into its even and odd little-endian words."""
    k64_cnt = len(key) // 8
    words = struct.unpack("<" + "I" * (2 * k64_cnt), key)
    return list(words[0::2]), list(words[1::2])


def h(x: int, key_words: Sequence[int], k64_cnt: int) -> int:
    """The keyed h-function: q-permutation stages, then MDS diffusion.

    Stage ``s`` (0 = outermost) is keyed with ``key_words[3 - s]``; a key of
    ``k64_cnt`` 64-bit words uses only the last ``k64_cnt`` stages.
    """
    first = 4 - k64_cnt
    out = 0
    for lane in range(4):
        y = byte_of(x, lane)
        chain = Q_CHAIN[lane]
        for s in range(first, 4):
            y = chain[s][y] ^ byte_of(key_words[3 - s], lane)
        out ^= MDS_COLUMNS[lane][y]
    return out


def _build_subkeys(k32e: Sequence[int], k32o: Sequence[int], k64_cnt: int) -> Tuple[int, ...]:
    subkeys: List[int] = []
    for i in range(TOTAL_SUBKEYS // 2):
        q = (i * SK_STEP) & MASK32
        a = h(q, k32e, k64_cnt)
        b = rol32(h((q + SK_BUMP) & MASK32, k32o, k64_cnt), 8)
        a = (a + b) & MASK32
        subkeys.append(a)
        a = (a + b) & MASK32
        subkeys.append(rol32(a, SK_ROTL))
    return tuple(subkeys)


def _build_sbox(sbox_key: Sequence[int], k64_cnt: int) -> Tuple[Tuple[int, ...], ...]:
    first = 4 - k64_cnt
    tables: List[Tuple[int, ...]] = []
    for lane in range(4):
        chain = Q_CHAIN[lane]
        column = MDS_COLUMNS[lane]
        lane_key = [byte_of(sbox_key[3 - s], lane) for s in range(4)]
        row: List[int] = []
        for i in range(256):
            y = i
            for s in range(first, 4):
                y = chain[s][y] ^ lane_key[s]
            row.append(column[y])
        tables.append(tuple(row))
    return tuple(tables)


def build_schedule(key: bytes) -> KeySchedule:
    """Derive the full key schedule from 1..32 key bytes.

    Shorter keys are zero-extended to a multiple of 8 and longer keys are
    truncated to 32 bytes. An empty key is rejected.
    """
    if key is None or len(key) == 0:
        raise ConfigurationError("Twofish key is empty")

    norm = normalize_key(key)
    k64_cnt = len(norm) // 8
    k32e, k32o = split_key_words(norm)

    sbox_key = [0, 0, 0, 0]
    for i in range(k64_cnt):
        sbox_key[k64_cnt - 1 - i] = rs_mds_encode(k32e[i], k32o[i])

    schedule = KeySchedule(
        key_length=len(norm),
        sbox=_build_sbox(sbox_key, k64_cnt),
        subkeys=_build_subkeys(k32e, k32o, k64_cnt),
        sbox_key=tuple(sbox_key[:k64_cnt]),
    )
    logger.debug(
        "Built key schedule: %d input bytes -> %d-byte key (%d subkeys)",
        len(key), len(norm), len(schedule.subkeys),
    )
    return schedule
