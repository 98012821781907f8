"""Fixed Twofish tables and constants.

Everything here is key-independent and computed once at import time:
- the two 8-bit permutations q0 and q1
- the four MDS column tables (q-stage output already folded in)
- the Reed-Solomon reduction used to derive the S-box key words

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

from typing import List, Tuple


BLOCK_SIZE = 16
ROUNDS = 16
MAX_KEY_BYTES = 32
KEY_GRANULARITY = 8

# Subkey layout: 4 input-whitening words, 4 output-whitening words, 2 per round.
INPUT_WHITEN = 0
OUTPUT_WHITEN = INPUT_WHITEN + BLOCK_SIZE // 4
ROUND_SUBKEYS = OUTPUT_WHITEN + BLOCK_SIZE // 4
TOTAL_SUBKEYS = ROUND_SUBKEYS + 2 * ROUNDS

SK_STEP = 0x02020202
SK_BUMP = 0x01010101
SK_ROTL = 9

MASK32 = 0xFFFFFFFF

GF256_FDBK = 0x169
GF256_FDBK_2 = GF256_FDBK // 2
GF256_FDBK_4 = GF256_FDBK // 4
RS_GF_FDBK = 0x14D


Q0: Tuple[int, ...] = (
    0xA9, 0x67, 0xB3, 0xE8, 0x04, 0xFD, 0xA3, 0x76, 0x9A, 0x92, 0x80, 0x78, 0xE4, 0xDD, 0xD1, 0x38,
    0x0D, 0xC6, 0x35, 0x98, 0x18, 0xF7, 0xEC, 0x6C, 0x43, 0x75, 0x37, 0x26, 0xFA, 0x13, 0x94, 0x48,
    0xF2, 0xD0, 0x8B, 0x30, 0x84, 0x54, 0xDF, 0x23, 0x19, 0x5B, 0x3D, 0x59, 0xF3, 0xAE, 0xA2, 0x82,
    0x63, 0x01, 0x83, 0x2E, 0xD9, 0x51, 0x9B, 0x7C, 0xA6, 0xEB, 0xA5, 0xBE, 0x16, 0x0C, 0xE3, 0x61,
    0xC0, 0x8C, 0x3A, 0xF5, 0x73, 0x2C, 0x25, 0x0B, 0xBB, 0x4E, 0x89, 0x6B, 0x53, 0x6A, 0xB4, 0xF1,
    0xE1, 0xE6, 0xBD, 0x45, 0xE2, 0xF4, 0xB6, 0x66, 0xCC, 0x95, 0x03, 0x56, 0xD4, 0x1C, 0x1E, 0xD7,
    0xFB, 0xC3, 0x8E, 0xB5, 0xE9, 0xCF, 0xBF, 0xBA, 0xEA, 0x77, 0x39, 0xAF, 0x33, 0xC9, 0x62, 0x71,
    0x81, 0x79, 0x09, 0xAD, 0x24, 0xCD, 0xF9, 0xD8, 0xE5, 0xC5, 0xB9, 0x4D, 0x44, 0x08, 0x86, 0xE7,
    0xA1, 0x1D, 0xAA, 0xED, 0x06, 0x70, 0xB2, 0xD2, 0x41, 0x7B, 0xA0, 0x11, 0x31, 0xC2, 0x27, 0x90,
    0x20, 0xF6, 0x60, 0xFF, 0x96, 0x5C, 0xB1, 0xAB, 0x9E, 0x9C, 0x52, 0x1B, 0x5F, 0x93, 0x0A, 0xEF,
    0x91, 0x85, 0x49, 0xEE, 0x2D, 0x4F, 0x8F, 0x3B, 0x47, 0x87, 0x6D, 0x46, 0xD6, 0x3E, 0x69, 0x64,
    0x2A, 0xCE, 0xCB, 0x2F, 0xFC, 0x97, 0x05, 0x7A, 0xAC, 0x7F, 0xD5, 0x1A, 0x4B, 0x0E, 0xA7, 0x5A,
    0x28, 0x14, 0x3F, 0x29, 0x88, 0x3C, 0x4C, 0x02, 0xB8, 0xDA, 0xB0, 0x17, 0x55, 0x1F, 0x8A, 0x7D,
    0x57, 0xC7, 0x8D, 0x74, 0xB7, 0xC4, 0x9F, 0x72, 0x7E, 0x15, 0x22, 0x12, 0x58, 0x07, 0x99, 0x34,
    0x6E, 0x50, 0xDE, 0x68, 0x65, 0xBC, 0xDB, 0xF8, 0xC8, 0xA8, 0x2B, 0x40, 0xDC, 0xFE, 0x32, 0xA4,
    0xCA, 0x10, 0x21, 0xF0, 0xD3, 0x5D, 0x0F, 0x00, 0x6F, 0x9D, 0x36, 0x42, 0x4A, 0x5E, 0xC1, 0xE0,
)

Q1: Tuple[int, ...] = (
    0x75, 0xF3, 0xC6, 0xF4, 0xDB, 0x7B, 0xFB, 0xC8, 0x4A, 0xD3, 0xE6, 0x6B, 0x45, 0x7D, 0xE8, 0x4B,
    0xD6, 0x32, 0xD8, 0xFD, 0x37, 0x71, 0xF1, 0xE1, 0x30, 0x0F, 0xF8, 0x1B, 0x87, 0xFA, 0x06, 0x3F,
    0x5E, 0xBA, 0xAE, 0x5B, 0x8A, 0x00, 0xBC, 0x9D, 0x6D, 0xC1, 0xB1, 0x0E, 0x80, 0x5D, 0xD2, 0xD5,
    0xA0, 0x84, 0x07, 0x14, 0xB5, 0x90, 0x2C, 0xA3, 0xB2, 0x73, 0x4C, 0x54, 0x92, 0x74, 0x36, 0x51,
    0x38, 0xB0, 0xBD, 0x5A, 0xFC, 0x60, 0x62, 0x96, 0x6C, 0x42, 0xF7, 0x10, 0x7C, 0x28, 0x27, 0x8C,
    0x13, 0x95, 0x9C, 0xC7, 0x24, 0x46, 0x3B, 0x70, 0xCA, 0xE3, 0x85, 0xCB, 0x11, 0xD0, 0x93, 0xB8,
    0xA6, 0x83, 0x20, 0xFF, 0x9F, 0x77, 0xC3, 0xCC, 0x03, 0x6F, 0x08, 0xBF, 0x40, 0xE7, 0x2B, 0xE2,
    0x79, 0x0C, 0xAA, 0x82, 0x41, 0x3A, 0xEA, 0xB9, 0xE4, 0x9A, 0xA4, 0x97, 0x7E, 0xDA, 0x7A, 0x17,
    0x66, 0x94, 0xA1, 0x1D, 0x3D, 0xF0, 0xDE, 0xB3, 0x0B, 0x72, 0xA7, 0x1C, 0xEF, 0xD1, 0x53, 0x3E,
    0x8F, 0x33, 0x26, 0x5F, 0xEC, 0x76, 0x2A, 0x49, 0x81, 0x88, 0xEE, 0x21, 0xC4, 0x1A, 0xEB, 0xD9,
    0xC5, 0x39, 0x99, 0xCD, 0xAD, 0x31, 0x8B, 0x01, 0x18, 0x23, 0xDD, 0x1F, 0x4E, 0x2D, 0xF9, 0x48,
    0x4F, 0xF2, 0x65, 0x8E, 0x78, 0x5C, 0x58, 0x19, 0x8D, 0xE5, 0x98, 0x57, 0x67, 0x7F, 0x05, 0x64,
    0xAF, 0x63, 0xB6, 0xFE, 0xF5, 0xB7, 0x3C, 0xA5, 0xCE, 0xE9, 0x68, 0x44, 0xE0, 0x4D, 0x43, 0x69,
    0x29, 0x2E, 0xAC, 0x15, 0x59, 0xA8, 0x0A, 0x9E, 0x6E, 0x47, 0xDF, 0x34, 0x35, 0x6A, 0xCF, 0xDC,
    0x22, 0xC9, 0xC0, 0x9B, 0x89, 0xD4, 0xED, 0xAB, 0x12, 0xA2, 0x0D, 0x52, 0xBB, 0x02, 0x2F, 0xA9,
    0xD7, 0x61, 0x1E, 0xB4, 0x50, 0x04, 0xF6, 0xC2, 0x16, 0x25, 0x86, 0x56, 0x55, 0x09, 0xBE, 0x91,
)

# q-permutation chain per byte lane, outermost keyed stage first.
# Stage s is keyed with S-box key word 3 - s; the final unkeyed stage is
# folded into MDS_COLUMNS below.
Q_CHAIN: Tuple[Tuple[Tuple[int, ...], ...], ...] = (
    (Q1, Q1, Q0, Q0),
    (Q0, Q1, Q1, Q0),
    (Q0, Q0, Q0, Q1),
    (Q1, Q0, Q1, Q1),
)
Q_FINAL: Tuple[Tuple[int, ...], ...] = (Q1, Q0, Q1, Q0)


# ============================================================================
# GF(2^8) HELPERS
# ============================================================================

def _lfsr1(x: int) -> int:
    return (x >> 1) ^ (GF256_FDBK_2 if x & 0x01 else 0)


def _lfsr2(x: int) -> int:
    return (x >> 2) ^ (GF256_FDBK_2 if x & 0x02 else 0) ^ (GF256_FDBK_4 if x & 0x01 else 0)


def mul_5b(x: int) -> int:
    """Multiply by 0x5B in GF(2^8) modulo x^8+x^6+x^5+x^3+1."""
    return (x ^ _lfsr2(x)) & 0xFF


def mul_ef(x: int) -> int:
    """Multiply by 0xEF in GF(2^8) modulo x^8+x^6+x^5+x^3+1."""
    return (x ^ _lfsr1(x) ^ _lfsr2(x)) & 0xFF


def _build_mds_columns() -> Tuple[Tuple[int, ...], ...]:
    # MDS matrix rows: [01 EF 5B 5B] [5B EF EF 01] [EF 5B 01 EF] [EF 01 EF 5B]
    cols: List[List[int]] = [[], [], [], []]
    for i in range(256):
        a = Q_FINAL[0][i]
        cols[0].append(a | (mul_5b(a) << 8) | (mul_ef(a) << 16) | (mul_ef(a) << 24))
        b = Q_FINAL[1][i]
        cols[1].append(mul_ef(b) | (mul_ef(b) << 8) | (mul_5b(b) << 16) | (b << 24))
        c = Q_FINAL[2][i]
        cols[2].append(mul_5b(c) | (mul_ef(c) << 8) | (c << 16) | (mul_ef(c) << 24))
        d = Q_FINAL[3][i]
        cols[3].append(mul_5b(d) | (d << 8) | (mul_ef(d) << 16) | (mul_5b(d) << 24))
    return tuple(tuple(col) for col in cols)


MDS_COLUMNS: Tuple[Tuple[int, ...], ...] = _build_mds_columns()


# ============================================================================
# REED-SOLOMON REDUCTION
# ============================================================================

def _rs_rem(x: int) -> int:
    b = (x >> 24) & 0xFF
    g2 = ((b << 1) ^ (RS_GF_FDBK if b & 0x80 else 0)) & 0xFF
    g3 = (b >> 1) ^ ((RS_GF_FDBK >> 1) if b & 0x01 else 0) ^ g2
    return ((x << 8) ^ (g3 << 24) ^ (g2 << 16) ^ (g3 << 8) ^ b) & MASK32


def rs_mds_encode(k0: int, k1: int) -> int:
    """Compress an even/odd key word pair into one S-box key word."""
    r = k1
    for _ in range(4):
        r = _rs_rem(r)
    r ^= k0
    for _ in range(4):
        r = _rs_rem(r)
    return r


# ============================================================================
# WORD UTILITIES
# ============================================================================

def rol32(x: int, r: int) -> int:
    """Rotate-left a 32-bit word."""
    x &= MASK32
    return ((x << r) | (x >> (32 - r))) & MASK32


def ror32(x: int, r: int) -> int:
    """Rotate-right a 32-bit word."""
    x &= MASK32
    return ((x >> r) | (x << (32 - r))) & MASK32


def byte_of(x: int, n: int) -> int:
    """Byte lane ``n`` (mod 4) of a little-endian 32-bit word."""
    return (x >> (8 * (n & 3))) & 0xFF
