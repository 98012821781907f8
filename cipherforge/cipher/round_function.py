from __future__ import annotations

from typing import Tuple

from .key_schedule import KeySchedule
from .tables import MASK32


def g(schedule: KeySchedule, x: int, start: int) -> int:
    """Route the bytes of ``x`` (from lane ``start``, wrapping) through the four key-dependent tables."""
    s0, s1, s2, s3 = schedule.sbox
    return (
        s0[(x >> (8 * (start & 3))) & 0xFF]
        ^ s1[(x >> (8 * ((start + 1) & 3))) & 0xFF]
        ^ s2[(x >> (8 * ((start + 2) & 3))) & 0xFF]
        ^ s3[(x >> (8 * ((start + 3) & 3))) & 0xFF]
    )


def round_function(schedule: KeySchedule, x0: int, x1: int, k0: int, k1: int) -> Tuple[int, int]:
    """Keyed F-function: pseudo-Hadamard transform of g(x0) and g(rol(x1, 8)) plus two subkeys."""
    t0 = g(schedule, x0, 0)
    t1 = g(schedule, x1, 3)
    return (t0 + t1 + k0) & MASK32, (t0 + 2 * t1 + k1) & MASK32
