from __future__ import annotations

from typing import List, Optional, Tuple

from cipherforge.encoding import Encoding

from .modes import Direction, Mode
from .spec import TwofishOptions
from .tables import BLOCK_SIZE, KEY_GRANULARITY


MIN_KEY_BYTES = KEY_GRANULARITY


def validate_options(opts: TwofishOptions, direction: Direction) -> Tuple[bool, List[str]]:
    """Checks that depend on the direction and cannot live on the model."""
    errs: List[str] = []

    if not opts.key:
        errs.append('"key" is required')

    if direction is Direction.ENCRYPT and opts.input_encoding is Encoding.AUTO:
        errs.append("'auto' input encoding is only accepted for decryption")

    if direction is Direction.DECRYPT and opts.mode is Mode.CBC and opts.iv is None:
        errs.append("CBC decryption requires the IV used at encryption time")

    return (len(errs) == 0), errs


def validate_material(key: bytes, iv: Optional[bytes], mode: Mode) -> Tuple[bool, List[str]]:
    """Checks on decoded key and IV bytes."""
    errs: List[str] = []

    if len(key) == 0:
        errs.append("key is empty")
    elif len(key) < MIN_KEY_BYTES:
        errs.append(f"key must be at least {MIN_KEY_BYTES} bytes (got {len(key)})")
    # Keys longer than 32 bytes are truncated by the key schedule, not rejected.

    if mode is Mode.CBC and iv is not None and len(iv) != BLOCK_SIZE:
        errs.append(f"IV must be {BLOCK_SIZE} bytes (got {len(iv)})")

    return (len(errs) == 0), errs
