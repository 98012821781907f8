"""Diffusion measurements for the block transform and the CBC chain.

- Strict Avalanche Criterion (SAC): flipping each input bit should flip each
  output bit with probability ~0.5.
- CBC error propagation: a bit flip in ciphertext block i garbles plaintext
  block i and flips exactly the same bit of plaintext block i + 1.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from cipherforge.cipher import modes
from cipherforge.cipher.block import encrypt_block
from cipherforge.cipher.key_schedule import build_schedule
from cipherforge.cipher.modes import xor_bytes
from cipherforge.cipher.tables import BLOCK_SIZE


def _flip_bit(data: bytes, bit_index: int) -> bytes:
    byte_i = bit_index // 8
    bit_i = bit_index % 8
    if byte_i < 0 or byte_i >= len(data):
        raise IndexError("bit_index out of range")
    out = bytearray(data)
    out[byte_i] ^= 1 << bit_i
    return bytes(out)


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def _bits(data: bytes) -> np.ndarray:
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8), bitorder="little")


@dataclass
class SACResult:
    """Strict Avalanche Criterion measurement for one input type."""
    input_type: str             # "plaintext" or "key"
    key_size_bytes: int
    num_trials: int
    num_input_bits: int
    num_output_bits: int

    # Per-input-bit mean flip fraction (len = num_input_bits)
    per_input_bit_mean: List[float] = field(default_factory=list)

    global_mean: float = 0.0    # ~0.5 ideal
    global_std: float = 0.0
    min_bit_prob: float = 0.0   # lowest single (input, output) flip probability
    max_bit_prob: float = 0.0
    sac_deviation: float = 0.0  # mean |p - 0.5| over per-input-bit means

    @property
    def passes_sac(self) -> bool:
        """Heuristic: SAC deviation < 0.05 and global mean within 0.45..0.55."""
        return self.sac_deviation < 0.05 and 0.45 <= self.global_mean <= 0.55

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["passes_sac"] = self.passes_sac
        return d

    def summary(self) -> str:
        status = "PASS" if self.passes_sac else "FAIL"
        return (
            f"[{status}] SAC({self.input_type}, {self.key_size_bytes * 8}-bit key): "
            f"mean={self.global_mean:.4f}, std={self.global_std:.4f}, "
            f"deviation={self.sac_deviation:.4f}"
        )


def compute_sac(
    *,
    key_size_bytes: int = 16,
    input_type: str = "plaintext",
    trials: int = 64,
    seed: int = 1337,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> SACResult:
    """Compute the Strict Avalanche Criterion of single-block encryption.

    For each input bit position i, ``trials`` random (key, block) pairs are
    encrypted with and without bit i flipped, and the output differences are
    accumulated into a (input bits x 128) flip-count matrix.
    """
    if input_type == "plaintext":
        num_input_bits = BLOCK_SIZE * 8
    elif input_type == "key":
        num_input_bits = key_size_bytes * 8
    else:
        raise ValueError(f"input_type must be 'plaintext' or 'key', got '{input_type}'")

    num_output_bits = BLOCK_SIZE * 8
    rng = random.Random(seed)
    flips = np.zeros((num_input_bits, num_output_bits), dtype=np.int64)

    for bit_i in range(num_input_bits):
        if progress_callback:
            progress_callback(bit_i, num_input_bits)

        for _ in range(trials):
            key = _rand_bytes(rng, key_size_bytes)
            pt = _rand_bytes(rng, BLOCK_SIZE)
            schedule = build_schedule(key)
            ct1 = encrypt_block(schedule, pt)

            if input_type == "plaintext":
                ct2 = encrypt_block(schedule, _flip_bit(pt, bit_i))
            else:
                ct2 = encrypt_block(build_schedule(_flip_bit(key, bit_i)), pt)

            flips[bit_i] += _bits(xor_bytes(ct1, ct2))

    probs = flips / float(trials)
    per_bit = probs.mean(axis=1)

    return SACResult(
        input_type=input_type,
        key_size_bytes=key_size_bytes,
        num_trials=trials,
        num_input_bits=num_input_bits,
        num_output_bits=num_output_bits,
        per_input_bit_mean=[round(float(p), 6) for p in per_bit],
        global_mean=round(float(per_bit.mean()), 6),
        global_std=round(float(per_bit.std()), 6),
        min_bit_prob=round(float(probs.min()), 6),
        max_bit_prob=round(float(probs.max()), 6),
        sac_deviation=round(float(np.abs(per_bit - 0.5).mean()), 6),
    )


@dataclass
class PropagationResult:
    """CBC error-propagation check over random trials."""
    key_size_bytes: int
    trials: int
    exact_next_block_flips: int     # trials where P[i+1] differed in exactly the flipped bit
    corrupted_current_blocks: int   # trials where P[i] differed at all
    untouched_other_blocks: int     # trials where every other block was unchanged
    mean_current_block_distance: float = 0.0

    @property
    def holds(self) -> bool:
        return (
            self.exact_next_block_flips == self.trials
            and self.corrupted_current_blocks == self.trials
            and self.untouched_other_blocks == self.trials
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["holds"] = self.holds
        return d

    def summary(self) -> str:
        status = "PASS" if self.holds else "FAIL"
        return (
            f"[{status}] CBC propagation ({self.key_size_bytes * 8}-bit key): "
            f"{self.exact_next_block_flips}/{self.trials} exact next-block flips, "
            f"mean current-block distance={self.mean_current_block_distance:.2f} bits"
        )


def cbc_error_propagation(
    *,
    key_size_bytes: int = 16,
    num_blocks: int = 4,
    trials: int = 32,
    seed: int = 1337,
) -> PropagationResult:
    """Flip one random ciphertext bit in a random non-final block and compare decryptions."""
    if num_blocks < 2:
        raise ValueError("num_blocks must be at least 2")

    rng = random.Random(seed)
    exact = corrupted = untouched = 0
    distances: List[int] = []

    for _ in range(trials):
        key = _rand_bytes(rng, key_size_bytes)
        iv = _rand_bytes(rng, BLOCK_SIZE)
        pt = _rand_bytes(rng, BLOCK_SIZE * num_blocks)
        schedule = build_schedule(key)
        ct = modes.encrypt_cbc(schedule, pt, iv)

        blk = rng.randrange(0, num_blocks - 1)
        bit = rng.randrange(0, BLOCK_SIZE * 8)
        tampered = _flip_bit(ct, blk * BLOCK_SIZE * 8 + bit)
        out = modes.decrypt_cbc(schedule, tampered, iv)

        diff = xor_bytes(pt, out)
        blocks = [diff[i * BLOCK_SIZE:(i + 1) * BLOCK_SIZE] for i in range(num_blocks)]

        if blocks[blk + 1] == _flip_bit(bytes(BLOCK_SIZE), bit):
            exact += 1
        if any(blocks[blk]):
            corrupted += 1
        others = [b for i, b in enumerate(blocks) if i not in (blk, blk + 1)]
        if not any(any(b) for b in others):
            untouched += 1
        distances.append(int(_bits(blocks[blk]).sum()))

    return PropagationResult(
        key_size_bytes=key_size_bytes,
        trials=trials,
        exact_next_block_flips=exact,
        corrupted_current_blocks=corrupted,
        untouched_other_blocks=untouched,
        mean_current_block_distance=round(float(np.mean(distances)), 4) if distances else 0.0,
    )
