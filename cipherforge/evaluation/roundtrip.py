"""Algebraic unit testing: roundtrip verification P = D(E(P, K, IV), K, IV).

Generates randomized test vectors for every key length and chaining mode and
verifies that decryption exactly inverts encryption for every vector.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional, Sequence

from cipherforge.cipher import modes
from cipherforge.cipher.key_schedule import build_schedule
from cipherforge.cipher.modes import Direction, Mode
from cipherforge.cipher.tables import BLOCK_SIZE


DEFAULT_KEY_SIZES = (8, 16, 24, 32)


@dataclass
class RoundtripFailure:
    """Details of a single failed roundtrip test vector."""
    vector_index: int
    plaintext_hex: str
    key_hex: str
    iv_hex: str
    ciphertext_hex: str
    decrypted_hex: str       # What decrypt returned (should equal plaintext)
    error: Optional[str]     # Exception message if decrypt/encrypt threw


@dataclass
class RoundtripResult:
    """Aggregate result of roundtrip testing for one (mode, key size) pair."""
    mode: str
    key_size_bytes: int
    total_vectors: int
    passed: int
    failed: int
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def success_rate(self) -> float:
        return self.passed / self.total_vectors if self.total_vectors > 0 else 0.0

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        return (
            f"[{status}] Twofish-{self.mode} ({self.key_size_bytes * 8}-bit key): "
            f"{self.passed}/{self.total_vectors} vectors passed "
            f"({self.elapsed_seconds:.2f}s)"
        )


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def run_roundtrip_tests(
    mode: Mode,
    key_size_bytes: int,
    *,
    num_vectors: int = 100,
    max_blocks: int = 4,
    seed: int = 1337,
    max_failures_recorded: int = 10,
) -> RoundtripResult:
    """Run roundtrip verification for one mode and key length.

    Args:
        mode: ECB or CBC.
        key_size_bytes: Key length to draw random keys at.
        num_vectors: Number of random (key, iv, plaintext) triples to test.
        max_blocks: Plaintexts are 1..max_blocks blocks long.
        seed: Random seed for deterministic reproducibility.
        max_failures_recorded: Maximum number of failure details to keep.

    Returns:
        RoundtripResult with pass/fail counts and failure details.
    """
    mode = Mode.parse(mode)
    rng = random.Random(seed)
    passed = 0
    failed = 0
    failures: List[RoundtripFailure] = []

    start = time.perf_counter()

    for i in range(num_vectors):
        key = _rand_bytes(rng, key_size_bytes)
        iv = _rand_bytes(rng, BLOCK_SIZE) if mode is Mode.CBC else None
        pt = _rand_bytes(rng, BLOCK_SIZE * rng.randint(1, max_blocks))

        ct = b""
        try:
            schedule = build_schedule(key)
            ct = modes.run(mode, Direction.ENCRYPT, schedule, iv, pt)
            pt2 = modes.run(mode, Direction.DECRYPT, schedule, iv, ct)

            if pt == pt2:
                passed += 1
            else:
                failed += 1
                if len(failures) < max_failures_recorded:
                    failures.append(RoundtripFailure(
                        vector_index=i,
                        plaintext_hex=pt.hex(),
                        key_hex=key.hex(),
                        iv_hex=iv.hex() if iv else "",
                        ciphertext_hex=ct.hex(),
                        decrypted_hex=pt2.hex(),
                        error=None,
                    ))
        except ValueError as exc:
            failed += 1
            if len(failures) < max_failures_recorded:
                failures.append(RoundtripFailure(
                    vector_index=i,
                    plaintext_hex=pt.hex(),
                    key_hex=key.hex(),
                    iv_hex=iv.hex() if iv else "",
                    ciphertext_hex=ct.hex() or "<error>",
                    decrypted_hex="<error>",
                    error=str(exc),
                ))

    elapsed = time.perf_counter() - start

    return RoundtripResult(
        mode=mode.value,
        key_size_bytes=key_size_bytes,
        total_vectors=num_vectors,
        passed=passed,
        failed=failed,
        failures=failures,
        elapsed_seconds=round(elapsed, 4),
        seed=seed,
    )


def run_all_configurations(
    *,
    key_sizes: Sequence[int] = DEFAULT_KEY_SIZES,
    num_vectors: int = 100,
    seed: int = 1337,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> List[RoundtripResult]:
    """Run roundtrip tests for every (mode, key size) combination.

    Args:
        key_sizes: Key lengths in bytes.
        num_vectors: Number of test vectors per combination.
        seed: Random seed for reproducibility.
        progress_callback: Optional callback(label, current_index, total).

    Returns:
        List of RoundtripResult ordered by mode then key size.
    """
    combos = [(m, k) for m in Mode for k in key_sizes]
    results: List[RoundtripResult] = []

    for idx, (mode, key_size) in enumerate(combos):
        if progress_callback:
            progress_callback(f"{mode.value}/{key_size * 8}", idx, len(combos))
        results.append(run_roundtrip_tests(mode, key_size, num_vectors=num_vectors, seed=seed + idx))

    return results
