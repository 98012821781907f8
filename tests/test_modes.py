import random

import pytest

from cipherforge.cipher import modes
from cipherforge.cipher.block import encrypt_block
from cipherforge.cipher.errors import ConfigurationError, DataShapeError
from cipherforge.cipher.key_schedule import build_schedule
from cipherforge.cipher.modes import Direction, Mode, xor_bytes


ZERO16 = b"\x00" * 16
E_ZERO = bytes.fromhex("9f589f5cf6122c32b6bfec2f2ae8c35a")
E_E_ZERO = bytes.fromhex("d491db16e7b1c39e86cb086b789f5419")


def _rand(rng, n):
    return bytes(rng.randrange(256) for _ in range(n))


# ---------------------------------------------------------------------------
# Golden vectors
# ---------------------------------------------------------------------------

def test_ecb_golden_zero_vector():
    assert modes.encrypt_ecb(ZERO16, ZERO16) == E_ZERO
    assert modes.decrypt_ecb(ZERO16, E_ZERO) == ZERO16


def test_cbc_golden_zero_vector():
    # With a zero IV the first CBC block equals ECB; the second is E(C0).
    ct = modes.encrypt_cbc(ZERO16, ZERO16 * 2, ZERO16)
    assert ct == E_ZERO + E_E_ZERO
    assert modes.decrypt_cbc(ZERO16, ct, ZERO16) == ZERO16 * 2


# ---------------------------------------------------------------------------
# Roundtrip / determinism
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("mode", [Mode.ECB, Mode.CBC])
@pytest.mark.parametrize("key_len", [8, 16, 24, 32])
def test_roundtrip(mode, key_len):
    rng = random.Random(key_len)
    for _ in range(5):
        key = _rand(rng, key_len)
        iv = _rand(rng, 16)
        pt = _rand(rng, 16 * rng.randint(1, 5))
        ct = modes.run(mode, Direction.ENCRYPT, key, iv, pt)
        assert len(ct) == len(pt)
        assert modes.run(mode, Direction.DECRYPT, key, iv, ct) == pt


def test_run_accepts_string_tags_and_schedule():
    key = b"schedule-or-key!"
    pt = bytes(range(48))
    iv = bytes(range(16))
    by_key = modes.run("cbc", "encrypt", key, iv, pt)
    by_schedule = modes.run(Mode.CBC, Direction.ENCRYPT, build_schedule(key), iv, pt)
    assert by_key == by_schedule
    assert modes.run("CBC", "encrypt", key, iv, pt) == by_key


def test_determinism():
    key, iv, pt = b"k" * 16, b"i" * 16, b"p" * 64
    assert modes.encrypt_cbc(key, pt, iv) == modes.encrypt_cbc(key, pt, iv)
    assert modes.encrypt_ecb(key, pt) == modes.encrypt_ecb(key, pt)


def test_empty_buffer():
    assert modes.encrypt_ecb(b"k" * 16, b"") == b""
    assert modes.encrypt_cbc(b"k" * 16, b"", b"\x00" * 16) == b""


# ---------------------------------------------------------------------------
# Block independence
# ---------------------------------------------------------------------------

def test_ecb_repeats_identical_blocks():
    block = b"YELLOW SUBMARINE"
    ct = modes.encrypt_ecb(b"ecb-independence", block * 3)
    assert ct[0:16] == ct[16:32] == ct[32:48]


def test_cbc_hides_identical_blocks():
    block = b"YELLOW SUBMARINE"
    ct = modes.encrypt_cbc(b"ecb-independence", block * 3, b"\x01" * 16)
    assert ct[0:16] != ct[16:32]
    assert ct[16:32] != ct[32:48]


def test_cbc_first_block_is_ecb_of_plaintext_xor_iv():
    key, iv = b"first-block-key!", bytes(range(16, 32))
    pt = b"A" * 32
    ct = modes.encrypt_cbc(key, pt, iv)
    assert ct[:16] == encrypt_block(build_schedule(key), xor_bytes(pt[:16], iv))
    assert ct[16:] == encrypt_block(build_schedule(key), xor_bytes(pt[16:], ct[:16]))


# ---------------------------------------------------------------------------
# CBC error propagation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("block_i,bit", [(0, 0), (0, 77), (1, 127), (2, 64)])
def test_cbc_bit_flip_propagation(block_i, bit):
    rng = random.Random(block_i * 1000 + bit)
    key, iv = _rand(rng, 16), _rand(rng, 16)
    pt = _rand(rng, 16 * 4)
    ct = bytearray(modes.encrypt_cbc(key, pt, iv))

    ct[block_i * 16 + bit // 8] ^= 1 << (bit % 8)
    out = modes.decrypt_cbc(key, bytes(ct), iv)

    # Block i is garbled.
    assert out[block_i * 16:(block_i + 1) * 16] != pt[block_i * 16:(block_i + 1) * 16]
    # Block i + 1 differs in exactly the flipped bit.
    expected = bytearray(pt[(block_i + 1) * 16:(block_i + 2) * 16])
    expected[bit // 8] ^= 1 << (bit % 8)
    assert out[(block_i + 1) * 16:(block_i + 2) * 16] == bytes(expected)
    # Every other block is intact.
    for j in range(4):
        if j not in (block_i, block_i + 1):
            assert out[j * 16:(j + 1) * 16] == pt[j * 16:(j + 1) * 16]


def test_cbc_decrypt_wrong_iv_only_breaks_first_block():
    key = b"wrong-iv-test-k!"
    pt = bytes(range(64))
    ct = modes.encrypt_cbc(key, pt, b"\x00" * 16)
    out = modes.decrypt_cbc(key, ct, b"\x01" + b"\x00" * 15)
    assert out[0] == pt[0] ^ 1
    assert out[1:] == pt[1:]


# ---------------------------------------------------------------------------
# Failure modes
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("mode", [Mode.ECB, Mode.CBC])
@pytest.mark.parametrize("direction", [Direction.ENCRYPT, Direction.DECRYPT])
def test_unaligned_data_rejected(mode, direction):
    with pytest.raises(DataShapeError):
        modes.run(mode, direction, b"k" * 16, b"\x00" * 16, b"x" * 17)


@pytest.mark.parametrize("iv", [None, b"", b"\x00" * 15, b"\x00" * 17])
def test_bad_iv_rejected(iv):
    with pytest.raises(ConfigurationError):
        modes.encrypt_cbc(b"k" * 16, b"\x00" * 16, iv)
    with pytest.raises(ConfigurationError):
        modes.decrypt_cbc(b"k" * 16, b"\x00" * 16, iv)


def test_unknown_mode_and_direction_rejected():
    with pytest.raises(ConfigurationError):
        modes.run("CTR", "encrypt", b"k" * 16, None, b"")
    with pytest.raises(ConfigurationError):
        modes.run("ECB", "sideways", b"k" * 16, None, b"")


def test_xor_bytes_length_mismatch():
    with pytest.raises(DataShapeError):
        xor_bytes(b"ab", b"a")
