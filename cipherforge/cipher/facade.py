"""Twofish plug-in facade.

Normalizes options and encodings, pads plaintext with zero bytes, runs the
chaining driver and formats the output. The IV used for CBC is never
embedded in the ciphertext: callers must keep the one reported in
``EncryptResult.iv``.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple, Union

from cipherforge.config import Settings, load_settings
from cipherforge.encoding import Encoding, from_bytes, to_bytes

from . import modes
from .base import Transform
from .errors import ConfigurationError
from .modes import Direction, Mode
from .spec import TwofishOptions, canonical_options, parse_options
from .tables import BLOCK_SIZE
from .validator import validate_material, validate_options

logger = logging.getLogger(__name__)


def pad_zero(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Right-pad with zero bytes to a multiple of ``block_size``."""
    rem = len(data) % block_size
    if rem == 0:
        return bytes(data)
    return bytes(data) + b"\x00" * (block_size - rem)


def trim_trailing_zeros(data: bytes) -> bytes:
    """Strip the trailing run of zero bytes. Interior zeros are kept."""
    return bytes(data).rstrip(b"\x00")


@dataclass(frozen=True)
class EncryptResult:
    ciphertext: Union[str, bytes]
    mode: Mode
    output_encoding: Encoding
    iv: Optional[bytes] = None
    iv_generated: bool = False

    @property
    def iv_hex(self) -> Optional[str]:
        return self.iv.hex() if self.iv is not None else None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["mode"] = self.mode.value
        d["output_encoding"] = self.output_encoding.value
        d["iv"] = self.iv_hex
        return d


@dataclass(frozen=True)
class DecryptResult:
    plaintext: Union[str, bytes]
    mode: Mode
    output_encoding: Encoding
    iv: Optional[bytes] = None
    trimmed: bool = True

    @property
    def iv_hex(self) -> Optional[str]:
        return self.iv.hex() if self.iv is not None else None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["mode"] = self.mode.value
        d["output_encoding"] = self.output_encoding.value
        d["iv"] = self.iv_hex
        return d


def _empty(encoding: Encoding) -> Union[str, bytes]:
    return b"" if encoding is Encoding.BYTES else ""


class TwofishCipher(Transform):
    """Twofish (128-bit block, ECB/CBC, zero padding) behind the plug-in contract."""

    name = "twofish"
    version = "1.0.0"
    category = "Symmetric"
    tags = ("cipher", "twofish", "block-cipher", "cbc", "ecb")
    description = "Twofish block cipher (ECB/CBC, 128-bit block, zero padding)"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or load_settings()
        self._defaults: Dict[str, Any] = self._initial_defaults()

    def _initial_defaults(self) -> Dict[str, Any]:
        return {
            "mode": self._settings.default_mode,
            "trim_trailing_zeros_on_decrypt": self._settings.trim_trailing_zeros_on_decrypt,
        }

    # ------------------------------------------------------------------
    # Plug-in contract
    # ------------------------------------------------------------------

    def init(self, **options: Any) -> Dict[str, Any]:
        """Merge ``options`` into the instance defaults after validating them."""
        opts = canonical_options(options)
        merged = parse_options({**self._defaults, **opts})
        self._defaults.update(opts)
        logger.debug("Twofish defaults updated: %s", sorted(opts))
        return {"ok": True, "mode": merged.mode.value, "has_key": bool(merged.key)}

    def dispose(self) -> None:
        self._defaults = self._initial_defaults()

    def encrypt(self, data: Any, **options: Any) -> EncryptResult:
        opts = self._resolve(Direction.ENCRYPT, options)
        in_enc = opts.input_encoding or Encoding.parse(self._settings.encrypt_input_encoding)
        out_enc = opts.output_encoding or Encoding.parse(self._settings.encrypt_output_encoding)

        key, iv, generated = self._material(opts, Direction.ENCRYPT)
        plaintext = to_bytes(data, in_enc)

        if not plaintext:
            return EncryptResult(ciphertext=_empty(out_enc), mode=opts.mode, output_encoding=out_enc,
                                 iv=iv, iv_generated=generated)

        padded = pad_zero(plaintext)
        logger.debug("Encrypting %d bytes (%d padded) in %s", len(plaintext), len(padded), opts.mode.value)
        ciphertext = modes.run(opts.mode, Direction.ENCRYPT, key, iv, padded)
        return EncryptResult(
            ciphertext=from_bytes(ciphertext, out_enc),
            mode=opts.mode,
            output_encoding=out_enc,
            iv=iv,
            iv_generated=generated,
        )

    def decrypt(self, data: Any, **options: Any) -> Union[str, bytes, DecryptResult]:
        opts = self._resolve(Direction.DECRYPT, options)
        in_enc = opts.input_encoding or Encoding.parse(self._settings.decrypt_input_encoding)
        out_enc = opts.output_encoding or Encoding.parse(self._settings.decrypt_output_encoding)
        trim = opts.trim_trailing_zeros_on_decrypt

        key, iv, _ = self._material(opts, Direction.DECRYPT)
        ciphertext = to_bytes(data, in_enc)

        if not ciphertext:
            plain: Union[str, bytes] = _empty(out_enc)
        else:
            logger.debug("Decrypting %d bytes in %s", len(ciphertext), opts.mode.value)
            raw = modes.run(opts.mode, Direction.DECRYPT, key, iv, ciphertext)
            plain = from_bytes(trim_trailing_zeros(raw) if trim else raw, out_enc)

        if opts.return_meta:
            return DecryptResult(plaintext=plain, mode=opts.mode, output_encoding=out_enc, iv=iv, trimmed=trim)
        return plain

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, direction: Direction, options: Dict[str, Any]) -> TwofishOptions:
        opts = parse_options({**self._defaults, **canonical_options(options)})
        ok, errs = validate_options(opts, direction)
        if not ok:
            raise ConfigurationError("Twofish: " + "; ".join(errs))
        return opts

    def _material(self, opts: TwofishOptions, direction: Direction) -> Tuple[bytes, Optional[bytes], bool]:
        key = to_bytes(opts.key, opts.key_encoding)
        iv: Optional[bytes] = None
        generated = False
        if opts.mode is Mode.CBC:
            if opts.iv is not None:
                iv = to_bytes(opts.iv, opts.iv_encoding)
            elif direction is Direction.ENCRYPT:
                iv = secrets.token_bytes(BLOCK_SIZE)
                generated = True
                logger.info("No IV supplied for CBC encryption; generated a random %d-byte IV", BLOCK_SIZE)

        ok, errs = validate_material(key, iv, opts.mode)
        if not ok:
            raise ConfigurationError("Twofish: " + "; ".join(errs))
        return key, iv, generated
