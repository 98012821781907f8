from __future__ import annotations


class CipherError(ValueError):
    """Base class for errors raised before any cryptographic work begins."""


class ConfigurationError(CipherError):
    """Invalid or missing key, bad IV, unknown mode, encoding or option."""


class DataShapeError(CipherError):
    """Buffer or block length incompatible with the 16-byte block size."""
