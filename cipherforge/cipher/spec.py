from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cipherforge.encoding import Encoding, is_bytes_like

from .errors import ConfigurationError
from .modes import Mode


KeyInput = Union[str, bytes]


class TwofishOptions(BaseModel):
    """Options recognized by the Twofish plug-in.

    Values may be given by field name (``key_encoding``) or by the camelCase
    alias used by the plug-in registry (``keyEncoding``). Unknown option names
    are rejected.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    key: Optional[Any] = Field(default=None, description="utf8 / hex / base64 text or raw bytes")
    key_encoding: Encoding = Field(default=Encoding.UTF8, alias="keyEncoding")
    mode: Mode = Field(default=Mode.CBC)
    iv: Optional[Any] = Field(default=None, description="16 bytes; CBC only")
    iv_encoding: Encoding = Field(default=Encoding.HEX, alias="ivEncoding")
    input_encoding: Optional[Encoding] = Field(default=None, alias="inputEncoding")
    output_encoding: Optional[Encoding] = Field(default=None, alias="outputEncoding")
    trim_trailing_zeros_on_decrypt: bool = Field(default=True, alias="trimTrailingZerosOnDecrypt")
    return_meta: bool = Field(default=False, alias="returnMeta")

    @field_validator("key", "iv", mode="before")
    @classmethod
    def _key_material(cls, v: Any) -> Optional[KeyInput]:
        if v is None:
            return None
        if is_bytes_like(v):
            return bytes(v)
        if isinstance(v, str):
            return v
        raise ValueError(f"expected str or bytes, got {type(v).__name__}")

    @field_validator("mode", mode="before")
    @classmethod
    def _upper_mode(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("key_encoding", "iv_encoding", "input_encoding", "output_encoding", mode="before")
    @classmethod
    def _encoding(cls, v: Any) -> Any:
        if v is None or isinstance(v, Encoding):
            return v
        return Encoding.parse(v)

    @field_validator("key_encoding", "iv_encoding", "output_encoding")
    @classmethod
    def _no_auto(cls, v: Optional[Encoding]) -> Optional[Encoding]:
        if v is Encoding.AUTO:
            raise ValueError("'auto' is only accepted as the decrypt input encoding")
        return v

    @field_validator("iv_encoding")
    @classmethod
    def _iv_not_text(cls, v: Encoding) -> Encoding:
        if v is Encoding.UTF8:
            raise ValueError("IV encoding must be hex, base64 or bytes")
        return v


_FIELD_NAMES: Dict[str, str] = {}
for _name, _field in TwofishOptions.model_fields.items():
    _FIELD_NAMES[_name] = _name
    if _field.alias:
        _FIELD_NAMES[_field.alias] = _name


def canonical_options(options: Dict[str, Any]) -> Dict[str, Any]:
    """Map aliases to field names; reject unknown option names."""
    out: Dict[str, Any] = {}
    for k, v in options.items():
        if k not in _FIELD_NAMES:
            raise ConfigurationError(f"Unknown option: {k}")
        out[_FIELD_NAMES[k]] = v
    return out


def parse_options(options: Dict[str, Any]) -> TwofishOptions:
    """Validate a canonical option dict, converting pydantic errors to ``ConfigurationError``."""
    try:
        return TwofishOptions.model_validate(canonical_options(options))
    except ValidationError as exc:
        msgs = [f"{'.'.join(str(p) for p in e['loc']) or 'options'}: {e['msg']}" for e in exc.errors()]
        raise ConfigurationError("Invalid Twofish options: " + "; ".join(msgs)) from exc
