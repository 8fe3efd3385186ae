"""
idl_layout.errors
-----------------

Error system for schema compilation, size estimation and (de)serialization.

Design goals
------------
- One root `IdlError` with a machine-friendly `code` and optional `data`.
- One concrete subclass per failure kind so callers can catch precisely.
- Safe JSON representation (`to_dict`) suitable for logs.
- Every error here is permanent: schema and programmer errors never succeed
  on retry with the same inputs.

This module uses only stdlib to avoid import cycles with the rest of the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

__all__ = [
    "IdlErrorCode",
    "IdlError",
    "TypeNotFound",
    "UnsupportedField",
    "UnsupportedType",
    "BufferTooShort",
    "RecursiveType",
    "ValidationError",
    "SchemaValidationError",
    "UnknownDiscriminator",
    "DiscriminatorMismatch",
    "ConfigError",
]


class IdlErrorCode(str, Enum):
    # Resolution / compilation
    TYPE_NOT_FOUND = "IDL/TYPE_NOT_FOUND"
    UNSUPPORTED_FIELD = "IDL/UNSUPPORTED_FIELD"
    UNSUPPORTED_TYPE = "IDL/UNSUPPORTED_TYPE"
    RECURSIVE_TYPE = "IDL/RECURSIVE_TYPE"

    # Encoding / decoding
    BUFFER_TOO_SHORT = "IDL/BUFFER_TOO_SHORT"
    VALIDATION = "IDL/VALIDATION"
    DISCRIMINATOR = "IDL/DISCRIMINATOR"

    # Schema document / environment
    SCHEMA_VALIDATION = "IDL/SCHEMA_VALIDATION"
    CONFIG = "IDL/CONFIG"


@dataclass(eq=False)
class IdlError(Exception):
    """
    Root error for idl_layout.

    Attributes
    ----------
    code: IdlErrorCode
        Machine-stable error kind.
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data (type names, offsets, sizes). JSON-serializable.
    """

    code: IdlErrorCode
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(f"{self.code.value}: {self.message}")

    @property
    def kind(self) -> IdlErrorCode:
        return self.code

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs."""
        return {
            "code": self.code.value,
            "message": self.message,
            "data": _jsonmap(self.data),
        }

    def __str__(self) -> str:
        parts = [f"{self.code.value}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class TypeNotFound(IdlError):
    """A Defined reference matched zero, or more than one, type definition."""

    def __init__(self, name: str, matches: int = 0, **data: Any) -> None:
        reason = "ambiguous" if matches > 1 else "not found"
        super().__init__(
            code=IdlErrorCode.TYPE_NOT_FOUND,
            message=f"type {reason}: {name}",
            data=_jsonmap({"name": name, "matches": matches, **data}),
        )
        self.name = name
        self.matches = matches


class UnsupportedField(IdlError):
    def __init__(self, message: str = "tuple enum variants not yet implemented", **data: Any) -> None:
        super().__init__(
            code=IdlErrorCode.UNSUPPORTED_FIELD, message=message, data=_jsonmap(data)
        )


class UnsupportedType(IdlError):
    def __init__(self, tag: Any, **data: Any) -> None:
        super().__init__(
            code=IdlErrorCode.UNSUPPORTED_TYPE,
            message=f"not yet implemented: {tag!r}",
            data=_jsonmap({"tag": repr(tag), **data}),
        )


class BufferTooShort(IdlError):
    def __init__(self, needed: int, available: int, offset: int = 0) -> None:
        super().__init__(
            code=IdlErrorCode.BUFFER_TOO_SHORT,
            message=f"buffer too short: need {needed} byte(s) at offset {offset}, have {available}",
            data={"needed": needed, "available": available, "offset": offset},
        )
        self.needed = needed
        self.available = available
        self.offset = offset


class RecursiveType(IdlError):
    def __init__(self, path: tuple[str, ...], message: Optional[str] = None) -> None:
        super().__init__(
            code=IdlErrorCode.RECURSIVE_TYPE,
            message=message or "self-referential type: " + " -> ".join(path),
            data={"path": list(path)},
        )
        self.path = path


class ValidationError(IdlError):
    """A Python value does not fit the layout it is being encoded with."""

    def __init__(self, message: str = "invalid value", **data: Any) -> None:
        super().__init__(
            code=IdlErrorCode.VALIDATION, message=message, data=_jsonmap(data)
        )


class SchemaValidationError(IdlError):
    def __init__(self, message: str = "schema validation error", **data: Any) -> None:
        super().__init__(
            code=IdlErrorCode.SCHEMA_VALIDATION, message=message, data=_jsonmap(data)
        )


class UnknownDiscriminator(IdlError):
    def __init__(self, discriminator: bytes, namespace: str = "") -> None:
        super().__init__(
            code=IdlErrorCode.DISCRIMINATOR,
            message=f"unknown discriminator {discriminator.hex()}",
            data={"discriminator": discriminator.hex(), "namespace": namespace},
        )


class DiscriminatorMismatch(IdlError):
    def __init__(self, name: str, expected: bytes, got: bytes) -> None:
        super().__init__(
            code=IdlErrorCode.DISCRIMINATOR,
            message=f"discriminator mismatch for {name}",
            data={"name": name, "expected": expected.hex(), "got": got.hex()},
        )


class ConfigError(IdlError):
    def __init__(self, message: str = "invalid configuration", **data: Any) -> None:
        super().__init__(code=IdlErrorCode.CONFIG, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest; hex-encode bytes.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).hex()
    if isinstance(v, tuple):
        return [_coerce_json(x) for x in v]
    return str(v)


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"
