"""
Leaf layouts.

Wire forms
----------
- bool:         1 byte: 0x00 (false) or 0x01 (true)
- uN / iN:      N/8 bytes, little-endian, two's complement for signed
- bytes:        u32 LE length || raw bytes
- string:       u32 LE length || UTF-8 bytes
- publicKey:    raw 32 bytes, no prefix
"""

from __future__ import annotations

from typing import Any, Tuple

from ..errors import ValidationError
from .base import BytesLike, Layout, read_exact

__all__ = [
    "IntLayout",
    "BoolLayout",
    "BytesLayout",
    "StringLayout",
    "PublicKeyLayout",
    "u8",
    "i8",
    "u16",
    "i16",
    "u32",
    "i32",
    "u64",
    "i64",
    "u128",
    "i128",
    "PUBLIC_KEY_LENGTH",
    "coerce_bytes",
]

PUBLIC_KEY_LENGTH = 32


def coerce_bytes(value: Any, *, fixed_len: int | None = None) -> bytes:
    """Accept bytes, bytearray, memoryview or 0x-hex; enforce an optional exact length."""
    if isinstance(value, bytes):
        b = value
    elif isinstance(value, (bytearray, memoryview)):
        b = bytes(value)
    elif isinstance(value, str) and value.startswith("0x"):
        try:
            b = bytes.fromhex(value[2:])
        except ValueError as e:
            raise ValidationError(f"invalid hex: {e}") from e
    else:
        raise ValidationError(
            "bytes must be bytes, bytearray, memoryview or 0x-hex string",
            got=type(value).__name__,
        )
    if fixed_len is not None and len(b) != fixed_len:
        raise ValidationError(f"bytes length must be exactly {fixed_len}, got {len(b)}")
    return b


class IntLayout(Layout):
    def __init__(self, width: int, signed: bool) -> None:
        self.width = width
        self.signed = signed
        self.span = width
        bits = width * 8
        self.min_value = -(1 << (bits - 1)) if signed else 0
        self.max_value = (1 << (bits - 1)) - 1 if signed else (1 << bits) - 1

    @property
    def name(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.width * 8}"

    def encode_to(self, value: Any, out: bytearray) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(f"{self.name} must be a Python int", got=type(value).__name__)
        if value < self.min_value or value > self.max_value:
            raise ValidationError(
                f"{self.name} out of range [{self.min_value}, {self.max_value}]", value=str(value)
            )
        out += value.to_bytes(self.width, "little", signed=self.signed)

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[int, int]:
        raw, j = read_exact(buf, offset, self.width)
        return int.from_bytes(raw, "little", signed=self.signed), j

    def __repr__(self) -> str:
        return f"IntLayout({self.name})"


u8 = IntLayout(1, signed=False)
i8 = IntLayout(1, signed=True)
u16 = IntLayout(2, signed=False)
i16 = IntLayout(2, signed=True)
u32 = IntLayout(4, signed=False)
i32 = IntLayout(4, signed=True)
u64 = IntLayout(8, signed=False)
i64 = IntLayout(8, signed=True)
u128 = IntLayout(16, signed=False)
i128 = IntLayout(16, signed=True)


class BoolLayout(Layout):
    span = 1

    def encode_to(self, value: Any, out: bytearray) -> None:
        if isinstance(value, bool):
            out.append(1 if value else 0)
        elif isinstance(value, int) and value in (0, 1):
            out.append(int(value))
        else:
            raise ValidationError("bool must be True/False", got=repr(value))

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[bool, int]:
        raw, j = read_exact(buf, offset, 1)
        if raw[0] == 0x00:
            return False, j
        if raw[0] == 0x01:
            return True, j
        raise ValidationError("invalid boolean value", byte=raw[0], offset=offset)


class BytesLayout(Layout):
    """u32 length-prefixed opaque bytes."""

    def encode_to(self, value: Any, out: bytearray) -> None:
        b = coerce_bytes(value)
        u32.encode_to(len(b), out)
        out += b

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[bytes, int]:
        length, i = u32.decode_from(buf, offset)
        return read_exact(buf, i, length)


class StringLayout(Layout):
    """u32 length-prefixed UTF-8."""

    def encode_to(self, value: Any, out: bytearray) -> None:
        if not isinstance(value, str):
            raise ValidationError("string must be a str", got=type(value).__name__)
        b = value.encode("utf-8")
        u32.encode_to(len(b), out)
        out += b

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[str, int]:
        length, i = u32.decode_from(buf, offset)
        raw, j = read_exact(buf, i, length)
        try:
            return raw.decode("utf-8"), j
        except UnicodeDecodeError as e:
            raise ValidationError("string is not valid UTF-8", offset=i) from e


class PublicKeyLayout(Layout):
    """Fixed 32-byte identifier."""

    span = PUBLIC_KEY_LENGTH

    def encode_to(self, value: Any, out: bytearray) -> None:
        out += coerce_bytes(value, fixed_len=PUBLIC_KEY_LENGTH)

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[bytes, int]:
        return read_exact(buf, offset, PUBLIC_KEY_LENGTH)
