"""
Composable binary layouts.

A `Layout` encodes one Python value to bytes and decodes it back. Leaf
layouts (integers, bool, blobs) and composite layouts (struct, enum, vec,
option, array) share this interface, so any layout can be nested inside any
composite without special-casing.

Decoding is offset based, mirroring the ABI decoder: `decode_from(buf, offset)`
returns `(value, new_offset)`. `decode(buf)` decodes from offset 0 and
ignores trailing bytes (account storage is usually larger than the data).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from ..errors import BufferTooShort, ValidationError

__all__ = ["Layout", "BytesLike", "read_exact"]

BytesLike = bytes | bytearray | memoryview

_MISSING = object()


def read_exact(buf: BytesLike, offset: int, n: int) -> Tuple[bytes, int]:
    """Return (buf[offset:offset+n], offset+n) or raise BufferTooShort."""
    j = offset + n
    if offset < 0 or j > len(buf):
        raise BufferTooShort(needed=n, available=max(len(buf) - offset, 0), offset=offset)
    return bytes(buf[offset:j]), j


class Layout(ABC):
    #: Fixed encoded width in bytes, or None when it depends on the value.
    span: Optional[int] = None

    @abstractmethod
    def encode_to(self, value: Any, out: bytearray) -> None:
        """Append the encoding of `value` to `out`."""

    @abstractmethod
    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[Any, int]:
        """Decode one value at buf[offset:]; returns (value, new_offset)."""

    def encode(self, value: Any) -> bytes:
        out = bytearray()
        self.encode_to(value, out)
        return bytes(out)

    def decode(self, buf: BytesLike) -> Any:
        value, _ = self.decode_from(buf, 0)
        return value

    def encode_into(self, value: Any, buf: bytearray, offset: int = 0) -> int:
        """
        Write the encoding of `value` into a caller-provided buffer at `offset`.
        Returns the number of bytes written. The buffer is left untouched if it
        is too small.
        """
        data = self.encode(value)
        available = len(buf) - offset
        if offset < 0 or available < len(data):
            raise BufferTooShort(needed=len(data), available=max(available, 0), offset=offset)
        buf[offset : offset + len(data)] = data
        return len(data)

    def size_of(self, value: Any = _MISSING) -> int:
        """Encoded size: `span` for fixed layouts, else the size of encoding `value`."""
        if self.span is not None:
            return self.span
        if value is _MISSING:
            raise ValidationError(f"{self!r} is variable-length; size_of needs a value")
        return len(self.encode(value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
