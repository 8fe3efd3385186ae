from __future__ import annotations

import pytest

from idl_layout.errors import BufferTooShort, ValidationError
from idl_layout.layout import (BoolLayout, BytesLayout, PublicKeyLayout,
                               StringLayout, coerce_bytes, i8, i16, i64, i128,
                               u8, u16, u32, u64, u128)

# ---------------------------------------------------------------------------
# Integers
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "layout,value,expected",
    [
        (u8, 0xAB, b"\xab"),
        (u16, 0x0102, b"\x02\x01"),
        (u32, 1, b"\x01\x00\x00\x00"),
        (u64, 2**64 - 1, b"\xff" * 8),
        (i8, -1, b"\xff"),
        (i16, -2, b"\xfe\xff"),
        (i64, -(2**63), b"\x00" * 7 + b"\x80"),
        (u128, 1, b"\x01" + b"\x00" * 15),
        (i128, -1, b"\xff" * 16),
    ],
)
def test_integers_are_little_endian(layout, value, expected) -> None:
    assert layout.encode(value) == expected
    assert layout.decode(expected) == value
    assert layout.span == len(expected)


@pytest.mark.parametrize(
    "layout,value",
    [(u8, 256), (u8, -1), (i8, 128), (i8, -129), (u64, 2**64), (i128, 2**127)],
)
def test_integer_out_of_range_rejected(layout, value) -> None:
    with pytest.raises(ValidationError):
        layout.encode(value)


@pytest.mark.parametrize("value", [True, 1.0, "1", None])
def test_integer_rejects_non_int(value) -> None:
    with pytest.raises(ValidationError):
        u32.encode(value)


def test_integer_truncated_buffer() -> None:
    with pytest.raises(BufferTooShort) as ei:
        u64.decode(b"\x00" * 7)
    assert ei.value.needed == 8
    assert ei.value.available == 7


def test_decode_from_returns_new_offset() -> None:
    buf = b"\xff" + u16.encode(513)
    value, offset = u16.decode_from(buf, 1)
    assert (value, offset) == (513, 3)


# ---------------------------------------------------------------------------
# Bool
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("val", [False, True])
def test_bool_canonical_bytes(val: bool) -> None:
    buf = BoolLayout().encode(val)
    assert buf in (b"\x00", b"\x01")
    assert BoolLayout().decode(buf) is val


def test_bool_rejects_invalid_byte_and_value() -> None:
    with pytest.raises(ValidationError):
        BoolLayout().decode(b"\x02")
    with pytest.raises(ValidationError):
        BoolLayout().encode(2)


# ---------------------------------------------------------------------------
# Bytes / string / public key
# ---------------------------------------------------------------------------


def test_bytes_length_prefixed() -> None:
    layout = BytesLayout()
    assert layout.encode(b"abc") == b"\x03\x00\x00\x00abc"
    assert layout.encode("0x0102") == b"\x02\x00\x00\x00\x01\x02"
    assert layout.decode(b"\x00\x00\x00\x00") == b""
    assert layout.span is None


def test_bytes_declared_length_exceeds_buffer() -> None:
    with pytest.raises(BufferTooShort):
        BytesLayout().decode(b"\x05\x00\x00\x00ab")


def test_string_utf8() -> None:
    layout = StringLayout()
    buf = layout.encode("héllo")
    assert buf[:4] == (6).to_bytes(4, "little")
    assert layout.decode(buf) == "héllo"


def test_string_invalid_utf8_rejected() -> None:
    with pytest.raises(ValidationError):
        StringLayout().decode(b"\x01\x00\x00\x00\xff")
    with pytest.raises(ValidationError):
        StringLayout().encode(b"bytes")


def test_public_key_fixed_width() -> None:
    key = bytes(range(32))
    layout = PublicKeyLayout()
    assert layout.encode(key) == key
    assert layout.decode(key + b"trailing") == key
    assert layout.span == 32
    with pytest.raises(ValidationError):
        layout.encode(b"\x00" * 31)


# ---------------------------------------------------------------------------
# Shared Layout helpers
# ---------------------------------------------------------------------------


def test_encode_into_writes_at_offset() -> None:
    buf = bytearray(6)
    written = u32.encode_into(7, buf, 2)
    assert written == 4
    assert bytes(buf) == b"\x00\x00\x07\x00\x00\x00"


def test_encode_into_too_small_leaves_buffer_untouched() -> None:
    buf = bytearray(b"\xaa" * 3)
    with pytest.raises(BufferTooShort):
        u32.encode_into(7, buf)
    assert buf == bytearray(b"\xaa" * 3)


def test_size_of() -> None:
    assert u64.size_of() == 8
    assert StringLayout().size_of("abc") == 7
    with pytest.raises(ValidationError):
        StringLayout().size_of()


def test_coerce_bytes_rejects_bad_input() -> None:
    with pytest.raises(ValidationError):
        coerce_bytes("0xzz")
    with pytest.raises(ValidationError):
        coerce_bytes(123)
    assert coerce_bytes(memoryview(b"ab")) == b"ab"
