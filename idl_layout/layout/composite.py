"""
Composite layouts built from child layouts.

- struct:   fields concatenated in declaration order, no tags or padding
- enum:     u8 variant index || variant struct (empty for unit variants)
- vec:      u32 LE count || items (a vec of zero-width items is always empty)
- option:   0x00 (None) | 0x01 || inner
- array:    exactly N items, no prefix

Python values: struct <-> dict, enum <-> {variant: {fields}}, vec/array <-> list,
option <-> None | value.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import ValidationError
from .base import BytesLike, Layout, read_exact
from .primitives import u8, u32

__all__ = [
    "StructLayout",
    "EnumLayout",
    "VecLayout",
    "OptionLayout",
    "ArrayLayout",
    "MAX_ENUM_VARIANTS",
]

MAX_ENUM_VARIANTS = 256


def _sum_spans(spans: Sequence[Optional[int]]) -> Optional[int]:
    if any(s is None for s in spans):
        return None
    return sum(spans)  # type: ignore[arg-type]


class StructLayout(Layout):
    def __init__(self, fields: Sequence[Tuple[str, Layout]] = ()) -> None:
        self.fields: Tuple[Tuple[str, Layout], ...] = tuple(fields)
        self.span = _sum_spans([layout.span for _, layout in self.fields])
        self._key_set = frozenset(k for k, _ in self.fields)

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.fields)

    def encode_to(self, value: Any, out: bytearray) -> None:
        if not isinstance(value, Mapping):
            raise ValidationError("struct value must be a mapping", got=type(value).__name__)
        extra = [k for k in value if k not in self._key_set]
        if extra:
            raise ValidationError(
                f"unexpected struct field(s) {extra!r}", fields=extra, expected=list(self.keys)
            )
        for key, layout in self.fields:
            if key not in value:
                raise ValidationError(f"missing struct field {key!r}", field=key)
            try:
                layout.encode_to(value[key], out)
            except ValidationError as e:
                data = {**e.data, "field": key}
                raise ValidationError(f"field {key!r}: {e.message}", **data) from e

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[Dict[str, Any], int]:
        out: Dict[str, Any] = {}
        i = offset
        for key, layout in self.fields:
            out[key], i = layout.decode_from(buf, i)
        return out, i

    def __repr__(self) -> str:
        return f"StructLayout({', '.join(f'{k}: {v!r}' for k, v in self.fields)})"


class EnumLayout(Layout):
    """
    Tagged union. The one-byte discriminant is the zero-based position of the
    variant in `variants`.
    """

    def __init__(self, variants: Sequence[Tuple[str, StructLayout]]) -> None:
        if len(variants) > MAX_ENUM_VARIANTS:
            raise ValidationError(
                f"enum has {len(variants)} variants; a one-byte discriminant allows {MAX_ENUM_VARIANTS}"
            )
        self.variants: Tuple[Tuple[str, StructLayout], ...] = tuple(variants)
        self._index = {name: i for i, (name, _) in enumerate(self.variants)}
        spans = {layout.span for _, layout in self.variants}
        # Fixed only when every variant has the same fixed width.
        self.span = 1 + spans.pop() if len(spans) == 1 and None not in spans else None

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise ValidationError(f"unknown enum variant {name!r}", variants=list(self._index))

    def encode_to(self, value: Any, out: bytearray) -> None:
        if isinstance(value, str):
            name, payload = value, {}
        elif isinstance(value, Mapping) and len(value) == 1:
            (name, payload), = value.items()
            if payload is None:
                payload = {}
        else:
            raise ValidationError(
                "enum value must be a variant name or a single-key mapping {variant: fields}"
            )
        idx = self.index_of(name)
        u8.encode_to(idx, out)
        self.variants[idx][1].encode_to(payload, out)

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[Dict[str, Any], int]:
        idx, i = u8.decode_from(buf, offset)
        if idx >= len(self.variants):
            raise ValidationError(
                "invalid enum discriminant", discriminant=idx, variants=len(self.variants)
            )
        name, layout = self.variants[idx]
        payload, j = layout.decode_from(buf, i)
        return {name: payload}, j

    def __repr__(self) -> str:
        return f"EnumLayout({', '.join(name for name, _ in self.variants)})"


class VecLayout(Layout):
    def __init__(self, item: Layout) -> None:
        self.item = item

    def encode_to(self, value: Any, out: bytearray) -> None:
        if isinstance(value, (str, Mapping)) or not isinstance(value, Sequence):
            raise ValidationError("vec value must be a sequence", got=type(value).__name__)
        if value and self.item.span == 0:
            raise ValidationError("vec of zero-width items must be empty", count=len(value))
        u32.encode_to(len(value), out)
        for v in value:
            self.item.encode_to(v, out)

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[List[Any], int]:
        count, i = u32.decode_from(buf, offset)
        if self.item.span == 0 and count:
            # Zero-width items consume no input, so the count is unbounded by the buffer.
            raise ValidationError("vec of zero-width items must be empty", count=count, offset=offset)
        if self.item.span:
            # Fail fast on absurd counts instead of decoding item by item.
            read_exact(buf, i, count * self.item.span)
        items: List[Any] = []
        for _ in range(count):
            v, i = self.item.decode_from(buf, i)
            items.append(v)
        return items, i

    def __repr__(self) -> str:
        return f"VecLayout({self.item!r})"


class OptionLayout(Layout):
    def __init__(self, inner: Layout) -> None:
        self.inner = inner

    def encode_to(self, value: Any, out: bytearray) -> None:
        if value is None:
            out.append(0)
            return
        out.append(1)
        self.inner.encode_to(value, out)

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[Any, int]:
        flag, i = u8.decode_from(buf, offset)
        if flag == 0:
            return None, i
        if flag == 1:
            return self.inner.decode_from(buf, i)
        raise ValidationError("invalid option flag", flag=flag, offset=offset)

    def __repr__(self) -> str:
        return f"OptionLayout({self.inner!r})"


class ArrayLayout(Layout):
    def __init__(self, item: Layout, length: int) -> None:
        self.item = item
        self.length = length
        self.span = None if item.span is None else item.span * length

    def encode_to(self, value: Any, out: bytearray) -> None:
        if isinstance(value, (str, Mapping)) or not isinstance(value, Sequence):
            raise ValidationError("array value must be a sequence", got=type(value).__name__)
        if len(value) != self.length:
            raise ValidationError(f"array length must be exactly {self.length}, got {len(value)}")
        for v in value:
            self.item.encode_to(v, out)

    def decode_from(self, buf: BytesLike, offset: int = 0) -> Tuple[List[Any], int]:
        items: List[Any] = []
        i = offset
        for _ in range(self.length):
            v, i = self.item.decode_from(buf, i)
            items.append(v)
        return items, i

    def __repr__(self) -> str:
        return f"ArrayLayout({self.item!r}, {self.length})"
