"""
Byte-size estimates for the fixed portion of account storage.

Variable-length kinds (bytes, string, vec) count as a single byte: the result
is a lower bound, and callers storing variable data must add their own
allowance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional, Union

from .config import get_settings
from .errors import TypeNotFound, UnsupportedField, UnsupportedType
from .logging import get_logger
from .schema.registry import TypeRegistry
from .schema.types import (PRIMITIVE_SIZES, ArrayOf, Defined, EnumType, Field,
                           OptionOf, Primitive, Schema, StructType, TypeDef,
                           TypeTag, VecOf)

if TYPE_CHECKING:
    from typing import assert_never

__all__ = ["account_size", "type_size", "VARIABLE_PLACEHOLDER_SIZE"]

log = get_logger(__name__)

VARIABLE_PLACEHOLDER_SIZE = 1

TypeSource = Union[Schema, Iterable[TypeDef], TypeRegistry]


def _registry(source: TypeSource, max_depth: Optional[int]) -> TypeRegistry:
    if isinstance(source, TypeRegistry):
        return source
    if max_depth is None:
        max_depth = get_settings().max_depth
    if isinstance(source, Schema):
        return TypeRegistry(source.type_defs, max_depth=max_depth)
    return TypeRegistry(source, max_depth=max_depth)


def account_size(
    source: TypeSource, type_def: TypeDef, *, max_depth: Optional[int] = None
) -> int:
    """
    Estimated size in bytes of `type_def`.

    `max_depth` defaults to the configured `max_depth`; it is ignored when
    `source` is already a `TypeRegistry`.

    struct: sum of field sizes (empty struct -> 0)
    enum:   1 discriminant byte + the largest variant (unit variants count 0)
    """
    return _def_size(_registry(source, max_depth), type_def)


def type_size(
    source: TypeSource, tag: TypeTag, *, max_depth: Optional[int] = None
) -> int:
    """Estimated size in bytes of a single type tag."""
    return _tag_size(_registry(source, max_depth), tag)


def _def_size(reg: TypeRegistry, type_def: TypeDef) -> int:
    with reg.entering(type_def.name):
        body = type_def.type
        if isinstance(body, StructType):
            return sum(_tag_size(reg, f.type) for f in body.fields)
        if isinstance(body, EnumType):
            return 1 + max((_variant_size(reg, type_def, v.name, v.fields) for v in body.variants), default=0)
        if TYPE_CHECKING:
            assert_never(body)
        raise UnsupportedType(body, type=type_def.name)


def _variant_size(reg: TypeRegistry, type_def: TypeDef, name: str, fields: Optional[tuple]) -> int:
    if fields is None:
        return 0
    total = 0
    for f in fields:
        if not isinstance(f, Field):
            raise UnsupportedField(type=type_def.name, variant=name)
        total += _tag_size(reg, f.type)
    return total


def _tag_size(reg: TypeRegistry, tag: TypeTag) -> int:
    if isinstance(tag, Primitive):
        if tag.is_variable:
            return VARIABLE_PLACEHOLDER_SIZE
        return PRIMITIVE_SIZES[tag]
    if isinstance(tag, VecOf):
        return VARIABLE_PLACEHOLDER_SIZE
    if isinstance(tag, OptionOf):
        return 1 + _tag_size(reg, tag.inner)
    if isinstance(tag, ArrayOf):
        return _tag_size(reg, tag.inner) * tag.length
    if isinstance(tag, Defined):
        try:
            type_def = reg.lookup(tag.name)
        except TypeNotFound:
            log.debug("size_resolution_failed", type=tag.name, path=list(reg.path))
            raise
        return _def_size(reg, type_def)
    if TYPE_CHECKING:
        assert_never(tag)
    raise UnsupportedType(tag)
