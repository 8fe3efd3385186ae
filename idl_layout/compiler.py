"""
Schema -> layout compiler.

Turns type tags, fields and named type definitions into composable `Layout`
codecs:

- primitives     -> leaf layouts (LE integers, bool, u32-prefixed bytes/string,
                    fixed 32-byte public key)
- VecOf(t)       -> u32 count || items
- OptionOf(t)    -> presence byte || item
- ArrayOf(t, n)  -> n items, no prefix
- Defined(name)  -> the single matching type definition, compiled recursively
- struct         -> fields in declaration order (the wire order)
- enum           -> u8 declaration index || variant fields as an anonymous struct

Every public call builds a fresh layout graph with its own resolution state,
so a `LayoutCompiler` can be shared freely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional, Tuple

from .config import get_settings
from .casing import Naming
from .errors import TypeNotFound, UnsupportedField, UnsupportedType
from .layout.base import Layout
from .layout.composite import (ArrayLayout, EnumLayout, OptionLayout,
                               StructLayout, VecLayout)
from .layout.primitives import (BoolLayout, BytesLayout, PublicKeyLayout,
                                StringLayout, i8, i16, i32, i64, i128, u8, u16,
                                u32, u64, u128)
from .logging import get_logger
from .schema.registry import TypeRegistry
from .schema.types import (ArrayOf, Defined, EnumType, Field, OptionOf,
                           Primitive, StructType, TypeDef, TypeTag, Variant,
                           VecOf)

if TYPE_CHECKING:
    from typing import assert_never

__all__ = ["LayoutCompiler", "compile_field", "compile_type", "compile_type_def"]

log = get_logger(__name__)

_PRIMITIVE_LAYOUTS = {
    Primitive.BOOL: BoolLayout(),
    Primitive.U8: u8,
    Primitive.I8: i8,
    Primitive.U16: u16,
    Primitive.I16: i16,
    Primitive.U32: u32,
    Primitive.I32: i32,
    Primitive.U64: u64,
    Primitive.I64: i64,
    Primitive.U128: u128,
    Primitive.I128: i128,
    Primitive.BYTES: BytesLayout(),
    Primitive.STRING: StringLayout(),
    Primitive.PUBLIC_KEY: PublicKeyLayout(),
}


class LayoutCompiler:
    """
    Compiles against a fixed set of type definitions.

    `naming` maps declared field and variant names to the keys used in
    decoded values (defaults to the configured `field_case`). The
    discriminant is always the declaration index, so renaming keys never
    changes the wire bytes.
    """

    def __init__(
        self,
        type_defs: Iterable[TypeDef] = (),
        *,
        naming: Optional[Naming] = None,
        max_depth: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self.type_defs: Tuple[TypeDef, ...] = tuple(type_defs)
        self.naming: Naming = naming or settings.naming
        self.max_depth = max_depth if max_depth is not None else settings.max_depth

    def _registry(self) -> TypeRegistry:
        return TypeRegistry(self.type_defs, max_depth=self.max_depth)

    # --- public entry points -------------------------------------------------

    def compile_type(self, tag: TypeTag) -> Layout:
        return self._type(self._registry(), tag)

    def compile_field(self, field: Field) -> Layout:
        return self._type(self._registry(), field.type)

    def compile_fields(self, fields: Iterable[Field]) -> StructLayout:
        """Anonymous struct over `fields` (instruction args, event payloads)."""
        return self._struct(self._registry(), tuple(fields))

    def compile_type_def(self, type_def: TypeDef) -> Layout:
        return self._type_def(self._registry(), type_def)

    def compile_named(self, name: str) -> Layout:
        reg = self._registry()
        return self._type_def(reg, reg.lookup(name))

    # --- recursion -----------------------------------------------------------

    def _type(self, reg: TypeRegistry, tag: TypeTag) -> Layout:
        if isinstance(tag, Primitive):
            return _PRIMITIVE_LAYOUTS[tag]
        if isinstance(tag, VecOf):
            return VecLayout(self._type(reg, tag.inner))
        if isinstance(tag, OptionOf):
            return OptionLayout(self._type(reg, tag.inner))
        if isinstance(tag, ArrayOf):
            return ArrayLayout(self._type(reg, tag.inner), tag.length)
        if isinstance(tag, Defined):
            try:
                type_def = reg.lookup(tag.name)
            except TypeNotFound as e:
                log.debug("type_resolution_failed", type=tag.name, matches=e.matches, path=list(reg.path))
                raise
            return self._type_def(reg, type_def)
        if TYPE_CHECKING:
            assert_never(tag)
        raise UnsupportedType(tag)

    def _struct(self, reg: TypeRegistry, fields: Tuple[Field, ...]) -> StructLayout:
        return StructLayout([(self.naming(f.name), self._type(reg, f.type)) for f in fields])

    def _variant(self, reg: TypeRegistry, type_def: TypeDef, variant: Variant) -> StructLayout:
        if variant.fields is None:
            return StructLayout()
        if variant.is_tuple:
            raise UnsupportedField(type=type_def.name, variant=variant.name)
        return self._struct(reg, variant.fields)  # type: ignore[arg-type]

    def _type_def(self, reg: TypeRegistry, type_def: TypeDef) -> Layout:
        with reg.entering(type_def.name):
            body = type_def.type
            if isinstance(body, StructType):
                layout: Layout = self._struct(reg, body.fields)
            elif isinstance(body, EnumType):
                layout = EnumLayout(
                    [(self.naming(v.name), self._variant(reg, type_def, v)) for v in body.variants]
                )
            else:
                if TYPE_CHECKING:
                    assert_never(body)
                raise UnsupportedType(body, type=type_def.name)
        log.debug("layout_compiled", type=type_def.name, span=layout.span)
        return layout


# --- module-level conveniences -------------------------------------------------


def compile_type(tag: TypeTag, type_defs: Iterable[TypeDef] = (), **kwargs) -> Layout:
    return LayoutCompiler(type_defs, **kwargs).compile_type(tag)


def compile_field(field: Field, type_defs: Iterable[TypeDef] = (), **kwargs) -> Layout:
    return LayoutCompiler(type_defs, **kwargs).compile_field(field)


def compile_type_def(type_def: TypeDef, type_defs: Iterable[TypeDef] = (), **kwargs) -> Layout:
    return LayoutCompiler(type_defs, **kwargs).compile_type_def(type_def)
