"""
In-memory model of a program interface definition (IDL).

Pure data: frozen dataclasses and a closed `Primitive` enum. Type tags form a
sum type

    TypeTag = Primitive | Defined | OptionOf | VecOf | ArrayOf

and every consumer (layout compiler, size estimator, JSON codec) dispatches
over exactly these five shapes, raising `UnsupportedType` for anything else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..errors import SchemaValidationError

__all__ = [
    "Primitive",
    "Defined",
    "OptionOf",
    "VecOf",
    "ArrayOf",
    "TypeTag",
    "Field",
    "Variant",
    "StructType",
    "EnumType",
    "TypeDef",
    "InstructionAccount",
    "InstructionAccounts",
    "AccountItem",
    "Instruction",
    "State",
    "EventField",
    "Event",
    "ErrorCode",
    "Schema",
    "PRIMITIVE_SIZES",
]


class Primitive(str, Enum):
    BOOL = "bool"
    U8 = "u8"
    I8 = "i8"
    U16 = "u16"
    I16 = "i16"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    U128 = "u128"
    I128 = "i128"
    BYTES = "bytes"
    STRING = "string"
    PUBLIC_KEY = "publicKey"

    @property
    def is_variable(self) -> bool:
        return self in (Primitive.BYTES, Primitive.STRING)


# Fixed wire widths; variable-length kinds are absent.
PRIMITIVE_SIZES = {
    Primitive.BOOL: 1,
    Primitive.U8: 1,
    Primitive.I8: 1,
    Primitive.U16: 2,
    Primitive.I16: 2,
    Primitive.U32: 4,
    Primitive.I32: 4,
    Primitive.U64: 8,
    Primitive.I64: 8,
    Primitive.U128: 16,
    Primitive.I128: 16,
    Primitive.PUBLIC_KEY: 32,
}


@dataclass(frozen=True)
class Defined:
    """Reference to a schema-declared type by name."""

    name: str


@dataclass(frozen=True)
class OptionOf:
    inner: "TypeTag"


@dataclass(frozen=True)
class VecOf:
    inner: "TypeTag"


@dataclass(frozen=True)
class ArrayOf:
    inner: "TypeTag"
    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise SchemaValidationError("array length must be >= 0", length=self.length)


TypeTag = Union[Primitive, Defined, OptionOf, VecOf, ArrayOf]


@dataclass(frozen=True)
class Field:
    name: str
    type: TypeTag


@dataclass(frozen=True)
class Variant:
    """
    Enum variant. `fields is None` is a unit variant. Entries that are bare
    type tags (not `Field`) are tuple-style fields, which the compiler and the
    size estimator reject.
    """

    name: str
    fields: Optional[Tuple[Union[Field, TypeTag], ...]] = None

    @property
    def is_tuple(self) -> bool:
        return self.fields is not None and any(not isinstance(f, Field) for f in self.fields)


@dataclass(frozen=True)
class StructType:
    fields: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class EnumType:
    variants: Tuple[Variant, ...] = ()


@dataclass(frozen=True)
class TypeDef:
    name: str
    type: Union[StructType, EnumType]

    @property
    def is_struct(self) -> bool:
        return isinstance(self.type, StructType)

    @property
    def is_enum(self) -> bool:
        return isinstance(self.type, EnumType)


# ---------------------------------------------------------------------------
# Instructions, state, events, errors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InstructionAccount:
    name: str
    is_mut: bool = False
    is_signer: bool = False


@dataclass(frozen=True)
class InstructionAccounts:
    """A named, nested group of accounts."""

    name: str
    accounts: Tuple["AccountItem", ...] = ()


AccountItem = Union[InstructionAccount, InstructionAccounts]


@dataclass(frozen=True)
class Instruction:
    name: str
    accounts: Tuple[AccountItem, ...] = ()
    args: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class State:
    struct: TypeDef
    methods: Tuple[Instruction, ...] = ()


@dataclass(frozen=True)
class EventField:
    name: str
    type: TypeTag
    index: bool = False


@dataclass(frozen=True)
class Event:
    name: str
    fields: Tuple[EventField, ...] = ()


@dataclass(frozen=True)
class ErrorCode:
    code: int
    name: str
    msg: Optional[str] = None


@dataclass(frozen=True)
class Schema:
    version: str
    name: str
    instructions: Tuple[Instruction, ...] = ()
    accounts: Tuple[TypeDef, ...] = ()
    types: Tuple[TypeDef, ...] = ()
    state: Optional[State] = None
    events: Tuple[Event, ...] = ()
    errors: Tuple[ErrorCode, ...] = ()

    @property
    def type_defs(self) -> Tuple[TypeDef, ...]:
        """Every definition a `Defined` reference may resolve to."""
        return self.accounts + self.types

    def instruction(self, name: str) -> Instruction:
        for ix in self.instructions:
            if ix.name == name:
                return ix
        raise KeyError(name)

    def account(self, name: str) -> TypeDef:
        for acc in self.accounts:
            if acc.name == name:
                return acc
        raise KeyError(name)
