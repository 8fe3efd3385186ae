"""
idl_layout
==========

Compile program interface definitions (IDL) into binary layouts.

This package provides:
  • The schema model and its JSON shape (`idl_layout.schema`).
  • A layout compiler turning fields and type definitions into composable
    encode/decode codecs (`idl_layout.compiler`, `idl_layout.layout`).
  • Fixed-size account estimates (`idl_layout.sizing`).
  • 8-byte instruction/account/event discriminators (`idl_layout.discriminator`).
  • The schema-account container codec (`idl_layout.account`).
  • Discriminator-prefixed instruction/account/event coders (`idl_layout.coders`).

Everything here is pure-Python and deterministic; encoding is little-endian
with u32 length prefixes for variable data.
"""

from __future__ import annotations

from .version import __version__  # noqa: F401

from .account import (  # noqa: F401
    SCHEMA_ACCOUNT_LAYOUT,
    SCHEMA_SEED,
    SchemaAccount,
    decode_schema_account,
    encode_schema_account,
    pack_schema,
    schema_address,
    unpack_schema,
)
from .coders import AccountsCoder, EventCoder, InstructionCoder, error_messages  # noqa: F401
from .compiler import LayoutCompiler, compile_field, compile_type, compile_type_def  # noqa: F401
from .discriminator import (  # noqa: F401
    account_discriminator,
    event_discriminator,
    sighash,
)
from .errors import (  # noqa: F401
    BufferTooShort,
    IdlError,
    IdlErrorCode,
    RecursiveType,
    SchemaValidationError,
    TypeNotFound,
    UnsupportedField,
    UnsupportedType,
    ValidationError,
)
from .layout import Layout  # noqa: F401
from .result import Err, Ok, capture  # noqa: F401
from .schema import Schema, schema_from_dict, schema_from_json, schema_to_dict  # noqa: F401
from .sizing import account_size, type_size  # noqa: F401

__all__ = [
    "__version__",
    # Schema
    "Schema", "schema_from_dict", "schema_from_json", "schema_to_dict",
    # Compiler & layouts
    "Layout", "LayoutCompiler", "compile_field", "compile_type", "compile_type_def",
    # Sizes & discriminators
    "account_size", "type_size",
    "sighash", "account_discriminator", "event_discriminator",
    # Coders
    "InstructionCoder", "AccountsCoder", "EventCoder", "error_messages",
    # Schema account
    "SchemaAccount", "SCHEMA_ACCOUNT_LAYOUT", "SCHEMA_SEED",
    "encode_schema_account", "decode_schema_account",
    "pack_schema", "unpack_schema", "schema_address",
    # Errors & results
    "IdlError", "IdlErrorCode", "TypeNotFound", "UnsupportedField", "UnsupportedType",
    "BufferTooShort", "RecursiveType", "ValidationError", "SchemaValidationError",
    "Ok", "Err", "capture",
]
