"""
Schema account: the on-store container holding a program's schema.

Wire layout
-----------
    authority:   32 bytes
    payload_len: u32 little-endian
    payload:     payload_len bytes (zlib-deflated canonical JSON of the schema)

The account is located at a deterministic address derived from the program
id: `create_with_seed(base, SCHEMA_SEED, program_id)` where `base` is the
program-derived address of the program with no seeds. The program-derived
address search itself belongs to the store client and is passed in.
"""

from __future__ import annotations

import hashlib
import zlib
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .config import get_settings
from .errors import SchemaValidationError, ValidationError
from .layout.base import BytesLike
from .layout.composite import StructLayout
from .layout.primitives import (PUBLIC_KEY_LENGTH, BytesLayout,
                                PublicKeyLayout, coerce_bytes)
from .logging import get_logger
from .schema.parse import schema_from_json, schema_to_json
from .schema.types import Schema

__all__ = [
    "SCHEMA_SEED",
    "SCHEMA_ACCOUNT_LAYOUT",
    "SchemaAccount",
    "encode_schema_account",
    "encode_schema_account_into",
    "decode_schema_account",
    "pack_schema",
    "unpack_schema",
    "create_with_seed",
    "schema_address",
]

log = get_logger(__name__)

SCHEMA_SEED = "anchor:idl"

MAX_SEED_LENGTH = 32

SCHEMA_ACCOUNT_LAYOUT = StructLayout(
    [
        ("authority", PublicKeyLayout()),
        ("data", BytesLayout()),
    ]
)


@dataclass(frozen=True)
class SchemaAccount:
    authority: bytes
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "authority", coerce_bytes(self.authority, fixed_len=PUBLIC_KEY_LENGTH))
        object.__setattr__(self, "data", coerce_bytes(self.data))

    @classmethod
    def from_schema(cls, authority: bytes, schema: Schema) -> "SchemaAccount":
        return cls(authority=authority, data=pack_schema(schema))

    def schema(self) -> Schema:
        return unpack_schema(self.data)

    def with_authority(self, authority: bytes) -> "SchemaAccount":
        return SchemaAccount(authority=authority, data=self.data)

    def with_data(self, data: bytes) -> "SchemaAccount":
        return SchemaAccount(authority=self.authority, data=data)

    def to_mapping(self) -> Mapping[str, Any]:
        return {"authority": self.authority, "data": self.data}


def encode_schema_account(acc: SchemaAccount) -> bytes:
    """Exactly the layout bytes: 32 + 4 + len(data)."""
    return SCHEMA_ACCOUNT_LAYOUT.encode(acc.to_mapping())


def encode_schema_account_into(acc: SchemaAccount, buf: Optional[bytearray] = None, offset: int = 0) -> bytearray:
    """
    Write `acc` into `buf` (a zeroed buffer of the configured
    `account_buffer_size` when omitted) and return the buffer.
    """
    if buf is None:
        buf = bytearray(get_settings().account_buffer_size)
    SCHEMA_ACCOUNT_LAYOUT.encode_into(acc.to_mapping(), buf, offset)
    return buf


def decode_schema_account(buf: BytesLike) -> SchemaAccount:
    """Read authority then the length-prefixed payload; trailing bytes are ignored."""
    value = SCHEMA_ACCOUNT_LAYOUT.decode(buf)
    return SchemaAccount(authority=value["authority"], data=value["data"])


# --- payload ------------------------------------------------------------------


def pack_schema(schema: Schema) -> bytes:
    return zlib.compress(schema_to_json(schema).encode("utf-8"))


def unpack_schema(payload: bytes) -> Schema:
    try:
        text = zlib.decompress(payload)
    except zlib.error as e:
        log.debug("schema_payload_inflate_failed", size=len(payload))
        raise SchemaValidationError(f"schema payload is not zlib data: {e}") from e
    return schema_from_json(text)


# --- address ------------------------------------------------------------------


def create_with_seed(base: Any, seed: str, owner: Any) -> bytes:
    """sha256(base || seed || owner): the seeded-address derivation."""
    seed_b = seed.encode("utf-8")
    if len(seed_b) > MAX_SEED_LENGTH:
        raise ValidationError(f"seed longer than {MAX_SEED_LENGTH} bytes", seed=seed)
    return hashlib.sha256(
        coerce_bytes(base, fixed_len=PUBLIC_KEY_LENGTH)
        + seed_b
        + coerce_bytes(owner, fixed_len=PUBLIC_KEY_LENGTH)
    ).digest()


def schema_address(program_id: Any, base_for: Callable[[bytes], bytes]) -> bytes:
    """
    Deterministic schema-account address for `program_id`.

    `base_for(program_id)` must return the program-derived address of the
    program with no seeds; it is supplied by the store client.
    """
    pid = coerce_bytes(program_id, fixed_len=PUBLIC_KEY_LENGTH)
    return create_with_seed(base_for(pid), SCHEMA_SEED, pid)
