"""
Discriminator-prefixed coders built on top of the layout compiler.

- Instructions:  sighash("global", name) || args struct
                 (state methods use the "state" namespace)
- Accounts:      sighash("account", PascalName) || type-def layout
- Events:        sighash("event", Name) || fields struct

Layouts are compiled once per coder; decode dispatches by the 8-byte prefix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .compiler import LayoutCompiler
from .casing import Naming
from .discriminator import (DISCRIMINATOR_LENGTH, GLOBAL_NAMESPACE,
                            STATE_NAMESPACE, account_discriminator,
                            event_discriminator, sighash)
from .errors import DiscriminatorMismatch, UnknownDiscriminator, ValidationError
from .layout.base import BytesLike, Layout, read_exact
from .layout.composite import StructLayout
from .logging import get_logger
from .schema.types import Field, Schema
from .sizing import account_size

__all__ = [
    "DecodedInstruction",
    "DecodedEvent",
    "InstructionCoder",
    "AccountsCoder",
    "EventCoder",
    "error_messages",
]

log = get_logger(__name__)


@dataclass(frozen=True)
class DecodedInstruction:
    name: str
    args: Dict[str, Any]
    namespace: str = GLOBAL_NAMESPACE


@dataclass(frozen=True)
class DecodedEvent:
    name: str
    data: Dict[str, Any]


class InstructionCoder:
    def __init__(self, schema: Schema, *, naming: Optional[Naming] = None) -> None:
        compiler = LayoutCompiler(schema.type_defs, naming=naming)
        # (namespace, name) -> (discriminator, args layout)
        self._layouts: Dict[Tuple[str, str], Tuple[bytes, StructLayout]] = {}
        self._by_disc: Dict[bytes, Tuple[str, str]] = {}
        for ns, ixs in (
            (GLOBAL_NAMESPACE, schema.instructions),
            (STATE_NAMESPACE, schema.state.methods if schema.state else ()),
        ):
            for ix in ixs:
                disc = sighash(ns, ix.name)
                self._layouts[(ns, ix.name)] = (disc, compiler.compile_fields(ix.args))
                self._by_disc[disc] = (ns, ix.name)

    def _entry(self, namespace: str, name: str) -> Tuple[bytes, StructLayout]:
        try:
            return self._layouts[(namespace, name)]
        except KeyError:
            raise ValidationError(f"unknown instruction {name!r}", namespace=namespace)

    def encode(self, name: str, args: Mapping[str, Any]) -> bytes:
        disc, layout = self._entry(GLOBAL_NAMESPACE, name)
        return disc + layout.encode(args)

    def encode_state(self, name: str, args: Mapping[str, Any]) -> bytes:
        disc, layout = self._entry(STATE_NAMESPACE, name)
        return disc + layout.encode(args)

    def decode(self, data: BytesLike) -> DecodedInstruction:
        disc, i = read_exact(data, 0, DISCRIMINATOR_LENGTH)
        try:
            ns, name = self._by_disc[disc]
        except KeyError:
            raise UnknownDiscriminator(disc, namespace="instruction")
        args, _ = self._layouts[(ns, name)][1].decode_from(data, i)
        return DecodedInstruction(name=name, args=args, namespace=ns)


class AccountsCoder:
    def __init__(self, schema: Schema, *, naming: Optional[Naming] = None) -> None:
        self.schema = schema
        compiler = LayoutCompiler(schema.type_defs, naming=naming)
        self._max_depth = compiler.max_depth
        self._layouts: Dict[str, Tuple[bytes, Layout]] = {
            acc.name: (account_discriminator(acc.name), compiler.compile_type_def(acc))
            for acc in schema.accounts
        }

    def _entry(self, name: str) -> Tuple[bytes, Layout]:
        try:
            return self._layouts[name]
        except KeyError:
            raise ValidationError(f"unknown account {name!r}")

    def encode(self, name: str, value: Any) -> bytes:
        disc, layout = self._entry(name)
        return disc + layout.encode(value)

    def decode(self, name: str, data: BytesLike) -> Any:
        expected, layout = self._entry(name)
        disc, i = read_exact(data, 0, DISCRIMINATOR_LENGTH)
        if disc != expected:
            log.debug("account_discriminator_mismatch", account=name)
            raise DiscriminatorMismatch(name, expected, disc)
        value, _ = layout.decode_from(data, i)
        return value

    def size(self, name: str) -> int:
        """Discriminator + estimated fixed size of the account type."""
        self._entry(name)
        return DISCRIMINATOR_LENGTH + account_size(self.schema, self.schema.account(name), max_depth=self._max_depth)

    def discriminator(self, name: str) -> bytes:
        return self._entry(name)[0]


class EventCoder:
    def __init__(self, schema: Schema, *, naming: Optional[Naming] = None) -> None:
        compiler = LayoutCompiler(schema.type_defs, naming=naming)
        self._layouts: Dict[str, Tuple[bytes, StructLayout]] = {}
        self._by_disc: Dict[bytes, str] = {}
        for ev in schema.events:
            disc = event_discriminator(ev.name)
            fields = tuple(Field(f.name, f.type) for f in ev.fields)
            self._layouts[ev.name] = (disc, compiler.compile_fields(fields))
            self._by_disc[disc] = ev.name

    def encode(self, name: str, data: Mapping[str, Any]) -> bytes:
        try:
            disc, layout = self._layouts[name]
        except KeyError:
            raise ValidationError(f"unknown event {name!r}")
        return disc + layout.encode(data)

    def decode(self, data: BytesLike) -> Optional[DecodedEvent]:
        """Decode an event record; None when the prefix matches no known event."""
        if len(data) < DISCRIMINATOR_LENGTH:
            return None
        disc = bytes(data[:DISCRIMINATOR_LENGTH])
        name = self._by_disc.get(disc)
        if name is None:
            return None
        value, _ = self._layouts[name][1].decode_from(data, DISCRIMINATOR_LENGTH)
        return DecodedEvent(name=name, data=value)


def error_messages(schema: Schema) -> Dict[int, str]:
    """Custom error code -> message (falls back to the error name)."""
    return {e.code: e.msg if e.msg is not None else e.name for e in schema.errors}
