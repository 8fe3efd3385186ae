"""
JSON shape <-> Schema model.

Accepted type-tag forms (primitive names and composite keys are matched
case-insensitively, so both "u64" and "U64", "publicKey" and "PublicKey",
{"defined": ...} and {"Defined": ...} are fine):

    "bool" | "u8" | "i8" | ... | "u128" | "i128" | "bytes" | "string" | "publicKey"
    {"defined": "Name"}
    {"option": <type>}
    {"vec": <type>}
    {"array": [<type>, <length>]}

Output of `schema_to_dict` is canonical: lowercase primitive names,
"publicKey", lowercase composite keys, optional sections omitted when empty.

Validation here is structural only; name resolution happens at compile time.
"""

from __future__ import annotations

import json
from typing import (TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple,
                    Union)

from ..errors import SchemaValidationError, UnsupportedType
from .types import (AccountItem, ArrayOf, Defined, EnumType, ErrorCode, Event,
                    EventField, Field, Instruction, InstructionAccount,
                    InstructionAccounts, OptionOf, Primitive, Schema, State,
                    StructType, TypeDef, TypeTag, Variant, VecOf)

if TYPE_CHECKING:
    from typing import assert_never

__all__ = [
    "type_from_json",
    "type_to_json",
    "type_def_from_dict",
    "type_def_to_dict",
    "schema_from_dict",
    "schema_from_json",
    "schema_to_dict",
    "schema_to_json",
]

JsonDict = Dict[str, Any]

_PRIMITIVES_BY_LOWER = {p.value.lower(): p for p in Primitive}


def _require(cond: bool, msg: str, **data: Any) -> None:
    if not cond:
        raise SchemaValidationError(msg, **data)


def _composite_key(obj: Mapping[str, Any], ctx: str) -> Tuple[str, Any]:
    _require(len(obj) == 1, f"{ctx}: composite type must have exactly one key", keys=list(obj))
    (key, value), = obj.items()
    _require(isinstance(key, str), f"{ctx}: composite type key must be a string")
    return key.lower(), value


# --- Type tags ----------------------------------------------------------------


def type_from_json(raw: Any, ctx: str = "type") -> TypeTag:
    if isinstance(raw, str):
        prim = _PRIMITIVES_BY_LOWER.get(raw.lower())
        _require(prim is not None, f"{ctx}: unknown primitive type {raw!r}")
        return prim  # type: ignore[return-value]
    _require(isinstance(raw, Mapping), f"{ctx}: type must be a string or an object")
    key, value = _composite_key(raw, ctx)
    if key == "defined":
        _require(isinstance(value, str) and bool(value), f"{ctx}: defined name must be a non-empty string")
        return Defined(value)
    if key == "option":
        return OptionOf(type_from_json(value, f"{ctx}.option"))
    if key == "vec":
        return VecOf(type_from_json(value, f"{ctx}.vec"))
    if key == "array":
        _require(
            isinstance(value, (list, tuple)) and len(value) == 2,
            f"{ctx}: array must be [type, length]",
        )
        inner, length = value
        _require(
            isinstance(length, int) and not isinstance(length, bool) and length >= 0,
            f"{ctx}: array length must be a non-negative integer",
        )
        return ArrayOf(type_from_json(inner, f"{ctx}.array"), length)
    raise SchemaValidationError(f"{ctx}: unsupported composite type {key!r}")


def type_to_json(tag: TypeTag) -> Any:
    if isinstance(tag, Primitive):
        return tag.value
    if isinstance(tag, Defined):
        return {"defined": tag.name}
    if isinstance(tag, OptionOf):
        return {"option": type_to_json(tag.inner)}
    if isinstance(tag, VecOf):
        return {"vec": type_to_json(tag.inner)}
    if isinstance(tag, ArrayOf):
        return {"array": [type_to_json(tag.inner), tag.length]}
    if TYPE_CHECKING:
        assert_never(tag)
    raise UnsupportedType(tag)


# --- Fields & type definitions --------------------------------------------------


def _name(raw: Mapping[str, Any], ctx: str) -> str:
    name = raw.get("name")
    _require(isinstance(name, str) and bool(name), f"{ctx}: name must be a non-empty string")
    return name


def _list(raw: Mapping[str, Any], key: str, ctx: str, *, required: bool = False) -> List[Any]:
    if key not in raw or raw[key] is None:
        _require(not required, f"{ctx}: missing {key!r}")
        return []
    value = raw[key]
    _require(isinstance(value, list), f"{ctx}: {key!r} must be a list")
    return value


def _field(raw: Any, ctx: str) -> Field:
    _require(isinstance(raw, Mapping), f"{ctx}: field must be an object")
    name = _name(raw, ctx)
    _require("type" in raw, f"{ctx}: field {name!r} has no type")
    return Field(name, type_from_json(raw["type"], f"{ctx}.{name}"))


def _variant_field(raw: Any, ctx: str) -> Union[Field, TypeTag]:
    # Named field objects carry "name" + "type"; anything else is a tuple member.
    if isinstance(raw, Mapping) and "name" in raw and "type" in raw:
        return _field(raw, ctx)
    return type_from_json(raw, ctx)


def type_def_from_dict(raw: Any, ctx: str = "typedef") -> TypeDef:
    _require(isinstance(raw, Mapping), f"{ctx}: type definition must be an object")
    name = _name(raw, ctx)
    ctx = f"{ctx} {name}"
    body = raw.get("type")
    _require(isinstance(body, Mapping), f"{ctx}: 'type' must be an object")
    kind = body.get("kind")
    if kind == "struct":
        fields = tuple(_field(f, ctx) for f in _list(body, "fields", ctx))
        return TypeDef(name, StructType(fields))
    if kind == "enum":
        variants: List[Variant] = []
        for v in _list(body, "variants", ctx, required=True):
            _require(isinstance(v, Mapping), f"{ctx}: variant must be an object")
            vname = _name(v, ctx)
            raw_fields = v.get("fields")
            if raw_fields is None:
                variants.append(Variant(vname))
                continue
            _require(isinstance(raw_fields, list), f"{ctx}.{vname}: 'fields' must be a list")
            variants.append(
                Variant(vname, tuple(_variant_field(f, f"{ctx}.{vname}") for f in raw_fields))
            )
        return TypeDef(name, EnumType(tuple(variants)))
    raise SchemaValidationError(f"{ctx}: unknown type kind {kind!r}")


def _field_to_dict(f: Union[Field, TypeTag]) -> Any:
    if isinstance(f, Field):
        return {"name": f.name, "type": type_to_json(f.type)}
    return type_to_json(f)


def type_def_to_dict(td: TypeDef) -> JsonDict:
    if isinstance(td.type, StructType):
        return {
            "name": td.name,
            "type": {"kind": "struct", "fields": [_field_to_dict(f) for f in td.type.fields]},
        }
    variants: List[JsonDict] = []
    for v in td.type.variants:
        entry: JsonDict = {"name": v.name}
        if v.fields is not None:
            entry["fields"] = [_field_to_dict(f) for f in v.fields]
        variants.append(entry)
    return {"name": td.name, "type": {"kind": "enum", "variants": variants}}


# --- Instructions -----------------------------------------------------------------


def _account_item(raw: Any, ctx: str) -> AccountItem:
    _require(isinstance(raw, Mapping), f"{ctx}: account must be an object")
    name = _name(raw, ctx)
    if "accounts" in raw:
        return InstructionAccounts(
            name, tuple(_account_item(a, f"{ctx}.{name}") for a in _list(raw, "accounts", ctx))
        )
    is_mut = raw.get("isMut", raw.get("is_mut", False))
    is_signer = raw.get("isSigner", raw.get("is_signer", False))
    _require(isinstance(is_mut, bool), f"{ctx}.{name}: isMut must be a bool")
    _require(isinstance(is_signer, bool), f"{ctx}.{name}: isSigner must be a bool")
    return InstructionAccount(name, is_mut=is_mut, is_signer=is_signer)


def _account_item_to_dict(item: AccountItem) -> JsonDict:
    if isinstance(item, InstructionAccounts):
        return {"name": item.name, "accounts": [_account_item_to_dict(a) for a in item.accounts]}
    return {"name": item.name, "isMut": item.is_mut, "isSigner": item.is_signer}


def _instruction(raw: Any, ctx: str) -> Instruction:
    _require(isinstance(raw, Mapping), f"{ctx}: instruction must be an object")
    name = _name(raw, ctx)
    ctx = f"{ctx} {name}"
    return Instruction(
        name,
        accounts=tuple(_account_item(a, ctx) for a in _list(raw, "accounts", ctx)),
        args=tuple(_field(a, ctx) for a in _list(raw, "args", ctx)),
    )


def _instruction_to_dict(ix: Instruction) -> JsonDict:
    return {
        "name": ix.name,
        "accounts": [_account_item_to_dict(a) for a in ix.accounts],
        "args": [_field_to_dict(a) for a in ix.args],
    }


# --- Events & errors --------------------------------------------------------------


def _event(raw: Any, ctx: str) -> Event:
    _require(isinstance(raw, Mapping), f"{ctx}: event must be an object")
    name = _name(raw, ctx)
    fields: List[EventField] = []
    for f in _list(raw, "fields", f"{ctx} {name}"):
        base = _field(f, f"{ctx} {name}")
        index = f.get("index", False)
        _require(isinstance(index, bool), f"{ctx} {name}.{base.name}: index must be a bool")
        fields.append(EventField(base.name, base.type, index))
    return Event(name, tuple(fields))


def _error_code(raw: Any, ctx: str) -> ErrorCode:
    _require(isinstance(raw, Mapping), f"{ctx}: error must be an object")
    name = _name(raw, ctx)
    code = raw.get("code")
    _require(isinstance(code, int) and not isinstance(code, bool), f"{ctx} {name}: code must be an int")
    msg = raw.get("msg")
    _require(msg is None or isinstance(msg, str), f"{ctx} {name}: msg must be a string")
    return ErrorCode(code, name, msg)


# --- Schema -----------------------------------------------------------------------


def schema_from_dict(raw: Any) -> Schema:
    """
    Validate and convert a JSON-shaped IDL document into a `Schema`.
    Does not mutate the input.
    """
    _require(isinstance(raw, Mapping), "schema must be an object")
    version = raw.get("version", "0.0.0")
    _require(isinstance(version, str), "schema.version must be a string")
    name = _name(raw, "schema")

    state: Optional[State] = None
    if raw.get("state") is not None:
        st = raw["state"]
        _require(isinstance(st, Mapping), "schema.state must be an object")
        _require("struct" in st, "schema.state: missing 'struct'")
        state = State(
            struct=type_def_from_dict(st["struct"], "state.struct"),
            methods=tuple(_instruction(m, "state.method") for m in _list(st, "methods", "state")),
        )

    return Schema(
        version=version,
        name=name,
        instructions=tuple(
            _instruction(ix, "instruction") for ix in _list(raw, "instructions", "schema")
        ),
        accounts=tuple(type_def_from_dict(a, "account") for a in _list(raw, "accounts", "schema")),
        types=tuple(type_def_from_dict(t, "type") for t in _list(raw, "types", "schema")),
        state=state,
        events=tuple(_event(e, "event") for e in _list(raw, "events", "schema")),
        errors=tuple(_error_code(e, "error") for e in _list(raw, "errors", "schema")),
    )


def schema_from_json(text: Union[str, bytes]) -> Schema:
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise SchemaValidationError(f"invalid JSON: {e}") from e
    return schema_from_dict(raw)


def schema_to_dict(schema: Schema) -> JsonDict:
    out: JsonDict = {
        "version": schema.version,
        "name": schema.name,
        "instructions": [_instruction_to_dict(ix) for ix in schema.instructions],
    }
    if schema.state is not None:
        out["state"] = {
            "struct": type_def_to_dict(schema.state.struct),
            "methods": [_instruction_to_dict(m) for m in schema.state.methods],
        }
    if schema.accounts:
        out["accounts"] = [type_def_to_dict(a) for a in schema.accounts]
    if schema.types:
        out["types"] = [type_def_to_dict(t) for t in schema.types]
    if schema.events:
        out["events"] = [
            {
                "name": ev.name,
                "fields": [
                    {"name": f.name, "type": type_to_json(f.type), "index": f.index}
                    for f in ev.fields
                ],
            }
            for ev in schema.events
        ]
    if schema.errors:
        out["errors"] = [
            {"code": e.code, "name": e.name, **({"msg": e.msg} if e.msg is not None else {})}
            for e in schema.errors
        ]
    return out


def schema_to_json(schema: Schema, *, indent: Optional[int] = None) -> str:
    """Deterministic JSON text (stable key order as emitted, no trailing spaces)."""
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(schema_to_dict(schema), indent=indent, separators=separators)
