from __future__ import annotations

import pytest

from idl_layout.casing import camel_case
from idl_layout.compiler import (LayoutCompiler, compile_field, compile_type,
                                 compile_type_def)
from idl_layout.errors import (IdlErrorCode, RecursiveType, TypeNotFound,
                               UnsupportedField, UnsupportedType,
                               ValidationError)
from idl_layout.layout import EnumLayout, StructLayout
from idl_layout.schema import (ArrayOf, Defined, EnumType, Field, OptionOf,
                               Primitive, StructType, TypeDef, Variant, VecOf)


def _struct(name: str, *fields: Field) -> TypeDef:
    return TypeDef(name, StructType(tuple(fields)))


def _enum(name: str, *variants: Variant) -> TypeDef:
    return TypeDef(name, EnumType(tuple(variants)))


ABC = _enum(
    "Abc",
    Variant("A"),
    Variant("B", (Field("value", Primitive.U32),)),
    Variant("C"),
)


# ---------------------------------------------------------------------------
# Primitives & composite tags
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "tag,value,expected",
    [
        (Primitive.BOOL, True, b"\x01"),
        (Primitive.I16, -1, b"\xff\xff"),
        (Primitive.STRING, "hi", b"\x02\x00\x00\x00hi"),
        (Primitive.BYTES, b"\x00", b"\x01\x00\x00\x00\x00"),
        (VecOf(Primitive.U8), [7, 8], b"\x02\x00\x00\x00\x07\x08"),
        (OptionOf(Primitive.U16), None, b"\x00"),
        (OptionOf(Primitive.U16), 1, b"\x01\x01\x00"),
        (ArrayOf(Primitive.U8, 2), [1, 2], b"\x01\x02"),
    ],
)
def test_compile_type_encodes_canonically(tag, value, expected) -> None:
    layout = compile_type(tag)
    assert layout.encode(value) == expected
    assert layout.decode(expected) == value


def test_public_key_is_fixed_32() -> None:
    layout = compile_field(Field("owner", Primitive.PUBLIC_KEY))
    assert layout.span == 32


# ---------------------------------------------------------------------------
# Structs
# ---------------------------------------------------------------------------


def test_struct_field_order_is_wire_order() -> None:
    ab = _struct("P", Field("a", Primitive.U8), Field("b", Primitive.U16))
    ba = _struct("P", Field("b", Primitive.U16), Field("a", Primitive.U8))
    value = {"a": 1, "b": 2}
    first = compile_type_def(ab).encode(value)
    assert first == compile_type_def(ab).encode(value)
    assert first == b"\x01\x02\x00"
    assert compile_type_def(ba).encode(value) == b"\x02\x00\x01"


def test_empty_struct_encodes_to_nothing() -> None:
    layout = compile_type_def(_struct("Empty"))
    assert layout.encode({}) == b""
    assert layout.span == 0


def test_defined_reference_resolves() -> None:
    inner = _struct("Inner", Field("x", Primitive.U8))
    outer = _struct("Outer", Field("inner", Defined("Inner")), Field("n", Primitive.U8))
    layout = compile_type_def(outer, [inner, outer])
    assert layout.encode({"inner": {"x": 5}, "n": 6}) == b"\x05\x06"
    assert layout.decode(b"\x05\x06") == {"inner": {"x": 5}, "n": 6}


def test_nested_composites_of_defined_types() -> None:
    tag = VecOf(OptionOf(ArrayOf(Defined("Abc"), 2)))
    layout = compile_type(tag, [ABC])
    value = [None, [{"A": {}}, {"B": {"value": 9}}]]
    assert layout.decode(layout.encode(value)) == value


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


def test_enum_discriminant_is_declaration_index() -> None:
    layout = compile_type_def(ABC)
    assert isinstance(layout, EnumLayout)
    buf = layout.encode({"B": {"value": 1}})
    assert buf[0] == 1
    assert buf == b"\x01\x01\x00\x00\x00"
    assert layout.encode("C") == b"\x02"


def test_unit_variant_is_zero_length() -> None:
    layout = compile_type_def(ABC)
    assert layout.encode("A") == b"\x00"
    assert layout.decode(b"\x00") == {"A": {}}


def test_tuple_variant_rejected() -> None:
    tuple_enum = _enum("T", Variant("Pair", (Primitive.U8, Primitive.U8)))
    with pytest.raises(UnsupportedField) as ei:
        compile_type_def(tuple_enum)
    assert ei.value.code is IdlErrorCode.UNSUPPORTED_FIELD
    assert ei.value.data["variant"] == "Pair"


# ---------------------------------------------------------------------------
# Resolution errors
# ---------------------------------------------------------------------------


def test_unresolved_defined_reference() -> None:
    with pytest.raises(TypeNotFound) as ei:
        compile_field(Field("g", Defined("Ghost")), [ABC])
    assert ei.value.name == "Ghost"
    assert ei.value.matches == 0
    assert "Ghost" in str(ei.value)


def test_ambiguous_defined_reference() -> None:
    dup = [_struct("Dup", Field("a", Primitive.U8)), _struct("Dup", Field("b", Primitive.U8))]
    with pytest.raises(TypeNotFound) as ei:
        compile_type(Defined("Dup"), dup)
    assert ei.value.matches == 2
    assert "ambiguous" in ei.value.message


def test_self_reference_is_detected() -> None:
    node = _struct("Node", Field("next", OptionOf(Defined("Node"))))
    with pytest.raises(RecursiveType) as ei:
        compile_type_def(node, [node])
    assert ei.value.path == ("Node", "Node")


def test_mutual_reference_is_detected() -> None:
    a = _struct("A", Field("b", Defined("B")))
    b = _struct("B", Field("a", VecOf(Defined("A"))))
    with pytest.raises(RecursiveType):
        compile_type(Defined("A"), [a, b])


def test_depth_bound() -> None:
    chain = [_struct(f"T{i}", Field("n", Defined(f"T{i + 1}"))) for i in range(5)]
    chain.append(_struct("T5", Field("v", Primitive.U8)))
    assert compile_type(Defined("T0"), chain).encode({"n": {"n": {"n": {"n": {"n": {"v": 1}}}}}}) == b"\x01"
    with pytest.raises(RecursiveType):
        compile_type(Defined("T0"), chain, max_depth=3)


def test_shared_reference_is_not_recursion() -> None:
    point = _struct("Point", Field("x", Primitive.U8))
    line = _struct("Line", Field("a", Defined("Point")), Field("b", Defined("Point")))
    layout = compile_type_def(line, [point, line])
    assert layout.encode({"a": {"x": 1}, "b": {"x": 2}}) == b"\x01\x02"


def test_unknown_tag_rejected() -> None:
    with pytest.raises(UnsupportedType):
        compile_type("u8")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Compiler object
# ---------------------------------------------------------------------------


def test_naming_strategy_applies_to_field_and_variant_keys() -> None:
    td = _enum(
        "E",
        Variant("first_variant"),
        Variant("some_variant", (Field("inner_value", Primitive.U8),)),
    )
    layout = LayoutCompiler([td], naming=camel_case).compile_named("E")
    assert layout.decode(b"\x01\x07") == {"someVariant": {"innerValue": 7}}
    # Renamed keys keep the declaration-index discriminant.
    assert layout.encode({"someVariant": {"innerValue": 7}}) == b"\x01\x07"
    assert layout.encode("firstVariant") == b"\x00"


def test_compile_fields_builds_anonymous_struct() -> None:
    layout = LayoutCompiler().compile_fields(
        [Field("amount", Primitive.U64), Field("memo", OptionOf(Primitive.STRING))]
    )
    assert isinstance(layout, StructLayout)
    assert layout.keys == ("amount", "memo")


def test_compiler_is_reusable_after_error() -> None:
    compiler = LayoutCompiler([ABC])
    with pytest.raises(TypeNotFound):
        compiler.compile_named("Ghost")
    assert compiler.compile_named("Abc").encode("A") == b"\x00"


def test_field_case_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from idl_layout.config import get_settings

    monkeypatch.setenv("IDL_LAYOUT_FIELD_CASE", "camel")
    get_settings.cache_clear()
    layout = compile_type_def(_struct("S", Field("total_amount", Primitive.U8)))
    assert layout.decode(b"\x01") == {"totalAmount": 1}


def test_vec_of_zero_width_items_decodes_only_empty() -> None:
    layout = compile_type(VecOf(ArrayOf(Primitive.U8, 0)))
    assert layout.decode(b"\x00\x00\x00\x00") == []
    with pytest.raises(ValidationError):
        layout.decode(b"\xff\xff\xff\xff")
