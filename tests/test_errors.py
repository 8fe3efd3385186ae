from __future__ import annotations

import json

from idl_layout.errors import (BufferTooShort, IdlError, IdlErrorCode,
                               RecursiveType, TypeNotFound, UnsupportedField,
                               UnsupportedType, ValidationError)
from idl_layout.schema import Defined


def test_all_errors_share_root() -> None:
    for err in (
        TypeNotFound("X"),
        UnsupportedField(),
        UnsupportedType(object()),
        BufferTooShort(4, 1),
        RecursiveType(("A", "A")),
        ValidationError("bad"),
    ):
        assert isinstance(err, IdlError)
        assert isinstance(err, Exception)


def test_to_dict_is_json_safe() -> None:
    err = TypeNotFound("Ghost", matches=0, path=("Outer",))
    d = err.to_dict()
    assert d["code"] == "IDL/TYPE_NOT_FOUND"
    assert d["data"] == {"name": "Ghost", "matches": 0, "path": ["Outer"]}
    json.dumps(d)


def test_str_includes_code_and_data() -> None:
    err = BufferTooShort(needed=8, available=3, offset=2)
    s = str(err)
    assert s.startswith("IDL/BUFFER_TOO_SHORT: buffer too short")
    assert "needed=8" in s


def test_unsupported_type_mentions_tag() -> None:
    err = UnsupportedType(Defined("X"))
    assert err.code is IdlErrorCode.UNSUPPORTED_TYPE
    assert "Defined" in err.message


def test_unsupported_field_default_message() -> None:
    assert UnsupportedField().message == "tuple enum variants not yet implemented"
