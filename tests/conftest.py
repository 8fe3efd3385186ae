from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

from idl_layout.config import get_settings
from idl_layout.schema import Schema, schema_from_dict

# A small but complete interface definition exercising every type-tag shape.
SAMPLE_IDL: Dict[str, Any] = {
    "version": "0.1.0",
    "name": "vault",
    "instructions": [
        {
            "name": "initialize",
            "accounts": [
                {"name": "vault", "isMut": True, "isSigner": False},
                {"name": "authority", "isMut": False, "isSigner": True},
            ],
            "args": [
                {"name": "bump", "type": "u8"},
                {"name": "label", "type": "string"},
            ],
        },
        {
            "name": "depositFunds",
            "accounts": [
                {
                    "name": "common",
                    "accounts": [{"name": "vault", "isMut": True, "isSigner": False}],
                }
            ],
            "args": [
                {"name": "amount", "type": "u64"},
                {"name": "memo", "type": {"option": "string"}},
            ],
        },
    ],
    "state": {
        "struct": {
            "name": "Global",
            "type": {"kind": "struct", "fields": [{"name": "count", "type": "u32"}]},
        },
        "methods": [
            {"name": "bump", "accounts": [], "args": [{"name": "by", "type": "u32"}]},
        ],
    },
    "accounts": [
        {
            "name": "Vault",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "owner", "type": "publicKey"},
                    {"name": "balance", "type": "u64"},
                    {"name": "status", "type": {"defined": "Status"}},
                    {"name": "history", "type": {"vec": "i64"}},
                    {"name": "delegate", "type": {"option": "publicKey"}},
                    {"name": "limits", "type": {"array": ["u16", 3]}},
                ],
            },
        }
    ],
    "types": [
        {
            "name": "Status",
            "type": {
                "kind": "enum",
                "variants": [
                    {"name": "Active"},
                    {"name": "Frozen", "fields": [{"name": "until", "type": "i64"}]},
                    {"name": "Closed"},
                ],
            },
        }
    ],
    "events": [
        {
            "name": "Deposited",
            "fields": [
                {"name": "amount", "type": "u64", "index": False},
                {"name": "vault", "type": "publicKey", "index": True},
            ],
        }
    ],
    "errors": [
        {"code": 6000, "name": "InsufficientFunds", "msg": "not enough funds"},
        {"code": 6001, "name": "Frozen"},
    ],
}

OWNER = bytes(range(32))


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Each test sees settings built from its own environment."""
    for var in (
        "IDL_LAYOUT_MAX_DEPTH",
        "IDL_LAYOUT_FIELD_CASE",
        "IDL_LAYOUT_ACCOUNT_BUFFER_SIZE",
        "IDL_LAYOUT_LOG_LEVEL",
        "IDL_LAYOUT_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_idl() -> Dict[str, Any]:
    return copy.deepcopy(SAMPLE_IDL)


@pytest.fixture
def schema(sample_idl: Dict[str, Any]) -> Schema:
    return schema_from_dict(sample_idl)


@pytest.fixture
def vault_value() -> Dict[str, Any]:
    return {
        "owner": OWNER,
        "balance": 1_000_000,
        "status": {"Frozen": {"until": -5}},
        "history": [1, -2, 3],
        "delegate": None,
        "limits": [10, 20, 30],
    }
