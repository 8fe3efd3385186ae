"""
8-byte discriminators.

    sighash(namespace, name) = sha256(f"{namespace}:{normalize(name)}")[:8]

Instruction handlers are hashed in the "global" namespace with snake_case
names, state methods in the "state" namespace; account types are hashed as
"account:<PascalName>" and events as "event:<Name>". Clients and the on-chain
program derive identical tags independently, so the normalizer must match the
program's naming convention exactly.

Only the (namespace, name) pair is committed to, not the argument types.
"""

from __future__ import annotations

import hashlib
from typing import Callable

from .casing import Naming, pascal_case, preserve, snake_case

__all__ = [
    "DISCRIMINATOR_LENGTH",
    "GLOBAL_NAMESPACE",
    "STATE_NAMESPACE",
    "ACCOUNT_NAMESPACE",
    "EVENT_NAMESPACE",
    "sha256_digest",
    "sighash",
    "instruction_discriminator",
    "state_discriminator",
    "account_discriminator",
    "event_discriminator",
]

DISCRIMINATOR_LENGTH = 8

GLOBAL_NAMESPACE = "global"
STATE_NAMESPACE = "state"
ACCOUNT_NAMESPACE = "account"
EVENT_NAMESPACE = "event"

Digest = Callable[[bytes], bytes]


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sighash(
    namespace: str,
    name: str,
    *,
    normalize: Naming = snake_case,
    digest: Digest = sha256_digest,
) -> bytes:
    """First 8 bytes of digest(namespace ":" normalize(name))."""
    preimage = f"{namespace}:{normalize(name)}".encode("utf-8")
    return digest(preimage)[:DISCRIMINATOR_LENGTH]


def instruction_discriminator(name: str) -> bytes:
    return sighash(GLOBAL_NAMESPACE, name)


def state_discriminator(name: str) -> bytes:
    return sighash(STATE_NAMESPACE, name)


def account_discriminator(name: str) -> bytes:
    return sighash(ACCOUNT_NAMESPACE, name, normalize=pascal_case)


def event_discriminator(name: str) -> bytes:
    return sighash(EVENT_NAMESPACE, name, normalize=preserve)
