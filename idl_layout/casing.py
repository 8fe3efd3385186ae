"""
Case-normalization strategies.

Field keys, instruction names and account names are normalized with these
plain functions; callers pass the one they need explicitly (see
`discriminator.sighash` and `compiler.LayoutCompiler`).
"""

from __future__ import annotations

import re
from typing import Callable, Dict

from .errors import ConfigError

__all__ = [
    "Naming",
    "preserve",
    "snake_case",
    "camel_case",
    "pascal_case",
    "naming_strategy",
]

Naming = Callable[[str], str]

# Word boundaries: lower->Upper, acronym->Word ("HTTPServer" -> HTTP, Server),
# letter<->digit is *not* a boundary so "u64Value" stays "u64_value".
_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS_RE = re.compile(r"[\s\-_.]+")


def _words(name: str) -> list[str]:
    s = _ACRONYM_RE.sub(r"\1 \2", name)
    s = _LOWER_UPPER_RE.sub(r"\1 \2", s)
    return [w for w in _SEPARATORS_RE.split(s) if w]


def preserve(name: str) -> str:
    return name


def snake_case(name: str) -> str:
    """'initializeVault' / 'InitializeVault' / 'initialize-vault' -> 'initialize_vault'."""
    return "_".join(w.lower() for w in _words(name))


def camel_case(name: str) -> str:
    """'initialize_vault' -> 'initializeVault'."""
    words = _words(name)
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in rest)


def pascal_case(name: str) -> str:
    """'initialize_vault' -> 'InitializeVault'."""
    return "".join(w[:1].upper() + w[1:].lower() for w in _words(name))


_STRATEGIES: Dict[str, Naming] = {
    "preserve": preserve,
    "snake": snake_case,
    "camel": camel_case,
    "pascal": pascal_case,
}


def naming_strategy(name: str) -> Naming:
    """Look up a strategy by its config name ('preserve', 'snake', 'camel', 'pascal')."""
    try:
        return _STRATEGIES[name]
    except KeyError:
        raise ConfigError(f"unknown naming strategy: {name!r}", choices=sorted(_STRATEGIES))
