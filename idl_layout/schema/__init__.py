"""
idl_layout.schema
=================

Schema model (`types`), JSON shape (`parse`) and name resolution (`registry`).
"""

from __future__ import annotations

from .parse import *  # noqa: F401,F403
from .registry import DEFAULT_MAX_DEPTH, TypeRegistry  # noqa: F401
from .types import *  # noqa: F401,F403
from .parse import __all__ as _all_parse
from .types import __all__ as _all_types

__all__ = tuple(
    dict.fromkeys((*_all_types, *_all_parse, "TypeRegistry", "DEFAULT_MAX_DEPTH"))
)
