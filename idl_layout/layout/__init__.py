"""
idl_layout.layout
=================

Composable codecs: leaf layouts for primitives and composite layouts for
struct / enum / vec / option / array. Every layout exposes `encode`, `decode`,
`decode_from`, `encode_into` and `size_of`.
"""

from __future__ import annotations

from .base import *  # noqa: F401,F403
from .composite import *  # noqa: F401,F403
from .primitives import *  # noqa: F401,F403
from .base import __all__ as _all_base
from .composite import __all__ as _all_composite
from .primitives import __all__ as _all_primitives

__all__ = tuple(dict.fromkeys((*_all_base, *_all_primitives, *_all_composite)))
