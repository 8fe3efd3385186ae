"""
Name resolution for `Defined` type references.

`TypeRegistry` indexes a list of type definitions once and is threaded
through the recursion of the compiler and the size estimator. It tracks the
chain of names currently being resolved so that a definition which reaches
itself (directly or through other definitions) is reported as
`RecursiveType` instead of recursing without bound.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Tuple

from ..errors import RecursiveType, TypeNotFound
from .types import TypeDef

__all__ = ["TypeRegistry", "DEFAULT_MAX_DEPTH"]

DEFAULT_MAX_DEPTH = 64


class TypeRegistry:
    def __init__(self, type_defs: Iterable[TypeDef] = (), *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._by_name: Dict[str, List[TypeDef]] = {}
        for td in type_defs:
            self._by_name.setdefault(td.name, []).append(td)
        self._path: List[str] = []
        self.max_depth = max_depth

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and len(self._by_name.get(name, ())) == 1

    @property
    def path(self) -> Tuple[str, ...]:
        return tuple(self._path)

    def lookup(self, name: str) -> TypeDef:
        """Return the single definition named `name`; zero or several is an error."""
        matches = self._by_name.get(name, [])
        if len(matches) != 1:
            raise TypeNotFound(name, matches=len(matches), path=self.path)
        return matches[0]

    @contextmanager
    def entering(self, name: str) -> Iterator[None]:
        """
        Mark `name` as being resolved for the duration of the block.

        Raises RecursiveType if `name` is already on the resolution path or
        the path would grow past `max_depth`.
        """
        if name in self._path:
            raise RecursiveType((*self._path, name))
        if len(self._path) >= self.max_depth:
            raise RecursiveType(
                (*self._path, name),
                message=f"type nesting exceeds max depth {self.max_depth}",
            )
        self._path.append(name)
        try:
            yield
        finally:
            self._path.pop()
