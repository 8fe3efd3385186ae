"""
Result values for callers that prefer matching over try/except.

    from idl_layout.result import Ok, Err, capture

    match capture(compile_type_def, type_def, schema.type_defs):
        case Ok(layout):
            ...
        case Err(error) if error.kind is IdlErrorCode.TYPE_NOT_FOUND:
            ...

Only `IdlError` is converted; any other exception is a bug and propagates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from .errors import IdlError, IdlErrorCode

__all__ = ["Ok", "Err", "Result", "capture"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    error: IdlError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> IdlErrorCode:
        return self.error.kind

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Ok[T], Err]


def capture(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Call `fn` and wrap its outcome; `IdlError` becomes `Err`."""
    try:
        return Ok(fn(*args, **kwargs))
    except IdlError as e:
        return Err(e)
