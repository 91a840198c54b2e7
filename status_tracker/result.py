"""Tagged results returned by the service layer.

Services return ``Ok(value)`` or ``Err(kind, message)``; routes call
``unwrap`` which raises ``AppError`` for an ``Err`` so the exception handler
renders the envelope.
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from status_tracker.errors import AppError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str


Result = Union[Ok[T], Err]


def unwrap(result: "Result[T]") -> T:
    if isinstance(result, Err):
        raise AppError(result.kind, result.message)
    return result.value
