"""Result type shared by every API call.

A call that reaches the transport always produces either :class:`Success`
wrapping the decoded value or :class:`Failure` carrying a human-readable
description.  Envelope failures (``ok: false``) and local decode problems
are both represented as data and handed to continuations; they are never
raised.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")

# Description returned by the poll loop when the fetched batch was empty.
NO_UPDATE = "Could not get head"


@dataclasses.dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """The call succeeded and *value* holds the decoded result."""

    value: T


@dataclasses.dataclass(frozen=True, slots=True)
class Failure:
    """The call failed; *description* is the message to show or log."""

    description: str = ""


@dataclasses.dataclass(frozen=True, slots=True)
class DecodeError(Failure):
    """A response reached us but could not be decoded into the expected shape."""


Result = Union[Success[T], Failure]


def is_success(result: Result[T]) -> bool:
    return isinstance(result, Success)


def is_no_update(result: Result[T]) -> bool:
    """Return ``True`` for the poll loop's "empty batch" sentinel."""
    return isinstance(result, Failure) and result.description == NO_UPDATE


def default(result: Result[T], fallback: T) -> T:
    """Unwrap *result*, returning *fallback* for any :class:`Failure`."""
    if isinstance(result, Success):
        return result.value
    return fallback


def map_result(func: Callable[[T], U], result: Result[T]) -> Result[U]:
    """Apply *func* to a successful value; failures pass through untouched."""
    if isinstance(result, Success):
        return Success(func(result.value))
    return result
