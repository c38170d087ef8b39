"""Ok and Err — the return type of every fallible refinekit operation.

Guards, decoders, and key lookups report failure as ``Err(error)`` instead of
raising, so callers always branch on success explicitly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Never

from refinekit.errors import UnwrapError


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result carrying *value*."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def ok(self) -> T:
        return self.value

    def map[U](self, func: Callable[[T], U]) -> Ok[U]:
        return Ok(func(self.value))

    def map_err(self, func: Callable[[Any], Any]) -> Ok[T]:
        return self

    def and_then[U, F](self, func: Callable[[T], Result[U, F]]) -> Result[U, F]:
        return func(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Never:
        raise UnwrapError(f"Called unwrap_err on Ok({self.value!r})")

    def unwrap_or(self, default: object) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result carrying *error*."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def ok(self) -> None:
        return None

    def map(self, func: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_err[F](self, func: Callable[[E], F]) -> Err[F]:
        return Err(func(self.error))

    def and_then(self, func: Callable[[Any], Any]) -> Err[E]:
        return self

    def unwrap(self) -> Never:
        raise UnwrapError(f"Called unwrap on Err({self.error!r})")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or[D](self, default: D) -> D:
        return default


type Result[T, E] = Ok[T] | Err[E]
