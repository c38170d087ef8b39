"""Reusable guard functions for refined types.

Every guard has the shape ``(bound, value) -> Result[value, error]`` and
returns its input unchanged on success. Chain guards with ``and_then``::

    gte(1, n).and_then(partial(lte, 100))

Boundary rules: ``gt``/``lt`` are strict, ``gte``/``lte`` inclusive.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache

from refinekit.config.settings import get_settings
from refinekit.result import Err, Ok, Result

logger = logging.getLogger(__name__)

# --- Integer guards ---


@dataclass(frozen=True, slots=True)
class BelowRange:
    """*value* fell below the lower *bound* (strict or inclusive per guard)."""

    bound: int
    value: int
    inclusive: bool


@dataclass(frozen=True, slots=True)
class AboveRange:
    """*value* rose above the upper *bound* (strict or inclusive per guard)."""

    bound: int
    value: int
    inclusive: bool


type IntError = BelowRange | AboveRange


def gt(bound: int, value: int) -> Result[int, IntError]:
    if value > bound:
        return Ok(value)
    return Err(BelowRange(bound=bound, value=value, inclusive=False))


def gte(bound: int, value: int) -> Result[int, IntError]:
    if value >= bound:
        return Ok(value)
    return Err(BelowRange(bound=bound, value=value, inclusive=True))


def lt(bound: int, value: int) -> Result[int, IntError]:
    if value < bound:
        return Ok(value)
    return Err(AboveRange(bound=bound, value=value, inclusive=False))


def lte(bound: int, value: int) -> Result[int, IntError]:
    if value <= bound:
        return Ok(value)
    return Err(AboveRange(bound=bound, value=value, inclusive=True))


def int_error_to_string(error: IntError) -> str:
    """Human-readable message for an integer guard failure."""
    if isinstance(error, BelowRange):
        relation = "at least" if error.inclusive else "greater than"
    else:
        relation = "at most" if error.inclusive else "less than"
    return f"Expected a value {relation} {error.bound}, got {error.value}"


# --- String guards ---


@dataclass(frozen=True, slots=True)
class TooShort:
    bound: int
    length: int


@dataclass(frozen=True, slots=True)
class TooLong:
    bound: int
    length: int


@dataclass(frozen=True, slots=True)
class NotMatchingRegex:
    pattern: str


type StringError = TooShort | TooLong | NotMatchingRegex


def min_length(bound: int, value: str) -> Result[str, StringError]:
    if len(value) < bound:
        return Err(TooShort(bound=bound, length=len(value)))
    return Ok(value)


def max_length(bound: int, value: str) -> Result[str, StringError]:
    if len(value) > bound:
        return Err(TooLong(bound=bound, length=len(value)))
    return Ok(value)


def regex_match(pattern: str, value: str) -> Result[str, StringError]:
    """Succeed if *pattern* matches anywhere in *value*.

    An unparsable pattern never matches, so it fails every input instead of
    raising ``re.error``.
    """
    compiled = _compile(pattern)
    if compiled is not None and compiled.search(value) is not None:
        return Ok(value)
    return Err(NotMatchingRegex(pattern=pattern))


def string_error_to_string(error: StringError) -> str:
    """Human-readable message for a string guard failure."""
    match error:
        case TooShort(bound=bound, length=length):
            return f"Expected at least {bound} characters, got {length}"
        case TooLong(bound=bound, length=length):
            return f"Expected at most {bound} characters, got {length}"
        case NotMatchingRegex(pattern=pattern):
            return f"Expected a value matching /{pattern}/"


def _compile(pattern: str) -> re.Pattern[str] | None:
    return _compiler(get_settings().regex_cache_size)(pattern)


@lru_cache(maxsize=4)
def _compiler(cache_size: int) -> Callable[[str], re.Pattern[str] | None]:
    @lru_cache(maxsize=cache_size)
    def compile_pattern(pattern: str) -> re.Pattern[str] | None:
        try:
            return re.compile(pattern)
        except re.error as exc:
            logger.debug("Invalid regex %r treated as never-matching: %s", pattern, exc)
            return None

    return compile_pattern
