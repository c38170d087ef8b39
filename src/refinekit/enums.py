"""Enum — a closed list of values with a canonical string rendering.

INVARIANT: No two values render to the same string. This is the caller's
obligation and is not checked at construction. If it is violated anyway,
``find`` deterministically returns the first-defined value.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from refinekit.codec import Decoder, Encoder
from refinekit.config.settings import get_settings
from refinekit.errors import DecodeError
from refinekit.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class Enum[A]:
    """Ordered legal values of ``A`` plus ``A -> str``.

    Usage::

        PET = Enum.make([Pet.CAT, Pet.DOG], lambda p: p.name.title())
        PET.find("Dog")       # Pet.DOG
        PET.decode("Fish")    # Err(DecodeError(... "Fish" ...))
    """

    __slots__ = ("_values", "_to_string")

    def __init__(self, values: tuple[A, ...], to_string: Callable[[A], str]) -> None:
        self._values = values
        self._to_string = to_string

    @classmethod
    def make(cls, values: Iterable[A], to_string: Callable[[A], str]) -> Enum[A]:
        """Build an Enum from *values* in definition order. No validation."""
        result = cls(tuple(values), to_string)
        if get_settings().check_enum_distinct:
            result._warn_on_collisions()
        return result

    @classmethod
    def from_members[M: enum.Enum](cls, enum_cls: type[M]) -> Enum[M]:
        """Enum over a Python ``enum.Enum`` class.

        ``str`` values (``StrEnum`` members) render as their value, anything
        else renders as the member name.
        """

        def render(member: M) -> str:
            return member.value if isinstance(member.value, str) else member.name

        return cls.make(list(enum_cls), render)

    @property
    def values(self) -> tuple[A, ...]:
        return self._values

    def to_string(self, value: A) -> str:
        return self._to_string(value)

    def find(self, text: str) -> A | None:
        """First value (in definition order) rendering to *text*, else None."""
        for value in self._values:
            if self._to_string(value) == text:
                return value
        return None

    def decode(self, raw: Any) -> Result[A, DecodeError]:
        """Decode a raw JSON value; it must be a string naming one of the values."""
        if not isinstance(raw, str):
            return Err(
                DecodeError(
                    code="type",
                    message=f"Expected a string, got {raw!r}",
                    detail={"input": repr(raw)},
                )
            )
        found = self.find(raw)
        if found is None:
            return Err(
                DecodeError(
                    code="unknown_value",
                    message=f"Unknown enum value: {raw!r}",
                    detail={"input": raw},
                )
            )
        return Ok(found)

    def encode(self, value: A) -> str:
        return self._to_string(value)

    @property
    def decoder(self) -> Decoder[A]:
        return Decoder(self.decode)

    @property
    def encoder(self) -> Encoder[A]:
        return self.encode

    # --- KeySpace protocol (string-keyed maps) ---

    def to_key_string(self, value: A) -> str:
        return self._to_string(value)

    def from_key_string(self, text: str) -> Result[A, str]:
        found = self.find(text)
        if found is None:
            return Err(f"Unknown enum value: {text!r}")
        return Ok(found)

    # --- Python protocols ---

    def __iter__(self) -> Iterator[A]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __repr__(self) -> str:
        rendered = ", ".join(self._to_string(v) for v in self._values)
        return f"Enum([{rendered}])"

    def _warn_on_collisions(self) -> None:
        counts = Counter(self._to_string(v) for v in self._values)
        duplicates = sorted(text for text, n in counts.items() if n > 1)
        if duplicates:
            logger.warning(
                "Enum values render to the same string; find() returns the first: %s",
                duplicates,
            )
