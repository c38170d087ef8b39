"""Refined — values of ``A`` that can only exist after passing a guard.

A ``Refined[I, A, E]`` bundles everything needed to work with a validated
type: the guard ``I -> Result[A, E]``, a decoder and encoder for the base
type ``I``, an error renderer, and ``unbox: A -> I``.

INVARIANT: Every ``A`` obtained through a bundle passed its guard. For
``Opaque`` subclasses this is enforced: calling the class raises, and the
only way to mint an instance is the guard built by :meth:`Refined.opaque`.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, Self

from pydantic import JsonValue
from pydantic_core import from_json, to_json

from refinekit.codec import Decoder, Encoder, encoder_of
from refinekit.errors import DecodeError
from refinekit.result import Err, Ok, Result


@functools.total_ordering
class Opaque[I]:
    """Immutable wrapper around a validated base value.

    Subclass once per refined type::

        class Percent(Opaque[int]):
            pass

        PERCENT = Refined.opaque(Percent, int, percent_guard, int_error_to_string)

    Instances compare, hash, and order by their base value (instances of
    different subclasses are never equal).
    """

    __slots__ = ("_value",)

    _value: I

    def __init__(self, *args: object, **kwargs: object) -> None:
        raise TypeError(
            f"{type(self).__name__} cannot be constructed directly; "
            "use the Refined bundle's build() or decode()"
        )

    @classmethod
    def _seal(cls, value: I) -> Self:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_value", value)
        return instance

    @property
    def value(self) -> I:
        return self._value

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value  # type: ignore[attr-defined]

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value < other._value  # type: ignore[attr-defined,operator]

    def __hash__(self) -> int:
        return hash((type(self), self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class Refined[I, A, E]:
    """Guard, base codec, error renderer, and unboxer for one refined type."""

    __slots__ = ("_guard", "_decode_base", "_encode_base", "_error_to_string", "_unbox")

    def __init__(
        self,
        guard: Callable[[I], Result[A, E]],
        decode_base: Decoder[I],
        encode_base: Encoder[I],
        error_to_string: Callable[[E], str],
        unbox: Callable[[A], I],
    ) -> None:
        self._guard = guard
        self._decode_base = decode_base
        self._encode_base = encode_base
        self._error_to_string = error_to_string
        self._unbox = unbox

    @classmethod
    def define(
        cls,
        guard: Callable[[I], Result[A, E]],
        decode_base: Decoder[I],
        encode_base: Encoder[I],
        error_to_string: Callable[[E], str],
        unbox: Callable[[A], I],
    ) -> Refined[I, A, E]:
        return cls(guard, decode_base, encode_base, error_to_string, unbox)

    @classmethod
    def opaque[O: Opaque[Any]](
        cls,
        opaque_cls: type[O],
        base_type: type[I],
        guard: Callable[[I], Result[I, E]],
        error_to_string: Callable[[E], str],
    ) -> Refined[I, O, E]:
        """Bundle for an :class:`Opaque` subclass.

        *guard* validates (and may normalize) the base value; on success the
        result is sealed into *opaque_cls*. The base codec comes from pydantic.
        """

        def sealing_guard(raw: I) -> Result[O, E]:
            return guard(raw).map(opaque_cls._seal)

        return cls(
            sealing_guard,
            Decoder.of(base_type),
            encoder_of(base_type),
            error_to_string,
            lambda wrapped: wrapped.value,
        )

    def build(self, raw: I) -> Result[A, E]:
        """Run the guard. This is the only way to obtain an ``A``."""
        return self._guard(raw)

    def unbox(self, value: A) -> I:
        return self._unbox(value)

    def error_to_string(self, error: E) -> str:
        return self._error_to_string(error)

    def decode(self, raw: Any) -> Result[A, DecodeError]:
        """Decode the base value, then run the guard on it."""
        base = self._decode_base.decode_value(raw)
        if isinstance(base, Err):
            return base
        built = self._guard(base.value)
        if isinstance(built, Err):
            return Err(
                DecodeError(
                    code="guard",
                    message=self._error_to_string(built.error),
                    detail={"input": repr(base.value)},
                )
            )
        return built

    def encode(self, value: A) -> JsonValue:
        return self._encode_base(self._unbox(value))

    @property
    def decoder(self) -> Decoder[A]:
        return Decoder(self.decode)

    @property
    def encoder(self) -> Encoder[A]:
        return self.encode

    # --- KeySpace protocol (string-keyed maps) ---

    def to_key_string(self, value: A) -> str:
        """Bare string form: JSON strings lose their quotes, others stay as JSON text.

        An int-backed value ``7`` renders as ``"7"``; a str-backed ``"abc"``
        renders as ``"abc"`` (not ``'"abc"'``).
        """
        encoded = self.encode(value)
        if isinstance(encoded, str):
            return encoded
        return to_json(encoded).decode("utf-8")

    def from_key_string(self, text: str) -> Result[A, str]:
        """Inverse of :meth:`to_key_string`.

        *text* is first decoded as a string value. Only when that is rejected
        for its type (the base type is not ``str``) and *text* is valid JSON,
        e.g. ``"7"`` for an int-backed type, is the parsed value decoded
        instead. A string that reached the guard keeps the guard's message.
        """
        as_string = self.decode(text)
        if isinstance(as_string, Ok):
            return as_string
        if as_string.error.code != "type":
            return Err(as_string.error.render())
        try:
            parsed = from_json(text)
        except ValueError:
            return Err(as_string.error.render())
        return self.decode(parsed).map_err(DecodeError.render)
