"""Decoder and Encoder — the JSON collaborator behind every decode/encode.

refinekit never parses JSON itself. Base values are validated with pydantic
``TypeAdapter`` in strict mode and JSON text goes through pydantic-core.
A ``ValidationError`` never escapes a Decoder; it becomes ``Err(DecodeError)``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import JsonValue, TypeAdapter, ValidationError
from pydantic_core import from_json, to_json, to_jsonable_python

from refinekit.errors import DecodeError
from refinekit.result import Err, Ok, Result

logger = logging.getLogger(__name__)

type Encoder[T] = Callable[[T], JsonValue]


def _from_validation_error(exc: ValidationError, raw: Any) -> DecodeError:
    first = exc.errors(include_url=False)[0]
    return DecodeError(
        code="type",
        message=f"{first['msg']}, got {raw!r}",
        path=tuple(first["loc"]),
        detail={"type": first["type"], "error_count": exc.error_count()},
    )


class Decoder[T]:
    """A reusable ``raw value -> Result[T, DecodeError]`` function.

    Usage::

        ints = Decoder.of(int)
        ints.decode_value(3)        # Ok(3)
        ints.decode_string("[1]")   # Err(DecodeError(code="type", ...))
    """

    __slots__ = ("_run",)

    def __init__(self, run: Callable[[Any], Result[T, DecodeError]]) -> None:
        self._run = run

    @classmethod
    def of(cls, tp: type[T] | Any) -> Decoder[T]:
        """Strict pydantic decoder for *tp* (``int`` rejects ``"5"`` and ``True``)."""
        adapter: TypeAdapter[T] = TypeAdapter(tp)

        def run(raw: Any) -> Result[T, DecodeError]:
            try:
                return Ok(adapter.validate_python(raw, strict=True))
            except ValidationError as exc:
                return Err(_from_validation_error(exc, raw))

        return cls(run)

    @classmethod
    def succeed(cls, value: T) -> Decoder[T]:
        return cls(lambda _raw: Ok(value))

    @classmethod
    def fail(cls, message: str) -> Decoder[T]:
        error = DecodeError(code="fail", message=message)
        return cls(lambda _raw: Err(error))

    def decode_value(self, raw: Any) -> Result[T, DecodeError]:
        """Decode an already-parsed JSON-compatible Python value."""
        return self._run(raw)

    def decode_string(self, text: str | bytes) -> Result[T, DecodeError]:
        """Parse *text* as JSON, then decode the parsed value."""
        try:
            raw = from_json(text)
        except ValueError as exc:
            logger.debug("JSON parse failed: %s", exc)
            return Err(DecodeError(code="json", message=f"Invalid JSON: {exc}"))
        return self._run(raw)

    def map[U](self, func: Callable[[T], U]) -> Decoder[U]:
        return Decoder(lambda raw: self._run(raw).map(func))

    def and_then[U](self, func: Callable[[T], Result[U, DecodeError]]) -> Decoder[U]:
        """Chain a fallible step that runs on the decoded value."""
        return Decoder(lambda raw: self._run(raw).and_then(func))

    def object_items(self) -> Decoder[list[tuple[str, T]]]:
        """Decode a JSON object whose values all decode with this decoder.

        Returns the ``(field, value)`` pairs in document order. The first
        failing value is reported with its field name prepended to the path.
        """

        def run(raw: Any) -> Result[list[tuple[str, T]], DecodeError]:
            if not isinstance(raw, dict):
                return Err(
                    DecodeError(code="type", message=f"Expected an object, got {raw!r}")
                )
            items: list[tuple[str, T]] = []
            for field, value in raw.items():
                decoded = self._run(value)
                if isinstance(decoded, Err):
                    return Err(decoded.error.at(field))
                items.append((field, decoded.value))
            return Ok(items)

        return Decoder(run)


def encoder_of[T](tp: type[T] | Any) -> Encoder[T]:
    """Encoder producing the JSON-compatible form pydantic would emit for *tp*."""
    adapter: TypeAdapter[T] = TypeAdapter(tp)
    return lambda value: adapter.dump_python(value, mode="json")


def encode_jsonable(value: Any) -> JsonValue:
    """Generic fallback encoder for values pydantic knows how to serialize."""
    return to_jsonable_python(value)


def encode_string[T](encoder: Encoder[T], value: T) -> str:
    """Render *value* as compact JSON text."""
    return to_json(encoder(value)).decode("utf-8")
