"""StringKeyDict — KeyDict keyed by Enum or Refined values via their string form.

The keyspace (an :class:`~refinekit.enums.Enum` or
:class:`~refinekit.refined.Refined`) supplies ``to_key_string`` as the
derived key, so entries are ordered by canonical string. Adds JSON object
decoding/encoding and projections to plain string- or base-keyed maps.

Keys that render to the same string collide: the most recent insert wins.
Distinct Enum/Refined values are expected to render distinctly.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol, Self

from refinekit.codec import Decoder, Encoder
from refinekit.errors import DecodeError, RefinekitError
from refinekit.maps import _avl
from refinekit.maps.key_dict import KeyDict
from refinekit.maps.trie_dict import TrieDict
from refinekit.refined import Refined
from refinekit.result import Err, Ok, Result


class KeySpace[K](Protocol):
    """What a string-keyed map needs from its key type."""

    def to_key_string(self, value: K) -> str: ...

    def from_key_string(self, text: str) -> Result[K, str]: ...


class StringKeyDict[K, V](KeyDict[K, V]):
    """Ordered map keyed by Enum/Refined values, ordered by their string form."""

    __slots__ = ("_keyspace",)

    def __init__(self, keyspace: KeySpace[K], root: _avl.Node | None = None) -> None:
        super().__init__(keyspace.to_key_string, root)
        self._keyspace = keyspace

    @classmethod
    def empty(cls, keyspace: KeySpace[K]) -> StringKeyDict[K, V]:  # type: ignore[override]
        return cls(keyspace)

    @classmethod
    def singleton(  # type: ignore[override]
        cls, keyspace: KeySpace[K], key: K, value: V
    ) -> StringKeyDict[K, V]:
        return cls(keyspace).insert(key, value)

    @classmethod
    def from_list(  # type: ignore[override]
        cls, keyspace: KeySpace[K], pairs: Iterable[tuple[K, V]]
    ) -> StringKeyDict[K, V]:
        return cls(keyspace).insert_all(pairs)

    @property
    def keyspace(self) -> KeySpace[K]:
        return self._keyspace

    def _with_root(self, root: _avl.Node | None) -> Self:
        return type(self)(self._keyspace, root)

    # --- JSON ---

    @classmethod
    def decoder(
        cls, keyspace: KeySpace[K], value_decoder: Decoder[V]
    ) -> Decoder[StringKeyDict[K, V]]:
        """Decode a JSON object, resolving each field name through *keyspace*.

        Fields are processed in document order and the first failure wins:
        an unresolvable field name fails with ``code="field"`` naming it, a
        failing value is reported at that field's path.
        """

        def run(raw: Any) -> Result[StringKeyDict[K, V], DecodeError]:
            if not isinstance(raw, dict):
                return Err(DecodeError(code="type", message=f"Expected an object, got {raw!r}"))
            entries: list[tuple[K, V]] = []
            for field, value in raw.items():
                key = keyspace.from_key_string(field)
                if isinstance(key, Err):
                    return Err(
                        DecodeError(
                            code="field",
                            message=f"Invalid key {field!r}: {key.error}",
                            detail={"field": field},
                        )
                    )
                decoded = value_decoder.decode_value(value)
                if isinstance(decoded, Err):
                    return Err(decoded.error.at(field))
                entries.append((key.value, decoded.value))
            return Ok(cls.from_list(keyspace, entries))

        return Decoder(run)

    def encode(self, value_encoder: Encoder[V]) -> dict[str, Any]:
        """JSON object keyed by each entry's canonical string, in ascending order."""
        to_key = self._keyspace.to_key_string
        return {to_key(key): value_encoder(value) for key, value in self._items()}

    @staticmethod
    def encoder(value_encoder: Encoder[V]) -> Encoder[StringKeyDict[Any, V]]:
        return lambda mapping: mapping.encode(value_encoder)

    # --- Projections ---

    def string_dict[W](self, func: Callable[[K, V], W]) -> TrieDict[W]:
        """Plain string-keyed map: canonical key strings, values ``func(key, value)``."""
        to_key = self._keyspace.to_key_string
        return TrieDict.from_list((to_key(k), func(k, v)) for k, v in self._items())

    def unboxed_dict[I, W](self, func: Callable[[K, V], W]) -> KeyDict[I, W]:
        """Map keyed by each Refined key's base value, values ``func(key, value)``.

        Raises:
            RefinekitError: If the keyspace is not a :class:`Refined` bundle.
        """
        keyspace = self._keyspace
        if not isinstance(keyspace, Refined):
            raise RefinekitError("unboxed_dict needs a Refined keyspace")
        return KeyDict.from_list(
            _identity, ((keyspace.unbox(k), func(k, v)) for k, v in self._items())
        )


def _identity[T](value: T) -> T:
    return value
