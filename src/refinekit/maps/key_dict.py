"""KeyDict — ordered map whose identity and order come from ``to_key(key)``.

Two keys that derive the same comparable value are the same entry: a later
insert replaces both the stored key and its value. Backed by a persistent AVL
tree, so insert/remove/get are O(log n) and old versions stay valid.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, Self

from refinekit.maps import _avl
from refinekit.maps.base import _MISSING, SortedMap


class KeyDict[K, V](SortedMap[K, V]):
    """Immutable ordered map keyed by ``K`` and ordered by ``to_key(K)``.

    Usage::

        by_len = KeyDict.from_list(len, [("aa", 1), ("b", 2), ("cc", 3)])
        by_len.to_list()   # [("b", 2), ("cc", 3)]
    """

    __slots__ = ("_to_key", "_root")

    def __init__(self, to_key: Callable[[K], Any], root: _avl.Node | None = None) -> None:
        self._to_key = to_key
        self._root = root

    @classmethod
    def empty(cls, to_key: Callable[[K], Any]) -> KeyDict[K, V]:
        return cls(to_key)

    @classmethod
    def singleton(cls, to_key: Callable[[K], Any], key: K, value: V) -> KeyDict[K, V]:
        return cls(to_key).insert(key, value)

    @classmethod
    def from_list(
        cls, to_key: Callable[[K], Any], pairs: Iterable[tuple[K, V]]
    ) -> KeyDict[K, V]:
        """Insert *pairs* left to right; later duplicates win."""
        return cls(to_key).insert_all(pairs)

    @property
    def to_key(self) -> Callable[[K], Any]:
        return self._to_key

    def _with_root(self, root: _avl.Node | None) -> Self:
        return type(self)(self._to_key, root)

    # --- SortedMap primitives ---

    def _derived(self, key: K) -> Any:
        return self._to_key(key)

    def _items(self) -> Iterator[tuple[K, V]]:
        for node in _avl.iter_nodes(self._root):
            yield node.key, node.value

    def _items_reversed(self) -> Iterator[tuple[K, V]]:
        for node in _avl.iter_nodes_reversed(self._root):
            yield node.key, node.value

    def _from_sorted(self, items: list[tuple[K, V]]) -> Self:
        to_key = self._to_key
        return self._with_root(_avl.from_sorted([(to_key(k), k, v) for k, v in items]))

    def _lookup(self, key: K) -> V:
        node = _avl.lookup(self._root, self._to_key(key))
        return _MISSING if node is None else node.value

    def insert(self, key: K, value: V) -> Self:
        return self._with_root(_avl.insert(self._root, self._to_key(key), key, value))

    def remove(self, key: K) -> Self:
        root = _avl.remove(self._root, self._to_key(key))
        if root is self._root:
            return self
        return self._with_root(root)

    def size(self) -> int:
        return _avl.size(self._root)

    # --- Overrides that keep the tree shape ---

    def map[W](self, func: Callable[[K, V], W]) -> KeyDict[K, W]:
        return self._with_root(_avl.map_values(self._root, func))  # type: ignore[return-value]

    def get_entry(self, key: K) -> tuple[K, V] | None:
        """Stored ``(key, value)`` matching *key*'s derived key.

        The stored key can differ from *key* when both derive the same value.
        """
        node = _avl.lookup(self._root, self._to_key(key))
        return None if node is None else (node.key, node.value)
