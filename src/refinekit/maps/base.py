"""SortedMap — the ordered-map contract shared by KeyDict and TrieDict.

Subclasses provide storage (a balanced tree or a character trie) through a
handful of primitives; traversal, folds, filtering, and the set-like
operations are implemented here once, on top of ascending iteration.

INVARIANT: Maps are immutable values. Every operation that looks like a
mutation returns a new map and leaves ``self`` and its arguments untouched.
Binary operations (union, intersect, diff, merge) expect both maps to order
keys the same way; results adopt the left operand's configuration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Self

_MISSING: Any = object()


class SortedMap[K, V](ABC):
    """Immutable map ordered by a derived comparable key."""

    __slots__ = ()

    # --- Storage primitives ---

    @abstractmethod
    def _derived(self, key: K) -> Any:
        """Comparable key used for ordering and uniqueness."""
        ...

    @abstractmethod
    def _items(self) -> Iterator[tuple[K, V]]:
        """Entries in ascending derived-key order."""
        ...

    @abstractmethod
    def _items_reversed(self) -> Iterator[tuple[K, V]]:
        """Entries in descending derived-key order."""
        ...

    @abstractmethod
    def _from_sorted(self, items: list[tuple[K, V]]) -> Self:
        """New map with this map's configuration holding *items*.

        *items* are already in strictly ascending derived-key order.
        """
        ...

    @abstractmethod
    def _lookup(self, key: K) -> V:
        """Stored value for *key*, or ``_MISSING``."""
        ...

    @abstractmethod
    def insert(self, key: K, value: V) -> Self:
        """Add or replace the entry whose derived key matches *key*."""
        ...

    @abstractmethod
    def remove(self, key: K) -> Self:
        """Drop the entry for *key*; returns ``self`` if there is none."""
        ...

    @abstractmethod
    def size(self) -> int: ...

    # --- Queries ---

    def get(self, key: K) -> V | None:
        value = self._lookup(key)
        return None if value is _MISSING else value

    def member(self, key: K) -> bool:
        return self._lookup(key) is not _MISSING

    def is_empty(self) -> bool:
        return self.size() == 0

    def keys(self) -> list[K]:
        return [key for key, _ in self._items()]

    def values(self) -> list[V]:
        return [value for _, value in self._items()]

    def to_list(self) -> list[tuple[K, V]]:
        return list(self._items())

    # --- Updates ---

    def update(self, key: K, func: Callable[[V | None], V | None]) -> Self:
        """Replace the entry for *key* with ``func(current)``.

        ``func`` receives the current value or None; returning None removes
        the entry, anything else inserts or replaces it under *key*. A stored
        None value is indistinguishable from absence here, so
        ``update(key, lambda v: v)`` drops an entry whose value is None.
        """
        updated = func(self.get(key))
        if updated is None:
            return self.remove(key)
        return self.insert(key, updated)

    def insert_all(self, pairs: Iterable[tuple[K, V]]) -> Self:
        """Left fold of :meth:`insert`; later pairs win on derived-key collisions."""
        result = self
        for key, value in pairs:
            result = result.insert(key, value)
        return result

    # --- Transforms ---

    def map[W](self, func: Callable[[K, V], W]) -> SortedMap[K, W]:
        """Same keys and order, values replaced by ``func(key, value)``."""
        mapped = [(key, func(key, value)) for key, value in self._items()]
        return self._from_sorted(mapped)  # type: ignore[arg-type]

    def foldl[A](self, func: Callable[[K, V, A], A], initial: A) -> A:
        """Fold entries from lowest to highest derived key."""
        acc = initial
        for key, value in self._items():
            acc = func(key, value, acc)
        return acc

    def foldr[A](self, func: Callable[[K, V, A], A], initial: A) -> A:
        """Fold entries from highest to lowest derived key."""
        acc = initial
        for key, value in self._items_reversed():
            acc = func(key, value, acc)
        return acc

    def filter(self, predicate: Callable[[K, V], bool]) -> Self:
        return self._from_sorted([(k, v) for k, v in self._items() if predicate(k, v)])

    def partition(self, predicate: Callable[[K, V], bool]) -> tuple[Self, Self]:
        """``(matching, non_matching)``, both in the original order."""
        matching: list[tuple[K, V]] = []
        rest: list[tuple[K, V]] = []
        for key, value in self._items():
            (matching if predicate(key, value) else rest).append((key, value))
        return self._from_sorted(matching), self._from_sorted(rest)

    # --- Combining two maps ---

    def merge[A](
        self,
        other: SortedMap[K, Any],
        only_left: Callable[[K, V, A], A],
        both: Callable[[K, V, Any, A], A],
        only_right: Callable[[K, Any, A], A],
        initial: A,
    ) -> A:
        """Walk the union of both maps' keys in ascending order.

        For each derived key calls ``only_left(k, v, acc)``,
        ``both(k, left_v, right_v, acc)`` or ``only_right(k, v, acc)``.
        In ``both`` the key is the left map's key.
        """
        acc = initial
        left_iter = self._items()
        right_iter = other._items()
        left = next(left_iter, None)
        right = next(right_iter, None)
        while left is not None and right is not None:
            left_ckey = self._derived(left[0])
            right_ckey = other._derived(right[0])
            if left_ckey < right_ckey:
                acc = only_left(left[0], left[1], acc)
                left = next(left_iter, None)
            elif right_ckey < left_ckey:
                acc = only_right(right[0], right[1], acc)
                right = next(right_iter, None)
            else:
                acc = both(left[0], left[1], right[1], acc)
                left = next(left_iter, None)
                right = next(right_iter, None)
        while left is not None:
            acc = only_left(left[0], left[1], acc)
            left = next(left_iter, None)
        while right is not None:
            acc = only_right(right[0], right[1], acc)
            right = next(right_iter, None)
        return acc

    def union(self, other: SortedMap[K, V]) -> Self:
        """All entries of ``self`` plus entries of *other* with unseen keys."""
        return self._from_sorted(
            self.merge(
                other,
                lambda k, v, acc: _append(acc, k, v),
                lambda k, v, _other, acc: _append(acc, k, v),
                lambda k, v, acc: _append(acc, k, v),
                [],
            )
        )

    def intersect(self, other: SortedMap[K, Any]) -> Self:
        """Entries of ``self`` whose key is also present in *other*."""
        return self._from_sorted(
            self.merge(
                other,
                lambda _k, _v, acc: acc,
                lambda k, v, _other, acc: _append(acc, k, v),
                lambda _k, _v, acc: acc,
                [],
            )
        )

    def diff(self, other: SortedMap[K, Any]) -> Self:
        """Entries of ``self`` whose key is absent from *other*."""
        return self._from_sorted(
            self.merge(
                other,
                lambda k, v, acc: _append(acc, k, v),
                lambda _k, _v, _other, acc: acc,
                lambda _k, _v, acc: acc,
                [],
            )
        )

    # --- Python protocols ---

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[K]:
        for key, _ in self._items():
            yield key

    def __contains__(self, key: object) -> bool:
        return self.member(key)  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, SortedMap)
        return self.size() == other.size() and self.to_list() == other.to_list()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self._items())
        return f"{type(self).__name__}({{{body}}})"


def _append[K, V](acc: list[tuple[K, V]], key: K, value: V) -> list[tuple[K, V]]:
    acc.append((key, value))
    return acc
