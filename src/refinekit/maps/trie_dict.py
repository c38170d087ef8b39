"""TrieDict — string-keyed ordered map stored as a character trie.

Each node holds an optional value and its children keyed by the next
character. Children dicts are kept in ascending character order and never
mutated after construction; updates copy the path from the root to the
changed node and share everything else.

Depth-first traversal visiting a node's own value before its children yields
keys in ascending lexicographic (code point) order. Descending order has to
keep every pending subtree on the stack until its children are exhausted,
so ``foldr`` costs more memory than ``foldl``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Self

from refinekit.codec import Decoder, Encoder
from refinekit.errors import DecodeError
from refinekit.maps.base import _MISSING, SortedMap
from refinekit.result import Ok, Result


class _TrieNode:
    __slots__ = ("value", "children", "size")

    def __init__(self, value: Any, children: dict[str, _TrieNode], size: int) -> None:
        self.value = value
        self.children = children
        self.size = size


_EMPTY = _TrieNode(_MISSING, {}, 0)


def _with_child(
    children: dict[str, _TrieNode], char: str, child: _TrieNode
) -> dict[str, _TrieNode]:
    """Copy of *children* with *char* set to *child* (dropped if empty), kept sorted."""
    if child.size == 0:
        return {c: n for c, n in children.items() if c != char}
    if char in children:
        return {c: (child if c == char else n) for c, n in children.items()}
    return dict(sorted([*children.items(), (char, child)]))


class TrieDict[V](SortedMap[str, V]):
    """Immutable map from ``str`` to ``V`` with prefix-shared storage."""

    __slots__ = ("_root",)

    def __init__(self, root: _TrieNode = _EMPTY) -> None:
        self._root = root

    @classmethod
    def empty(cls) -> TrieDict[V]:
        return cls()

    @classmethod
    def singleton(cls, key: str, value: V) -> TrieDict[V]:
        return cls().insert(key, value)

    @classmethod
    def from_list(cls, pairs: Iterable[tuple[str, V]]) -> TrieDict[V]:
        """Insert *pairs* left to right; later duplicates win."""
        return cls().insert_all(pairs)

    # --- SortedMap primitives ---

    def _derived(self, key: str) -> str:
        return key

    def _find_node(self, key: str) -> _TrieNode | None:
        node = self._root
        for char in key:
            child = node.children.get(char)
            if child is None:
                return None
            node = child
        return node

    def _lookup(self, key: str) -> V:
        node = self._find_node(key)
        return _MISSING if node is None else node.value

    def _items(self) -> Iterator[tuple[str, V]]:
        stack: list[tuple[str, _TrieNode]] = [("", self._root)]
        while stack:
            prefix, node = stack.pop()
            if node.value is not _MISSING:
                yield prefix, node.value
            for char, child in reversed(node.children.items()):
                stack.append((prefix + char, child))

    def _items_reversed(self) -> Iterator[tuple[str, V]]:
        # (prefix, node, children_pushed): a node's own value comes after all
        # of its descendants in descending order.
        stack: list[tuple[str, _TrieNode, bool]] = [("", self._root, False)]
        while stack:
            prefix, node, expanded = stack.pop()
            if expanded:
                yield prefix, node.value
                continue
            if node.value is not _MISSING:
                stack.append((prefix, node, True))
            for char, child in node.children.items():
                stack.append((prefix + char, child, False))

    def _from_sorted(self, items: list[tuple[str, V]]) -> Self:
        return type(self)().insert_all(items)

    def insert(self, key: str, value: V) -> Self:
        path: list[tuple[_TrieNode, str]] = []
        node = self._root
        for char in key:
            path.append((node, char))
            node = node.children.get(char, _EMPTY)
        added = 1 if node.value is _MISSING else 0
        rebuilt = _TrieNode(value, node.children, node.size + added)
        for parent, char in reversed(path):
            rebuilt = _TrieNode(
                parent.value,
                _with_child(parent.children, char, rebuilt),
                parent.size + added,
            )
        return type(self)(rebuilt)

    def remove(self, key: str) -> Self:
        path: list[tuple[_TrieNode, str]] = []
        node = self._root
        for char in key:
            child = node.children.get(char)
            if child is None:
                return self
            path.append((node, char))
            node = child
        if node.value is _MISSING:
            return self
        rebuilt = _TrieNode(_MISSING, node.children, node.size - 1)
        for parent, char in reversed(path):
            rebuilt = _TrieNode(
                parent.value,
                _with_child(parent.children, char, rebuilt),
                parent.size - 1,
            )
        return type(self)(rebuilt)

    def size(self) -> int:
        return self._root.size

    # --- Prefix operations ---

    def with_prefix(self, prefix: str) -> Self:
        """Entries whose key starts with *prefix*, sharing the subtree."""
        node = self._find_node(prefix)
        if node is None:
            return type(self)()
        for char in reversed(prefix):
            node = _TrieNode(_MISSING, {char: node}, node.size)
        return type(self)(node)

    # --- JSON ---

    @classmethod
    def decoder(cls, value_decoder: Decoder[V]) -> Decoder[TrieDict[V]]:
        """Decode a JSON object into a TrieDict."""

        def build(items: list[tuple[str, V]]) -> Result[TrieDict[V], DecodeError]:
            return Ok(cls.from_list(items))

        return value_decoder.object_items().and_then(build)

    def encode(self, value_encoder: Encoder[V]) -> dict[str, Any]:
        """JSON object with keys in ascending order."""
        return {key: value_encoder(value) for key, value in self._items()}

