"""Persistent AVL tree keyed by a comparable derived key.

Nodes are never mutated; insert/remove copy the search path and share every
other subtree with the previous version. Each node stores the derived key
``ckey`` plus the caller's original ``(key, value)`` pair, and caches its
height and subtree size.

INVARIANT: For every node, ``abs(height(left) - height(right)) <= 1`` and
all ``ckey`` values in ``left`` < ``ckey`` < all in ``right``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any


class Node:
    __slots__ = ("ckey", "key", "value", "left", "right", "height", "size")

    def __init__(
        self,
        ckey: Any,
        key: Any,
        value: Any,
        left: Node | None,
        right: Node | None,
    ) -> None:
        self.ckey = ckey
        self.key = key
        self.value = value
        self.left = left
        self.right = right
        self.height = 1 + max(height(left), height(right))
        self.size = 1 + size(left) + size(right)


def height(node: Node | None) -> int:
    return 0 if node is None else node.height


def size(node: Node | None) -> int:
    return 0 if node is None else node.size


def _rotate_right(node: Node) -> Node:
    pivot = node.left
    assert pivot is not None
    lowered = Node(node.ckey, node.key, node.value, pivot.right, node.right)
    return Node(pivot.ckey, pivot.key, pivot.value, pivot.left, lowered)


def _rotate_left(node: Node) -> Node:
    pivot = node.right
    assert pivot is not None
    lowered = Node(node.ckey, node.key, node.value, node.left, pivot.left)
    return Node(pivot.ckey, pivot.key, pivot.value, lowered, pivot.right)


def _balanced(ckey: Any, key: Any, value: Any, left: Node | None, right: Node | None) -> Node:
    """Build a node, rotating once or twice if the children differ by 2."""
    diff = height(left) - height(right)
    if diff > 1:
        assert left is not None
        if height(left.left) < height(left.right):
            left = _rotate_left(left)
        return _rotate_right(Node(ckey, key, value, left, right))
    if diff < -1:
        assert right is not None
        if height(right.right) < height(right.left):
            right = _rotate_right(right)
        return _rotate_left(Node(ckey, key, value, left, right))
    return Node(ckey, key, value, left, right)


def insert(node: Node | None, ckey: Any, key: Any, value: Any) -> Node:
    """Insert or replace; a matching ``ckey`` replaces both key and value."""
    if node is None:
        return Node(ckey, key, value, None, None)
    if ckey < node.ckey:
        left = insert(node.left, ckey, key, value)
        return _balanced(node.ckey, node.key, node.value, left, node.right)
    if node.ckey < ckey:
        right = insert(node.right, ckey, key, value)
        return _balanced(node.ckey, node.key, node.value, node.left, right)
    return Node(ckey, key, value, node.left, node.right)


def _pop_min(node: Node) -> tuple[Node, Node | None]:
    """Return ``(min_node, tree_without_min)``."""
    if node.left is None:
        return node, node.right
    smallest, rest = _pop_min(node.left)
    return smallest, _balanced(node.ckey, node.key, node.value, rest, node.right)


def remove(node: Node | None, ckey: Any) -> Node | None:
    """Remove ``ckey``; returns *node* itself (same object) when absent."""
    if node is None:
        return None
    if ckey < node.ckey:
        left = remove(node.left, ckey)
        if left is node.left:
            return node
        return _balanced(node.ckey, node.key, node.value, left, node.right)
    if node.ckey < ckey:
        right = remove(node.right, ckey)
        if right is node.right:
            return node
        return _balanced(node.ckey, node.key, node.value, node.left, right)
    if node.left is None:
        return node.right
    if node.right is None:
        return node.left
    successor, right = _pop_min(node.right)
    return _balanced(successor.ckey, successor.key, successor.value, node.left, right)


def lookup(node: Node | None, ckey: Any) -> Node | None:
    while node is not None:
        if ckey < node.ckey:
            node = node.left
        elif node.ckey < ckey:
            node = node.right
        else:
            return node
    return None


def iter_nodes(node: Node | None) -> Iterator[Node]:
    """In-order (ascending ``ckey``) traversal."""
    stack: list[Node] = []
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node
        node = node.right


def iter_nodes_reversed(node: Node | None) -> Iterator[Node]:
    """Reverse in-order (descending ``ckey``) traversal."""
    stack: list[Node] = []
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.right
        node = stack.pop()
        yield node
        node = node.left


def from_sorted(entries: Sequence[tuple[Any, Any, Any]]) -> Node | None:
    """Balanced tree from ``(ckey, key, value)`` triples already in strictly ascending order."""

    def build(lo: int, hi: int) -> Node | None:
        if lo >= hi:
            return None
        mid = (lo + hi) // 2
        ckey, key, value = entries[mid]
        return Node(ckey, key, value, build(lo, mid), build(mid + 1, hi))

    return build(0, len(entries))


def map_values(node: Node | None, func: Callable[[Any, Any], Any]) -> Node | None:
    """Same shape, values replaced by ``func(key, value)``."""
    if node is None:
        return None
    left = map_values(node.left, func)
    value = func(node.key, node.value)
    return Node(node.ckey, node.key, value, left, map_values(node.right, func))
