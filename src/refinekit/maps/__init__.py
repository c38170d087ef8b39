"""Ordered maps keyed by derived keys, Enum/Refined values, or raw strings."""

from refinekit.maps.base import SortedMap
from refinekit.maps.key_dict import KeyDict
from refinekit.maps.string_key_dict import KeySpace, StringKeyDict
from refinekit.maps.trie_dict import TrieDict

__all__ = ["KeyDict", "KeySpace", "SortedMap", "StringKeyDict", "TrieDict"]
