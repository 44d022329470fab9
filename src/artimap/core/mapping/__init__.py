"""Coordinate rewrite rules: the store and the fragment loader that fills it."""
from __future__ import annotations

from .fragments import (
    FragmentLoader,
    FragmentSources,
    MappingEntry,
    load_mappings,
    parse_fragment,
    read_fragment,
)
from .store import MappingStore

__all__ = [
    "MappingStore",
    "MappingEntry",
    "FragmentSources",
    "FragmentLoader",
    "parse_fragment",
    "read_fragment",
    "load_mappings",
]
