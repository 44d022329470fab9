"""Shared utilities for artimap core (merging, file I/O, filesystem staging)."""
from __future__ import annotations

from .merge import deep_merge, merge_arrays
from .io import (
    atomic_write,
    ensure_directory,
    iter_yaml_files,
    read_yaml,
    write_text,
)

__all__ = [
    "deep_merge",
    "merge_arrays",
    "atomic_write",
    "ensure_directory",
    "iter_yaml_files",
    "read_yaml",
    "write_text",
]
