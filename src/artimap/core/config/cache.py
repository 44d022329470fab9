"""Centralized configuration caching.

Loaded configuration is cached per repository root. The cache key includes
the ``ARTIMAP_*`` environment and the name, mtime and size of every config
file, so edits and env changes are picked up without explicit invalidation.
"""
from __future__ import annotations

import copy
import hashlib
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from artimap.core.utils.io import iter_yaml_files

if TYPE_CHECKING:
    from .manager import ConfigManager

_config_cache: Dict[str, Dict[str, Any]] = {}


def _fingerprint_dir(directory: Path) -> List[Tuple[str, int, int]]:
    files: List[Tuple[str, int, int]] = []
    for p in iter_yaml_files(directory):
        try:
            st = p.stat()
            files.append((str(p), int(st.st_mtime_ns), int(st.st_size)))
        except OSError:
            files.append((str(p), 0, 0))
    return files


def _cache_key(manager: "ConfigManager", validate: bool) -> str:
    from .manager import ENV_PREFIX

    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    dirs = [_fingerprint_dir(d) for d in manager.config_dirs()]
    digest = hashlib.sha256(repr((env_items, dirs)).encode("utf-8")).hexdigest()[:16]
    return f"{manager.repo_root}:{'validated' if validate else 'raw'}:{digest}"


def get_cached_config(manager: "ConfigManager", *, validate: bool = True) -> Dict[str, Any]:
    key = _cache_key(manager, validate)
    cached = _config_cache.get(key)
    if cached is None:
        cached = manager._load_config_uncached(validate=validate)
        _config_cache[key] = cached
    return copy.deepcopy(cached)


def clear_all_caches() -> None:
    """Drop every cached configuration (used by tests)."""
    _config_cache.clear()


__all__ = ["get_cached_config", "clear_all_caches"]
