"""artimap configuration: layered YAML, env overrides, schema validation."""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .manager import ConfigManager, get_project_config_dir, get_user_config_dir

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "get_cached_config",
    "clear_all_caches",
    "get_user_config_dir",
    "get_project_config_dir",
]
