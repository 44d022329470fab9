"""
artimap configuration management (layered YAML, schema-validated).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import jsonschema
import yaml

from artimap.core.exceptions import ConfigError
from artimap.core.utils.io import iter_yaml_files, read_yaml
from artimap.core.utils.merge import deep_merge
from artimap.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ARTIMAP_"
DEFAULT_DIR_NAME = ".artimap"


def _paths_value(key: str) -> str:
    """Resolve ``paths.<key>`` from the environment, then bundled defaults."""
    env_value = os.environ.get(f"{ENV_PREFIX}paths__{key}", "").strip()
    if env_value:
        return env_value
    bundled = read_yaml(get_data_path("config", "paths.yaml"), default={})
    value = (bundled.get("paths") or {}).get(key) if isinstance(bundled, dict) else None
    return str(value).strip() if value else DEFAULT_DIR_NAME


def get_user_config_dir() -> Path:
    """Return the user config directory; relative values are under ``$HOME``."""
    p = Path(_paths_value("user_config_dir")).expanduser()
    return p if p.is_absolute() else Path.home() / p


def get_project_config_dir(repo_root: Path) -> Path:
    p = Path(_paths_value("project_config_dir")).expanduser()
    return p if p.is_absolute() else Path(repo_root) / p


class ConfigManager:
    """Load, merge, and validate artimap configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ARTIMAP_<section>__<key>
    2. Project-local config: <project-config-dir>/config.local/*.yaml (uncommitted)
    3. Project config: <project-config-dir>/config/*.yaml
    4. User config: <user-config-dir>/config/*.yaml
    5. Bundled defaults: artimap.data/config/*.yaml

    Files within a directory are merged in sorted filename order.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root or Path.cwd()).expanduser().resolve()

        project_dir = get_project_config_dir(self.repo_root)
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_dir = project_dir / "config"
        self.project_local_config_dir = project_dir / "config.local"
        self.schema_path = get_data_path("schemas", "config.schema.yaml")

    def config_dirs(self) -> List[Path]:
        """Return config directories in low→high precedence order (excluding env)."""
        return [
            self.core_config_dir,
            self.user_config_dir,
            self.project_config_dir,
            self.project_local_config_dir,
        ]

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: a broken config file must not be silently ignored.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping", context={"path": str(path)})
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            logger.debug("Loading config file: %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ========== Environment overrides ==========

    @staticmethod
    def _coerce_type(value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if low in {"null", "none"}:
            return None
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return s
        return s

    @staticmethod
    def _parse_env_key(raw: str, *, strict: bool) -> List[Union[str, int]]:
        segments = raw.split("__")
        if any(seg == "" for seg in segments):
            if strict:
                raise ConfigError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                    context={"key": raw},
                )
            return []
        return [int(seg) if seg.isdigit() else seg for seg in segments]

    def iter_env_overrides(self, *, strict: bool) -> Iterator[Tuple[List[Union[str, int]], Any]]:
        for key in sorted(os.environ):
            if not key.startswith(ENV_PREFIX):
                continue
            path = self._parse_env_key(key[len(ENV_PREFIX):], strict=strict)
            if path:
                yield path, self._coerce_type(os.environ[key])

    @staticmethod
    def _set_nested(root: Dict[str, Any], path: List[Union[str, int]], value: Any) -> None:
        current: Any = root
        for i, part in enumerate(path):
            last = i == len(path) - 1
            if isinstance(part, int):
                if not isinstance(current, list):
                    raise ConfigError(f"Index {part} applied to non-list config value")
                while len(current) <= part:
                    current.append(None)
                if last:
                    current[part] = value
                    return
                current = current[part]
                continue
            if not isinstance(current, dict):
                raise ConfigError(f"Key '{part}' applied to non-mapping config value")
            # Case-insensitive match so env keys can address camelCase config keys.
            existing = {k.lower(): k for k in current if isinstance(k, str)}
            key = existing.get(part.lower(), part)
            if last:
                current[key] = value
                return
            if not isinstance(current.get(key), (dict, list)):
                current[key] = [] if isinstance(path[i + 1], int) else {}
            current = current[key]

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        for path, value in self.iter_env_overrides(strict=strict):
            self._set_nested(cfg, path, value)

    # ========== Loading ==========

    def validate_schema(self, cfg: Dict[str, Any]) -> None:
        schema = read_yaml(self.schema_path, default={}, raise_on_error=True)
        try:
            jsonschema.Draft202012Validator(schema).validate(cfg)
        except jsonschema.ValidationError as exc:
            where = ".".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at {where}: {exc.message}",
                context={"path": where},
            ) from exc

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        for directory in self.config_dirs():
            cfg = self._load_directory(directory, cfg)
        self.apply_env_overrides(cfg, strict=validate)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load configuration through the central cache.

        The returned dict is shared; treat it as immutable.
        """
        from .cache import get_cached_config

        return get_cached_config(self, validate=validate)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('resolver.root')
            '/'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "get_user_config_dir", "get_project_config_dir", "ENV_PREFIX"]
