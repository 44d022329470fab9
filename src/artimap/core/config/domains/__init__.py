"""Typed accessors for the sections of the merged configuration."""
from __future__ import annotations

from .installer import InstallerConfig
from .logging import LoggingConfig
from .resolver import ResolverConfig

__all__ = ["ResolverConfig", "InstallerConfig", "LoggingConfig"]
