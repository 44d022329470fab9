"""Domain-specific configuration for package installation."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class InstallerConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "installer"

    @cached_property
    def metadata_dir(self) -> Path:
        # Always relative to the install root.
        return Path(str(self.section.get("metadataDir") or "usr/share/maven-metadata").lstrip("/"))

    @cached_property
    def skip_versions(self) -> bool:
        return bool(self.section.get("skipVersions", False))


__all__ = ["InstallerConfig"]
