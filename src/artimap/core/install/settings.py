"""Installer settings shared by every package of an installation pass."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from artimap.core.config.domains.installer import InstallerConfig


@dataclass(frozen=True)
class InstallerSettings:
    # Relative to the install root.
    metadata_dir: Path = Path("usr/share/maven-metadata")
    skip_versions: bool = False

    @classmethod
    def from_config(cls, config: Optional["InstallerConfig"] = None) -> "InstallerSettings":
        if config is None:
            from artimap.core.config.domains.installer import InstallerConfig

            config = InstallerConfig()
        return cls(metadata_dir=config.metadata_dir, skip_versions=config.skip_versions)


__all__ = ["InstallerSettings"]
