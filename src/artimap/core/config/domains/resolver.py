"""Domain-specific configuration for mapping fragments and repositories."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import List, Optional, Tuple

from artimap.core.mapping.fragments import FragmentSources

from ..base import BaseDomainConfig


def _optional_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    text = str(value).strip()
    return Path(text) if text else None


class ResolverConfig(BaseDomainConfig):
    """Fragment tier locations and artifact repositories (``resolver`` section)."""

    def _config_section(self) -> str:
        return "resolver"

    @cached_property
    def root(self) -> Path:
        return Path(str(self.section.get("root") or "/")).expanduser()

    @cached_property
    def versionless_depmap(self) -> Optional[Path]:
        return _optional_path(self.section.get("versionlessDepmap"))

    @cached_property
    def fragment_dirs(self) -> Tuple[Path, ...]:
        return tuple(Path(str(d)) for d in self.section.get("fragmentDirs") or [])

    @cached_property
    def local_depmap(self) -> Optional[Path]:
        return _optional_path(self.section.get("localDepmap"))

    @cached_property
    def repositories(self) -> List[Path]:
        """Repository directories, relative entries resolved against ``root``."""
        out: List[Path] = []
        for raw in self.section.get("repositories") or []:
            p = Path(str(raw)).expanduser()
            out.append(p if p.is_absolute() else self.root / p)
        return out

    def fragment_sources(self) -> FragmentSources:
        return FragmentSources(
            root=self.root,
            versionless_depmap=self.versionless_depmap,
            fragment_dirs=self.fragment_dirs,
            local_depmap=self.local_depmap,
        )


__all__ = ["ResolverConfig"]
