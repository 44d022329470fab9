"""Runtime context shared by the installer and the resolver.

The context is built once per process: configuration is loaded, logging is
configured, and mapping fragments are folded into a frozen
:class:`MappingStore`. Consumers receive the context explicitly instead of
reaching for module-level state.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from artimap.core.config import ConfigManager
from artimap.core.config.domains import InstallerConfig, LoggingConfig, ResolverConfig
from artimap.core.install import InstallerSettings, Package
from artimap.core.mapping import FragmentLoader, MappingStore
from artimap.core.resolver import FlatRepository, Resolver, WorkspaceReader
from artimap.core.stdlib_logging import configure_logging


@dataclass(frozen=True)
class ArtimapContext:
    repo_root: Path
    config: Dict[str, Any]
    mappings: MappingStore
    resolver_config: ResolverConfig
    installer_settings: InstallerSettings

    def new_package(self, name: str = "") -> Package:
        return Package(name, self.installer_settings)

    def repositories(self) -> list[FlatRepository]:
        return [FlatRepository(p) for p in self.resolver_config.repositories]

    def resolver(self, packages: Iterable[Package] = ()) -> Resolver:
        return Resolver(self.mappings, self.repositories(), packages)

    def workspace_reader(self, packages: Iterable[Package] = ()) -> WorkspaceReader:
        return WorkspaceReader(self.resolver(packages))


def load_context(repo_root: Optional[Path] = None, *, configure_logs: bool = True) -> ArtimapContext:
    """Load configuration and mappings for ``repo_root`` (default: CWD)."""
    manager = ConfigManager(repo_root)
    config = manager.load_config()

    if configure_logs:
        log_cfg = LoggingConfig(manager.repo_root, config=config)
        configure_logging(level=log_cfg.level, log_path=log_cfg.file)

    resolver_config = ResolverConfig(manager.repo_root, config=config)
    mappings = FragmentLoader(resolver_config.fragment_sources()).load()
    settings = InstallerSettings.from_config(InstallerConfig(manager.repo_root, config=config))

    return ArtimapContext(
        repo_root=manager.repo_root,
        config=config,
        mappings=mappings,
        resolver_config=resolver_config,
        installer_settings=settings,
    )


__all__ = ["ArtimapContext", "load_context"]
