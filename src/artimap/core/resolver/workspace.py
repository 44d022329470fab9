"""Workspace-reader view of the resolver, as consumed by build tools."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from artimap.core.artifact import DEFAULT_VERSION, ArtifactCoordinate

from .resolver import ResolutionRequest, Resolver


class WorkspaceReader:
    def __init__(self, resolver: Resolver) -> None:
        self.resolver = resolver

    def find_artifact(self, artifact: ArtifactCoordinate) -> Optional[Path]:
        return self.resolver.resolve(ResolutionRequest.of(artifact)).artifact_file

    def find_versions(self, artifact: ArtifactCoordinate) -> List[str]:
        # Versions are resolved by the system, not listed from a repository.
        return [DEFAULT_VERSION]


__all__ = ["WorkspaceReader"]
