"""Answer "which file satisfies this coordinate?".

Resolution goes through three sources in order:

1. packages of the current installation pass, whose provided artifacts say
   what an artifact or alias is installed as;
2. the global mapping store loaded from depmap fragments;
3. flat repositories, trying the requested version first and the
   ``SYSTEM`` (versionless) name second.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from artimap.core.artifact import DEFAULT_EXTENSION, DEFAULT_VERSION, ArtifactCoordinate
from artimap.core.install.package import Package
from artimap.core.mapping.store import MappingStore

from .repository import FlatRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionRequest:
    group: str
    name: str
    version: str = ""
    extension: str = DEFAULT_EXTENSION
    classifier: str = ""

    @classmethod
    def of(cls, artifact: ArtifactCoordinate) -> "ResolutionRequest":
        return cls(artifact.group, artifact.name, artifact.version, artifact.extension, artifact.classifier)

    def coordinate(self) -> ArtifactCoordinate:
        return ArtifactCoordinate(
            self.group,
            self.name,
            extension=self.extension or DEFAULT_EXTENSION,
            version=self.version,
            classifier=self.classifier,
        )


@dataclass(frozen=True)
class ResolutionResult:
    artifact_file: Optional[Path] = None
    coordinate: Optional[ArtifactCoordinate] = None
    # Package name or repository id that satisfied the request.
    provider: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.artifact_file is not None


class Resolver:
    def __init__(
        self,
        mappings: MappingStore,
        repositories: Sequence[FlatRepository] = (),
        packages: Iterable[Package] = (),
    ) -> None:
        self.mappings = mappings
        self.repositories = list(repositories)
        self.packages = sorted(packages)

    def _from_packages(self, requested: ArtifactCoordinate) -> Optional[Tuple[ArtifactCoordinate, Package]]:
        # Requests carry no scope; any scoped entry for the coordinate matches.
        wanted = requested.with_scope(None)
        for package in self.packages:
            for tracked in package.tracked_artifacts():
                if tracked.with_scope(None) == wanted:
                    provided = package.get_provided_artifact(tracked)
                    return provided.with_scope(None), package
        return None

    def _candidates(self, artifact: ArtifactCoordinate) -> List[ArtifactCoordinate]:
        versions = [v for v in (artifact.version, DEFAULT_VERSION) if v]
        return [artifact.with_version(v) for v in dict.fromkeys(versions)]

    def resolve(self, request: ResolutionRequest) -> ResolutionResult:
        requested = request.coordinate()
        provider: Optional[str] = None

        from_package = self._from_packages(requested)
        if from_package is not None:
            target, package = from_package
            provider = package.name
        else:
            target = self.mappings.resolve(requested)

        for candidate in self._candidates(target):
            for repository in self.repositories:
                path = repository.find(candidate)
                if path is not None:
                    logger.debug("Resolved %s to %s", requested, path)
                    return ResolutionResult(path, candidate, provider or repository.repository_id)

        logger.debug("Could not resolve %s", requested)
        return ResolutionResult(None, target, provider)


__all__ = ["ResolutionRequest", "ResolutionResult", "Resolver"]
