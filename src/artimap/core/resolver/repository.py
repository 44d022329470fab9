"""Flat artifact repository layout.

All artifacts live in one directory, named
``<group>-<name>[-<version>][-<classifier>].<extension>`` with ``/`` in the
group replaced by ``.``. Artifacts at the ``SYSTEM`` version carry no version
in their file name.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from artimap.core.artifact import DEFAULT_VERSION, ArtifactCoordinate


class FlatRepository:
    def __init__(self, root: Path, repository_id: str = "") -> None:
        self.root = Path(root)
        self.repository_id = repository_id or str(self.root)

    def __repr__(self) -> str:
        return f"<FlatRepository {self.repository_id}>"

    def primary_artifact_path(self, artifact: ArtifactCoordinate) -> Path:
        """Path of ``artifact`` relative to the repository root."""
        name = f"{artifact.group.replace('/', '.')}-{artifact.name}"
        if artifact.version and artifact.version != DEFAULT_VERSION:
            name += f"-{artifact.version}"
        if artifact.classifier:
            name += f"-{artifact.classifier}"
        return Path(f"{name}.{artifact.extension}")

    def find(self, artifact: ArtifactCoordinate) -> Optional[Path]:
        path = self.root / self.primary_artifact_path(artifact)
        return path if path.is_file() else None


__all__ = ["FlatRepository"]
