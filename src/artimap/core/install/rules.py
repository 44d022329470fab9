"""Packaging rules as seen by the staging model."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from artimap.core.artifact import ArtifactCoordinate


@dataclass(frozen=True)
class PackagingRule:
    """Per-artifact packaging decisions.

    ``aliases`` are extra coordinates that must resolve to the same installed
    artifact as the primary one.
    """

    target_package: str = ""
    aliases: Tuple[ArtifactCoordinate, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackagingRule":
        aliases = tuple(
            ArtifactCoordinate(
                str(a.get("groupId", "")),
                str(a.get("artifactId", "")),
                version=str(a.get("version") or ""),
            )
            for a in data.get("aliases") or []
        )
        return cls(target_package=str(data.get("targetPackage") or ""), aliases=aliases)


__all__ = ["PackagingRule"]
