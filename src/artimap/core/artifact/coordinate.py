"""Immutable artifact coordinates.

A coordinate identifies one build output: group, name, extension, version,
classifier and scope, plus the resolved file and free-form properties when
known. Derived coordinates are produced with the ``with_*`` helpers, which
return new values.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

DEFAULT_EXTENSION = "jar"

# Version advertised for artifacts resolved from the system rather than from a
# versioned repository listing.
DEFAULT_VERSION = "SYSTEM"


@dataclass(frozen=True)
class ArtifactCoordinate:
    group: str
    name: str
    extension: str = DEFAULT_EXTENSION
    version: str = ""
    classifier: str = ""
    scope: str = ""
    file: Optional[Path] = None
    properties: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, text: str) -> "ArtifactCoordinate":
        """Parse ``group:name[:extension[:classifier]]:version``.

        Raises:
            ValueError: If the string has fewer than three or more than five parts
        """
        parts = text.strip().split(":")
        if len(parts) < 3 or len(parts) > 5 or not parts[0] or not parts[1]:
            raise ValueError(f"Bad artifact coordinates '{text}', expected group:name[:extension[:classifier]]:version")
        group, name = parts[0], parts[1]
        version = parts[-1]
        extension = parts[2] if len(parts) >= 4 else DEFAULT_EXTENSION
        classifier = parts[3] if len(parts) == 5 else ""
        return cls(group, name, extension=extension or DEFAULT_EXTENSION, version=version, classifier=classifier)

    def __str__(self) -> str:
        parts = [self.group, self.name]
        if self.extension != DEFAULT_EXTENSION or self.classifier:
            parts.append(self.extension)
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)

    @property
    def is_empty(self) -> bool:
        return not self.group and not self.name

    def with_version(self, version: Optional[str]) -> "ArtifactCoordinate":
        return replace(self, version=version or "")

    def with_scope(self, scope: Optional[str]) -> "ArtifactCoordinate":
        return replace(self, scope=scope or "")

    def with_file(self, file: Optional[Path]) -> "ArtifactCoordinate":
        return replace(self, file=Path(file) if file is not None else None)

    def with_properties(self, properties: Optional[Mapping[str, str]]) -> "ArtifactCoordinate":
        return replace(self, properties=tuple(sorted((properties or {}).items())))

    def clear_version_and_extension(self) -> "ArtifactCoordinate":
        """Return the coordinate used as a mapping key (no version, no extension)."""
        return replace(self, version="", extension="")

    def get_property(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return dict(self.properties).get(key, default)


# Stands for an absent <maven>/<jpp> element in a mapping fragment.
NO_COORDINATE = ArtifactCoordinate("", "", extension="")


__all__ = ["ArtifactCoordinate", "NO_COORDINATE", "DEFAULT_EXTENSION", "DEFAULT_VERSION"]
