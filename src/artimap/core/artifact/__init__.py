"""Artifact identity types."""
from __future__ import annotations

from .coordinate import DEFAULT_EXTENSION, DEFAULT_VERSION, NO_COORDINATE, ArtifactCoordinate

__all__ = ["ArtifactCoordinate", "NO_COORDINATE", "DEFAULT_EXTENSION", "DEFAULT_VERSION"]
