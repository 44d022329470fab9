"""Artifact resolution against installed packages, mappings and repositories."""
from __future__ import annotations

from .repository import FlatRepository
from .resolver import ResolutionRequest, ResolutionResult, Resolver
from .workspace import WorkspaceReader

__all__ = ["FlatRepository", "ResolutionRequest", "ResolutionResult", "Resolver", "WorkspaceReader"]
