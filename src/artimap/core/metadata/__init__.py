"""Mapping metadata emitted alongside installed packages."""
from __future__ import annotations

from .fragment_file import FragmentFile, MetadataDocument

__all__ = ["FragmentFile", "MetadataDocument"]
