"""
artimap bundled data.

Access to the default configuration and the configuration schema shipped
inside the package, via importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a bundled data file or directory.

    Example:
        >>> get_data_path("config", "resolver.yaml")
        PosixPath('/path/to/artimap/data/config/resolver.yaml')
    """
    base = Path(str(resources.files("artimap.data") / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
