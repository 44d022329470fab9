from __future__ import annotations

from typing import Any, Dict, Mapping


class ArtimapError(Exception):
    """Base exception for artimap."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class FragmentParseError(ArtimapError, ValueError):
    """Raised when a mapping fragment is malformed."""

    def __init__(
        self,
        message: str = "",
        *,
        path: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path:
            ctx["path"] = path
        ArtimapError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)


class PathArgumentError(ArtimapError, ValueError):
    """Raised when an absolute path is given where a relative one is required."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ArtimapError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class InstallIOError(ArtimapError, OSError):
    """Raised when staging a package onto disk fails."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        package: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path:
            ctx["path"] = path
        if package is not None:
            ctx["package"] = package
        ArtimapError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)


class PackageStateError(ArtimapError, RuntimeError):
    """Raised when a package is mutated or installed after installation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ArtimapError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class MappingStoreFrozenError(ArtimapError, RuntimeError):
    """Raised when a frozen mapping store receives a new entry."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ArtimapError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ConfigError(ArtimapError, ValueError):
    """Raised when the merged configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ArtimapError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "ArtimapError",
    "FragmentParseError",
    "PathArgumentError",
    "InstallIOError",
    "PackageStateError",
    "MappingStoreFrozenError",
    "ConfigError",
]
