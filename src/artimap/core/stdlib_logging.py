from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from artimap.core.utils.io import ensure_directory

_CONFIGURED: Optional[tuple[str, str]] = None
_ARTIMAP_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Route the ``artimap`` logger to ``log_path``, or to stderr when None.

    Idempotent per-process: calling again with the same target and level is a
    no-op; a different target replaces the previously installed handler.
    """
    global _CONFIGURED, _ARTIMAP_HANDLER

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    if _CONFIGURED == (target, level.upper()) and _ARTIMAP_HANDLER is not None:
        return

    logger = logging.getLogger("artimap")
    logger.setLevel(_level_from_name(level))

    if _ARTIMAP_HANDLER is not None:
        logger.removeHandler(_ARTIMAP_HANDLER)
        _ARTIMAP_HANDLER.close()
        _ARTIMAP_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        ensure_directory(Path(target).parent)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _ARTIMAP_HANDLER = handler
    _CONFIGURED = (target, level.upper())


def reset_logging_for_tests() -> None:
    """Test-only: drop the handler installed by :func:`configure_logging`."""
    global _CONFIGURED, _ARTIMAP_HANDLER
    logger = logging.getLogger("artimap")
    if _ARTIMAP_HANDLER is not None:
        logger.removeHandler(_ARTIMAP_HANDLER)
        _ARTIMAP_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    _CONFIGURED = None
    _ARTIMAP_HANDLER = None


__all__ = ["configure_logging", "reset_logging_for_tests", "LOG_FORMAT"]
