"""Filesystem primitives used when staging package files.

Placement prefers hard links and falls back to copying when linking is not
possible (cross-device, unsupported filesystem, permissions). Symbolic links
are placed as links, never dereferenced.
"""
from __future__ import annotations

import logging
import os
import shutil
import stat
import uuid
from pathlib import Path
from typing import Optional

from .io import PathLike

logger = logging.getLogger(__name__)


def create_symlink(directory: PathLike, link_target: PathLike) -> Path:
    """Create a symlink to ``link_target`` under ``directory`` with a unique name."""
    link = Path(directory) / f"symlink-{uuid.uuid4().hex}"
    os.symlink(str(link_target), str(link))
    return link


def _can_share_inode(source: Path, mode: Optional[int]) -> bool:
    """A hard link is safe only when chmod on the target cannot alter other paths."""
    if mode is None:
        return True
    st = source.lstat()
    return st.st_nlink == 1 and stat.S_IMODE(st.st_mode) == mode


def link_or_copy(source: PathLike, target: PathLike, mode: Optional[int] = None) -> None:
    """Place ``source`` at ``target``, replacing whatever file is there.

    With ``mode`` given, the source is copied rather than hard-linked when it
    already has other links or a different mode, so setting ``mode`` on the
    target leaves every other path untouched.
    """
    source = Path(source)
    target = Path(target)

    if target.is_symlink() or target.exists():
        target.unlink()

    if source.is_symlink() or _can_share_inode(source, mode):
        try:
            os.link(source, target, follow_symlinks=False)
            return
        except OSError as exc:
            logger.debug("Cannot hard-link %s to %s (%s); copying instead", source, target, exc)

    if source.is_symlink():
        os.symlink(os.readlink(source), target)
    else:
        shutil.copyfile(source, target)


def chmod(path: PathLike, mode: int) -> None:
    """Apply permission bits to ``path``; symlinks carry no mode of their own."""
    path = Path(path)
    if path.is_symlink():
        return
    os.chmod(path, mode)


__all__ = ["create_symlink", "link_or_copy", "chmod"]
