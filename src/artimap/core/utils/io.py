"""File I/O helpers for artimap.

- Atomic text writes (temp file in the target directory, fsync, rename)
- YAML reads with explicit error policy
- Deterministic YAML directory iteration
"""
from __future__ import annotations

import fcntl
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional, TextIO, Union

import yaml

PathLike = Union[str, Path]


def ensure_directory(path: PathLike, create: bool = True) -> Path:
    """Ensure ``path`` is an existing directory.

    Raises:
        FileNotFoundError: If create=False and the directory is missing
        NotADirectoryError: If the path exists but is not a directory
    """
    path = Path(path)
    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path
    if not create:
        raise FileNotFoundError(f"Directory does not exist: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(
    path: PathLike,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write ``path`` atomically using a temp file + fsync + rename.

    The parent directory is created when missing and the temporary file is
    removed if anything fails before the rename.
    """
    path = Path(path)
    ensure_directory(path.parent)

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=str(path.parent),
            prefix=f".{path.name}.",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        # NamedTemporaryFile creates 0600 files; published files are world-readable.
        os.chmod(tmp_path, 0o644)
        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()


def write_text(path: PathLike, content: str) -> None:
    """Atomically write UTF-8 text to ``path``."""

    def _writer(f: TextIO) -> None:
        f.write(content)

    atomic_write(Path(path), _writer)


def read_yaml(path: PathLike, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML from ``path``.

    Returns ``default`` when the file is missing, empty or invalid, unless
    ``raise_on_error`` is set, in which case the error propagates.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(f)
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default
    return data if data is not None else default


def iter_yaml_files(dir_path: PathLike) -> list[Path]:
    """Return ``*.yaml``/``*.yml`` files in ``dir_path`` in sorted order.

    When both ``<name>.yaml`` and ``<name>.yml`` exist only ``.yaml`` is
    returned.
    """
    d = Path(dir_path)
    if not d.is_dir():
        return []
    yml_files = {p.stem: p for p in d.glob("*.yml")}
    yaml_files = {p.stem: p for p in d.glob("*.yaml")}
    return [
        yaml_files.get(stem) or yml_files[stem]
        for stem in sorted(set(yml_files) | set(yaml_files))
    ]


__all__ = [
    "PathLike",
    "ensure_directory",
    "atomic_write",
    "write_text",
    "read_yaml",
    "iter_yaml_files",
]
