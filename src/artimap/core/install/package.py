"""Staging model for one installable output unit.

A :class:`Package` accumulates files, symlinks and artifact metadata while an
installation plan is built, then writes everything under an install root in a
single :meth:`Package.install` call:

1. pre-install hooks run, in registration order;
2. the package's mapping metadata, if any, is staged under the metadata
   directory as ``<package-name><suffix>.xml``;
3. every staged file is placed under the install root (hard link, falling
   back to a copy) and given its permission bits;
4. a ``.mfiles<suffix>`` manifest listing the installed paths is written.

Nothing is rolled back when a step fails. Callers wanting transactional
behaviour install into a scratch root and publish it afterwards.
"""
from __future__ import annotations

import logging
import posixpath
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, Iterable, KeysView, List, Optional, Tuple, Union

from artimap.core.artifact import DEFAULT_EXTENSION, ArtifactCoordinate
from artimap.core.exceptions import InstallIOError, PackageStateError, PathArgumentError
from artimap.core.metadata import FragmentFile
from artimap.core.utils import fs
from artimap.core.utils.io import write_text

from .rules import PackagingRule
from .settings import InstallerSettings

logger = logging.getLogger(__name__)

PathArg = Union[str, PurePosixPath, Path]

MAIN = ""
DEFAULT_NAME = "__default"
NOINSTALL_NAME = "__noinstall"

FILE_MODE = 0o644


class InstallPolicy(Enum):
    INSTALLABLE = "installable"
    EXCLUDED = "excluded"


class PackageState(Enum):
    ACCUMULATING = "accumulating"
    INSTALLED = "installed"


@dataclass(frozen=True)
class TargetFile:
    """One file to place at ``<root>/<target_dir>/<target_name>``."""

    source: Path
    target_dir: PurePosixPath
    target_name: PurePosixPath
    mode: int

    @property
    def target_path(self) -> PurePosixPath:
        return self.target_dir / self.target_name


PreInstallHook = Callable[["Package"], None]


def _relative(path: PathArg, what: str) -> PurePosixPath:
    p = PurePosixPath(str(path))
    if p.is_absolute():
        raise PathArgumentError(f"{what} is absolute path: {p}", context={what: str(p)})
    return p


def _normalize(path: PurePosixPath) -> PurePosixPath:
    return PurePosixPath(posixpath.normpath(str(path)))


class Package:
    """Files and artifact metadata of one output unit.

    ``name`` selects the suffix used in metadata and manifest file names:
    the main unit (``""`` or ``"__default"``) has no suffix, any other name
    ``n`` gets ``-n``. The ``"__noinstall"`` unit collects outputs that are
    deliberately not shipped.
    """

    def __init__(self, name: str = MAIN, settings: Optional[InstallerSettings] = None) -> None:
        self.name = name
        self.settings = settings or InstallerSettings()
        self._suffix = "" if name in (MAIN, DEFAULT_NAME) else f"-{name}"
        self.policy = InstallPolicy.EXCLUDED if name == NOINSTALL_NAME else InstallPolicy.INSTALLABLE
        self.state = PackageState.ACCUMULATING

        self._metadata = FragmentFile()
        self._target_files: List[TargetFile] = []
        # Insertion-ordered sets
        self._devel_artifacts: Dict[ArtifactCoordinate, None] = {}
        self._user_artifacts: Dict[ArtifactCoordinate, None] = {}
        # Tracked (requested or alias) coordinate -> provided coordinate
        self._provided_artifacts: Dict[ArtifactCoordinate, ArtifactCoordinate] = {}
        self._pre_install_hooks: List[PreInstallHook] = []
        self._properties: Dict[str, Any] = {}
        self._scratch_dir: Optional[Path] = None

    def __repr__(self) -> str:
        return f"<Package {self.name!r} files={len(self._target_files)} state={self.state.value}>"

    # Ordering compares suffixes; equality stays identity.
    def __lt__(self, other: "Package") -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self._suffix < other._suffix

    def __le__(self, other: "Package") -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self._suffix <= other._suffix

    def __gt__(self, other: "Package") -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self._suffix > other._suffix

    def __ge__(self, other: "Package") -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self._suffix >= other._suffix

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def metadata(self) -> FragmentFile:
        return self._metadata

    @property
    def target_files(self) -> Tuple[TargetFile, ...]:
        return tuple(self._target_files)

    def is_installable(self) -> bool:
        return self.policy is InstallPolicy.INSTALLABLE

    def _require_accumulating(self, operation: str) -> None:
        if self.state is not PackageState.ACCUMULATING:
            raise PackageStateError(
                f"Cannot {operation}: package '{self.name}' is already installed",
                context={"package": self.name, "operation": operation},
            )

    def _scratch(self) -> Path:
        if self._scratch_dir is None:
            self._scratch_dir = Path(tempfile.mkdtemp(prefix="artimap-"))
        return self._scratch_dir

    def close(self) -> None:
        """Remove temporary files created for this package."""
        if self._scratch_dir is not None:
            shutil.rmtree(self._scratch_dir, ignore_errors=True)
            self._scratch_dir = None

    def __enter__(self) -> "Package":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ----- Files -----

    def add_file(
        self,
        source: PathArg,
        target_dir: PathArg,
        target_name: Optional[PathArg] = None,
        mode: int = FILE_MODE,
    ) -> None:
        """Stage ``source`` for installation.

        With ``target_name`` omitted, ``target_dir`` is the full target path
        and is split into directory and file name (directory ``.`` when the
        path has no parent).
        """
        self._require_accumulating("add file")
        target = _relative(target_dir, "target")
        if target_name is None:
            directory, name = target.parent, PurePosixPath(target.name)
        else:
            directory, name = target, _relative(target_name, "target_name")
        self._target_files.append(TargetFile(Path(source), directory, name, mode))

    def add_symlink(self, link_path: PathArg, link_target: PathArg) -> None:
        """Stage a relative symlink at ``link_path`` pointing to ``link_target``.

        Both paths are relative to the install root. The stored link target is
        relative to the link's own directory, so the link stays valid wherever
        the tree is installed.
        """
        self._require_accumulating("add symlink")
        link = _normalize(_relative(link_path, "symlink_file"))
        target = _normalize(_relative(link_target, "symlink_target"))
        if str(link.parent) != ".":
            target = PurePosixPath(posixpath.relpath(str(target), str(link.parent)))

        try:
            temp_link = fs.create_symlink(self._scratch(), target)
        except OSError as exc:
            raise InstallIOError(
                f"Cannot create symlink {link} -> {target}: {exc}",
                path=str(link),
                package=self.name,
            ) from exc
        self.add_file(temp_link, link, mode=FILE_MODE)

    # ----- Artifacts -----

    def add_devel_artifact(self, artifact: ArtifactCoordinate) -> None:
        self._require_accumulating("add devel artifact")
        self._devel_artifacts[artifact] = None

    @property
    def devel_artifacts(self) -> KeysView[ArtifactCoordinate]:
        return self._devel_artifacts.keys()

    def add_user_artifact(self, artifact: ArtifactCoordinate) -> None:
        self._require_accumulating("add user artifact")
        self._user_artifacts[artifact] = None

    @property
    def user_artifacts(self) -> KeysView[ArtifactCoordinate]:
        return self._user_artifacts.keys()

    def create_depmaps(
        self,
        group: str,
        name: str,
        version: str,
        target_group: PathArg,
        target_name: PathArg,
        rule: PackagingRule,
    ) -> None:
        """Map ``group:name`` and every alias of ``rule`` to the installed coordinate."""
        self._require_accumulating("create depmaps")
        artifact = ArtifactCoordinate(group, name, extension=DEFAULT_EXTENSION, version=version)
        installed = ArtifactCoordinate(
            str(target_group), str(target_name), extension=DEFAULT_EXTENSION, version=version
        )
        self._metadata.add_mapping(artifact, installed)
        for alias in rule.aliases:
            self._metadata.add_mapping(
                ArtifactCoordinate(alias.group, alias.name, extension=DEFAULT_EXTENSION, version=alias.version),
                installed,
            )

    def add_artifact_metadata(
        self,
        artifact: ArtifactCoordinate,
        aliases: Iterable[ArtifactCoordinate],
        provided_variants: Iterable[ArtifactCoordinate],
    ) -> None:
        """Record what ``artifact`` and its aliases resolve to once installed.

        For each provided variant, the artifact and each alias are tracked at
        the variant's scope and resolve to the variant. Aliases without a
        version take the artifact's version. The package metadata maps the
        same scoped coordinates to the variant.
        """
        self._require_accumulating("add artifact metadata")
        aliases = list(aliases)
        for variant in provided_variants:
            scope = variant.scope
            provided = variant.with_file(None).with_properties(None)
            for requested in [artifact, *aliases]:
                if requested is not artifact and not requested.version:
                    requested = requested.with_version(artifact.version)
                scoped_requested = requested.with_file(None).with_properties(None).with_scope(scope)
                self._provided_artifacts[scoped_requested] = provided
                self._metadata.add_mapping(scoped_requested, provided)

    def tracked_artifacts(self) -> KeysView[ArtifactCoordinate]:
        """All coordinates (artifacts and aliases) this package provides."""
        return self._provided_artifacts.keys()

    def get_provided_artifact(self, artifact: ArtifactCoordinate) -> Optional[ArtifactCoordinate]:
        """Return the installed coordinate ``artifact`` resolves to, or None."""
        key = artifact.with_file(None).with_properties(None)
        return self._provided_artifacts.get(key)

    # ----- Hooks and properties -----

    def add_pre_install_hook(self, hook: PreInstallHook) -> None:
        self._require_accumulating("add pre-install hook")
        self._pre_install_hooks.append(hook)

    def set_property(self, key: str, value: Any) -> None:
        self._properties[key] = value

    def get_property(self, key: str, default: Any = None) -> Any:
        return self._properties.get(key, default)

    # ----- Installation -----

    def install(
        self,
        package_name: str,
        install_root: PathArg,
        manifest_dir: Optional[PathArg] = None,
    ) -> Path:
        """Install the package under ``install_root``.

        The manifest is written to ``manifest_dir``, defaulting to the current
        working directory. Returns the manifest path.

        Raises:
            InstallIOError: If a directory, file, metadata or manifest cannot be written
            PackageStateError: If the package was already installed
        """
        self._require_accumulating("install")
        try:
            for hook in self._pre_install_hooks:
                hook(self)
            self._install_metadata(package_name)
            self._install_files(Path(install_root))
            return self._create_file_list(Path(manifest_dir) if manifest_dir is not None else Path.cwd())
        finally:
            self.state = PackageState.INSTALLED
            self.close()

    def _install_metadata(self, package_name: str) -> None:
        if self._metadata.is_empty():
            return
        metadata_file = self._scratch() / f"metadata{self._suffix}.xml"
        try:
            self._metadata.write(metadata_file, self.settings)
        except OSError as exc:
            raise InstallIOError(
                f"Cannot write metadata for {package_name}{self._suffix}: {exc}",
                path=str(metadata_file),
                package=self.name,
            ) from exc
        metadata_dir = PurePosixPath(str(self.settings.metadata_dir).lstrip("/"))
        self.add_file(metadata_file, metadata_dir, f"{package_name}{self._suffix}.xml", FILE_MODE)

    def _install_files(self, root: Path) -> None:
        for target in self._target_files:
            directory = root / target.target_dir
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise InstallIOError(
                    f"Cannot create directory {directory}: {exc}",
                    path=str(directory),
                    package=self.name,
                ) from exc

            destination = directory / target.target_name
            try:
                fs.link_or_copy(target.source, destination, target.mode)
                fs.chmod(destination, target.mode)
            except OSError as exc:
                raise InstallIOError(
                    f"Cannot install {target.source} as {destination}: {exc}",
                    path=str(destination),
                    package=self.name,
                ) from exc
            logger.debug("Installed %s (mode %o)", destination, target.mode)

    def _create_file_list(self, manifest_dir: Path) -> Path:
        paths = sorted({str(target.target_path) for target in self._target_files})
        manifest = manifest_dir / f".mfiles{self._suffix}"
        try:
            write_text(manifest, "".join(f"/{p}\n" for p in paths))
        except OSError as exc:
            raise InstallIOError(
                f"Cannot write file list {manifest}: {exc}",
                path=str(manifest),
                package=self.name,
            ) from exc
        return manifest


__all__ = [
    "Package",
    "TargetFile",
    "InstallPolicy",
    "PackageState",
    "PreInstallHook",
    "MAIN",
    "DEFAULT_NAME",
    "NOINSTALL_NAME",
]
