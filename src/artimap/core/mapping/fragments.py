"""Load coordinate rewrite rules from depmap fragment files.

Fragments are read from three tiers, lowest to highest precedence:

1. the versionless system depmap,
2. every configured fragment directory, entries in sorted filename order,
3. the local override depmap, when it exists.

A fragment is a root-less sequence of elements::

    <dependency>
      <maven><groupId>g</groupId><artifactId>a</artifactId><version>1</version></maven>
      <jpp><groupId>JPP</groupId><artifactId>a</artifactId></jpp>
    </dependency>

Each file is wrapped in ``<dependencies>`` before parsing so that several
``dependency`` elements may be written without a document root. A file is
parsed completely before its rules are applied; a malformed file contributes
no rules and only produces a warning.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Tuple

from lxml import etree

from artimap.core.artifact import NO_COORDINATE, ArtifactCoordinate
from artimap.core.exceptions import FragmentParseError

from .store import MappingStore

logger = logging.getLogger(__name__)

_ROOT_OPEN = "<dependencies>"
_ROOT_CLOSE = "</dependencies>"


class MappingEntry(NamedTuple):
    source: ArtifactCoordinate
    target: ArtifactCoordinate


@dataclass(frozen=True)
class FragmentSources:
    """Locations of the fragment tiers.

    ``versionless_depmap`` and ``fragment_dirs`` are resolved against
    ``root`` when relative; ``local_depmap`` is resolved against the current
    working directory.
    """

    root: Path = Path("/")
    versionless_depmap: Optional[Path] = None
    fragment_dirs: Tuple[Path, ...] = ()
    local_depmap: Optional[Path] = None

    def _under_root(self, path: Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else Path(self.root) / path

    def versionless_path(self) -> Optional[Path]:
        if self.versionless_depmap is None:
            return None
        return self._under_root(self.versionless_depmap)

    def directory_paths(self) -> List[Path]:
        return [self._under_root(d) for d in self.fragment_dirs]

    def local_path(self) -> Optional[Path]:
        if self.local_depmap is None:
            return None
        return Path(self.local_depmap).absolute()


def _named(element: etree._Element, tag: str) -> List[etree._Element]:
    # Match by local name so namespaced fragments behave like plain ones.
    return element.xpath(".//*[local-name()=$tag]", tag=tag)


def _text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def _read_coordinate(dependency: etree._Element, side: str, path: Path) -> ArtifactCoordinate:
    found = _named(dependency, side)
    if not found:
        return NO_COORDINATE
    element = found[0]

    group_ids = _named(element, "groupId")
    if len(group_ids) != 1:
        raise FragmentParseError(
            f"<{side}> must contain exactly one <groupId>, found {len(group_ids)}",
            path=str(path),
        )
    artifact_ids = _named(element, "artifactId")
    if len(artifact_ids) != 1:
        raise FragmentParseError(
            f"<{side}> must contain exactly one <artifactId>, found {len(artifact_ids)}",
            path=str(path),
        )
    versions = _named(element, "version")
    if len(versions) > 1:
        raise FragmentParseError(
            f"<{side}> must contain at most one <version>, found {len(versions)}",
            path=str(path),
        )

    version = _text(versions[0]) if versions else ""
    return ArtifactCoordinate(_text(group_ids[0]), _text(artifact_ids[0]), version=version)


def parse_fragment(text: str, path: Path | str = "<string>") -> List[MappingEntry]:
    """Parse fragment ``text`` into mapping entries.

    Raises:
        FragmentParseError: If the XML is malformed or a rule is incomplete
    """
    path = Path(path)
    wrapped = f"{_ROOT_OPEN}{text}{_ROOT_CLOSE}"
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        document = etree.fromstring(wrapped.encode("utf-8"), parser)
    except etree.XMLSyntaxError as exc:
        raise FragmentParseError(f"Malformed fragment: {exc}", path=str(path)) from exc

    entries: List[MappingEntry] = []
    for dependency in _named(document, "dependency"):
        source = _read_coordinate(dependency, "maven", path)
        if source == NO_COORDINATE:
            raise FragmentParseError("<dependency> has no <maven> artifact", path=str(path))
        if not source.group or not source.name:
            raise FragmentParseError(
                "<maven> artifact needs a non-empty groupId and artifactId",
                path=str(path),
            )
        target = _read_coordinate(dependency, "jpp", path)
        entries.append(
            MappingEntry(source.clear_version_and_extension(), target.clear_version_and_extension())
        )
    return entries


def read_fragment(path: Path) -> List[MappingEntry]:
    """Read and parse the fragment file at ``path``."""
    logger.debug("Loading depmap file: %s", path)
    return parse_fragment(Path(path).read_text(encoding="utf-8"), path)


class FragmentLoader:
    """Build a :class:`MappingStore` from the configured fragment tiers."""

    def __init__(self, sources: FragmentSources) -> None:
        self.sources = sources

    def fragment_paths(self) -> Iterator[Path]:
        """Yield fragment files in increasing precedence."""
        versionless = self.sources.versionless_path()
        if versionless is not None:
            yield versionless

        for directory in self.sources.directory_paths():
            yield from self._directory_entries(directory)

        local = self.sources.local_path()
        if local is not None and local.exists():
            yield local

    @staticmethod
    def _directory_entries(directory: Path) -> List[Path]:
        try:
            names = [entry.name for entry in directory.iterdir()]
        except OSError:
            return []
        return [directory / name for name in sorted(names)]

    def load(self) -> MappingStore:
        store = MappingStore()
        for path in self.fragment_paths():
            self.apply(store, path)
        return store.freeze()

    def apply(self, store: MappingStore, path: Path) -> bool:
        """Apply one fragment to ``store``; failures are logged and skipped."""
        try:
            entries = read_fragment(path)
        except (OSError, UnicodeDecodeError, FragmentParseError) as exc:
            logger.warning("Could not process depmap file %s: %s", Path(path).absolute(), exc)
            return False
        for entry in entries:
            store.put(entry.source, entry.target)
        return True


def load_mappings(sources: FragmentSources) -> MappingStore:
    """Convenience wrapper around :meth:`FragmentLoader.load`."""
    return FragmentLoader(sources).load()


__all__ = [
    "MappingEntry",
    "FragmentSources",
    "FragmentLoader",
    "parse_fragment",
    "read_fragment",
    "load_mappings",
]
