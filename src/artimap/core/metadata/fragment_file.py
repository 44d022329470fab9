"""Per-package mapping metadata.

Each installed package emits the rewrite rules it is responsible for as a
``<dependencyMap>`` document. The document carries no XML declaration, so the
file is itself a valid depmap fragment and can be dropped into a fragment
directory.
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Tuple

from lxml import etree

from artimap.core.artifact import DEFAULT_EXTENSION, NO_COORDINATE, ArtifactCoordinate
from artimap.core.mapping.fragments import read_fragment
from artimap.core.utils.io import write_text

if TYPE_CHECKING:
    from artimap.core.install.settings import InstallerSettings


def _coordinate_element(
    tag: str, coordinate: ArtifactCoordinate, *, skip_versions: bool
) -> etree._Element:
    element = etree.Element(tag)
    etree.SubElement(element, "groupId").text = coordinate.group
    etree.SubElement(element, "artifactId").text = coordinate.name
    if coordinate.version and not skip_versions:
        etree.SubElement(element, "version").text = coordinate.version
    if coordinate.extension and coordinate.extension != DEFAULT_EXTENSION:
        etree.SubElement(element, "extension").text = coordinate.extension
    if coordinate.classifier:
        etree.SubElement(element, "classifier").text = coordinate.classifier
    if coordinate.scope:
        etree.SubElement(element, "scope").text = coordinate.scope
    return element


class FragmentFile:
    """Ordered, duplicate-free collection of mappings destined for one file."""

    def __init__(self) -> None:
        self._mappings: List[Tuple[ArtifactCoordinate, ArtifactCoordinate]] = []

    def add_mapping(self, source: ArtifactCoordinate, target: ArtifactCoordinate) -> None:
        pair = (source, target)
        if pair not in self._mappings:
            self._mappings.append(pair)

    @property
    def mappings(self) -> List[Tuple[ArtifactCoordinate, ArtifactCoordinate]]:
        return list(self._mappings)

    def is_empty(self) -> bool:
        return not self._mappings

    def __len__(self) -> int:
        return len(self._mappings)

    def __iter__(self) -> Iterator[Tuple[ArtifactCoordinate, ArtifactCoordinate]]:
        return iter(list(self._mappings))

    def to_xml(self, settings: "InstallerSettings") -> str:
        root = etree.Element("dependencyMap")
        for source, target in self._mappings:
            dependency = etree.SubElement(root, "dependency")
            dependency.append(_coordinate_element("maven", source, skip_versions=settings.skip_versions))
            if target != NO_COORDINATE:
                dependency.append(_coordinate_element("jpp", target, skip_versions=settings.skip_versions))
        return etree.tostring(root, pretty_print=True, encoding="unicode")

    def write(self, path: Path, settings: "InstallerSettings") -> None:
        """Serialize the mappings to ``path`` (atomic replace)."""
        write_text(path, self.to_xml(settings))

    @classmethod
    def read(cls, path: Path) -> "FragmentFile":
        """Load a metadata file written by :meth:`write` (versions and extensions dropped)."""
        document = cls()
        for entry in read_fragment(path):
            document.add_mapping(entry.source, entry.target)
        return document


# The installer and resolver refer to this as the package metadata document.
MetadataDocument = FragmentFile


__all__ = ["FragmentFile", "MetadataDocument"]
