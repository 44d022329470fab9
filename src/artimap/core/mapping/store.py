"""Ordered store of coordinate rewrite rules.

Keys are the group and name of a coordinate, so a rule written for ``g:a``
applies to every version, packaging and classifier of that artifact.
Re-inserting a key overwrites the previous target (last write wins), which
is how later fragment tiers override earlier ones.
"""
from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from artimap.core.artifact import NO_COORDINATE, ArtifactCoordinate
from artimap.core.exceptions import MappingStoreFrozenError


class MappingStore:
    """Source-to-target coordinate map, read-only once frozen."""

    def __init__(self) -> None:
        self._entries: Dict[ArtifactCoordinate, ArtifactCoordinate] = {}
        self._frozen = False

    @staticmethod
    def _key(coordinate: ArtifactCoordinate) -> ArtifactCoordinate:
        # Rules address group and name only.
        return ArtifactCoordinate(coordinate.group, coordinate.name, extension="")

    def put(self, source: ArtifactCoordinate, target: ArtifactCoordinate) -> None:
        if self._frozen:
            raise MappingStoreFrozenError(
                f"Cannot add mapping for {source}: store is frozen",
                context={"source": str(source)},
            )
        key = self._key(source)
        # Drop first so an override moves to the end, keeping items() in merge order.
        self._entries.pop(key, None)
        self._entries[key] = target.clear_version_and_extension()

    def get(self, source: ArtifactCoordinate) -> Optional[ArtifactCoordinate]:
        return self._entries.get(self._key(source))

    def resolve(self, requested: ArtifactCoordinate) -> ArtifactCoordinate:
        """Rewrite ``requested`` to its mapped group and name.

        Version, extension, classifier and scope of the request are kept.
        Unmapped coordinates, and coordinates mapped to no target, come back
        unchanged.
        """
        target = self.get(requested)
        if target is None or target == NO_COORDINATE:
            return requested
        return ArtifactCoordinate(
            target.group,
            target.name,
            extension=requested.extension,
            version=requested.version,
            classifier=requested.classifier,
            scope=requested.scope,
        )

    def freeze(self) -> "MappingStore":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def items(self) -> Iterator[Tuple[ArtifactCoordinate, ArtifactCoordinate]]:
        return iter(list(self._entries.items()))

    def __contains__(self, source: object) -> bool:
        return isinstance(source, ArtifactCoordinate) and self._key(source) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<MappingStore {len(self)} entries, {state}>"


__all__ = ["MappingStore"]
