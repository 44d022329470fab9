from __future__ import annotations

from pathlib import Path

import pytest

from artimap.core.artifact import NO_COORDINATE, ArtifactCoordinate
from artimap.core.exceptions import MappingStoreFrozenError
from artimap.core.mapping import MappingStore


def _c(text: str) -> ArtifactCoordinate:
    return ArtifactCoordinate.parse(text)


def test_put_and_get_ignore_version_and_extension() -> None:
    store = MappingStore()
    store.put(_c("g:a:1.0"), _c("JPP:a:1.0"))

    assert store.get(_c("g:a:pom:9.9")) == ArtifactCoordinate("JPP", "a", extension="", version="")
    assert _c("g:a:2.0") in store
    assert store.get(_c("g:other:1.0")) is None


def test_reinsertion_overrides_previous_target() -> None:
    store = MappingStore()
    store.put(_c("g:a:1"), _c("x:first:1"))
    store.put(_c("g:b:1"), _c("x:b:1"))
    store.put(_c("g:a:2"), _c("x:second:1"))

    assert len(store) == 2
    assert store.get(_c("g:a:1")).name == "second"
    # The override moves to the end so items() reflects merge order.
    assert [k.name for k, _ in store.items()] == ["b", "a"]


def test_resolve_keeps_requested_version_and_extension() -> None:
    store = MappingStore()
    store.put(_c("org.apache:commons-io:2.4"), _c("JPP:commons-io:1"))

    resolved = store.resolve(_c("org.apache:commons-io:pom:2.6"))
    assert resolved == ArtifactCoordinate("JPP", "commons-io", extension="pom", version="2.6")


def test_resolve_returns_request_when_unmapped_or_mapped_to_nothing() -> None:
    store = MappingStore()
    store.put(_c("g:nojpp:1"), NO_COORDINATE)

    assert store.resolve(_c("g:nojpp:1")) == _c("g:nojpp:1")
    assert store.resolve(_c("g:unknown:1")) == _c("g:unknown:1")


def test_frozen_store_rejects_puts_but_still_reads() -> None:
    store = MappingStore()
    store.put(_c("g:a:1"), _c("x:a:1"))
    assert store.freeze() is store
    assert store.frozen

    with pytest.raises(MappingStoreFrozenError):
        store.put(_c("g:b:1"), _c("x:b:1"))
    assert store.get(_c("g:a:1")) is not None
    assert len(store) == 1


def test_classifier_requests_use_the_group_and_name_rule() -> None:
    store = MappingStore()
    store.put(ArtifactCoordinate("g", "a"), ArtifactCoordinate("JPP", "x"))

    request = _c("g:a:jar:sources:1.0")
    assert store.get(request) == ArtifactCoordinate("JPP", "x", extension="")
    assert _c("g:a:jar:sources:1.0") in store
    assert store.resolve(request) == ArtifactCoordinate("JPP", "x", version="1.0", classifier="sources")


def test_requests_with_file_properties_or_scope_still_match() -> None:
    store = MappingStore()
    store.put(_c("g:a:1.0").with_scope("runtime"), ArtifactCoordinate("JPP", "x"))

    request = _c("g:a:2.0").with_file(Path("/build/a.jar")).with_properties({"type": "jar"})
    resolved = store.resolve(request)

    assert (resolved.group, resolved.name, resolved.version) == ("JPP", "x", "2.0")
    assert len(store) == 1
