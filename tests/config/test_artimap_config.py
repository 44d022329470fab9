from __future__ import annotations

from pathlib import Path

import pytest

from artimap.core.config import ConfigManager, get_project_config_dir, get_user_config_dir
from artimap.core.config.domains import InstallerConfig, LoggingConfig, ResolverConfig
from artimap.core.exceptions import ConfigError
from artimap.core.install import InstallerSettings


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Layering
# ---------------------------------------------------------------------------


def test_bundled_defaults_load_and_validate(project_root: Path) -> None:
    cfg = ConfigManager(project_root).load_config(validate=True)

    assert cfg["resolver"]["root"] == "/"
    assert cfg["resolver"]["fragmentDirs"] == ["etc/maven/fragments", "usr/share/maven-fragments"]
    assert cfg["installer"] == {"metadataDir": "usr/share/maven-metadata", "skipVersions": False}
    assert cfg["logging"]["level"] == "WARNING"


def test_layers_override_in_precedence_order(project_root: Path) -> None:
    home = Path.home()
    _write(home / ".artimap/config/resolver.yaml", "resolver:\n  root: /user\n  localDepmap: user.xml\n")
    _write(project_root / ".artimap/config/resolver.yaml", "resolver:\n  root: /project\n")
    _write(project_root / ".artimap/config.local/resolver.yaml", "resolver:\n  localDepmap: local.xml\n")

    cfg = ConfigManager(project_root).load_config()

    assert cfg["resolver"]["root"] == "/project"
    assert cfg["resolver"]["localDepmap"] == "local.xml"
    assert cfg["resolver"]["versionlessDepmap"] == "etc/maven/maven2-versionless-depmap.xml"


def test_files_in_one_directory_merge_in_sorted_order(project_root: Path) -> None:
    _write(project_root / ".artimap/config/20-late.yaml", "resolver:\n  root: /late\n")
    _write(project_root / ".artimap/config/10-early.yml", "resolver:\n  root: /early\n")

    assert ConfigManager(project_root).get("resolver.root") == "/late"


def test_list_markers_append_or_replace(project_root: Path) -> None:
    _write(
        project_root / ".artimap/config/resolver.yaml",
        "resolver:\n  fragmentDirs: ['+', /opt/fragments]\n  repositories: ['=', /opt/repo]\n",
    )

    cfg = ConfigManager(project_root).load_config()

    assert cfg["resolver"]["fragmentDirs"] == [
        "etc/maven/fragments",
        "usr/share/maven-fragments",
        "/opt/fragments",
    ]
    assert cfg["resolver"]["repositories"] == ["/opt/repo"]


def test_edits_are_picked_up_without_clearing_cache(project_root: Path) -> None:
    config_file = _write(project_root / ".artimap/config/installer.yaml", "installer:\n  metadataDir: a\n")
    manager = ConfigManager(project_root)
    assert manager.get("installer.metadataDir") == "a"

    config_file.write_text("installer:\n  metadataDir: longer/path\n", encoding="utf-8")
    assert manager.get("installer.metadataDir") == "longer/path"


def test_returned_config_is_a_copy(project_root: Path) -> None:
    manager = ConfigManager(project_root)
    manager.load_config()["resolver"]["root"] = "/mutated"
    assert manager.load_config()["resolver"]["root"] == "/"


def test_get_returns_default_for_missing_keys(project_root: Path) -> None:
    manager = ConfigManager(project_root)
    assert manager.get("resolver.nothing", "fallback") == "fallback"
    assert manager.get("nothing.at.all") is None


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def test_env_overrides_are_case_insensitive_and_typed(
    project_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ARTIMAP_RESOLVER__ROOT", "/srv/sysroot")
    monkeypatch.setenv("ARTIMAP_INSTALLER__SKIPVERSIONS", "true")
    monkeypatch.setenv("ARTIMAP_RESOLVER__REPOSITORIES__0", "/opt/repo")

    cfg = ConfigManager(project_root).load_config()

    assert cfg["resolver"]["root"] == "/srv/sysroot"
    assert cfg["installer"]["skipVersions"] is True
    assert "SKIPVERSIONS" not in cfg["installer"]
    assert cfg["resolver"]["repositories"] == ["/opt/repo", "usr/share/java"]


def test_env_json_list_override(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARTIMAP_RESOLVER__FRAGMENTDIRS", '["/a", "/b"]')
    assert ConfigManager(project_root).get("resolver.fragmentDirs") == ["/a", "/b"]


def test_malformed_env_key_is_rejected(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARTIMAP_RESOLVER____ROOT", "/x")
    manager = ConfigManager(project_root)

    with pytest.raises(ConfigError, match="empty segment"):
        manager.load_config(validate=True)
    # Unvalidated loads skip malformed keys.
    assert manager.load_config(validate=False)["resolver"]["root"] == "/"


@pytest.mark.parametrize(
    "raw,expected",
    [("false", False), ("NULL", None), ("42", 42), ("-1.5", -1.5), ('{"a": 1}', {"a": 1}), ("text", "text")],
)
def test_env_value_coercion(raw: str, expected: object) -> None:
    assert ConfigManager._coerce_type(raw) == expected


def test_config_dirs_follow_paths_env(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARTIMAP_paths__project_config_dir", "build-config")
    _write(project_root / "build-config/config/resolver.yaml", "resolver:\n  root: /from-env-dir\n")

    assert get_project_config_dir(project_root) == project_root / "build-config"
    assert ConfigManager(project_root).get("resolver.root") == "/from-env-dir"


def test_user_config_dir_defaults_under_home() -> None:
    assert get_user_config_dir() == Path.home() / ".artimap"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


def test_unknown_key_fails_validation(project_root: Path) -> None:
    _write(project_root / ".artimap/config/resolver.yaml", "resolver:\n  fragmentDir: [/typo]\n")

    with pytest.raises(ConfigError, match="Invalid configuration at resolver"):
        ConfigManager(project_root).load_config()


def test_bad_log_level_fails_validation(project_root: Path) -> None:
    _write(project_root / ".artimap/config/logging.yaml", "logging:\n  level: LOUD\n")

    with pytest.raises(ConfigError) as excinfo:
        ConfigManager(project_root).load_config()
    assert excinfo.value.context["path"] == "logging.level"


def test_invalid_yaml_fails_closed(project_root: Path) -> None:
    bad = _write(project_root / ".artimap/config/broken.yaml", "resolver: [unclosed\n")

    with pytest.raises(ConfigError, match="Invalid YAML") as excinfo:
        ConfigManager(project_root).load_config()
    assert excinfo.value.context["path"] == str(bad)


def test_non_mapping_file_is_rejected(project_root: Path) -> None:
    _write(project_root / ".artimap/config/list.yaml", "- a\n- b\n")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        ConfigManager(project_root).load_config()


# ---------------------------------------------------------------------------
# Domain accessors
# ---------------------------------------------------------------------------


def test_resolver_config_builds_fragment_sources(project_root: Path) -> None:
    sysroot = project_root / "sysroot"
    _write(
        project_root / ".artimap/config/resolver.yaml",
        f"resolver:\n  root: {sysroot}\n  versionlessDepmap: ''\n  repositories: [repo, /abs/repo]\n",
    )

    config = ResolverConfig(project_root)
    sources = config.fragment_sources()

    assert config.root == sysroot
    assert sources.versionless_depmap is None
    assert sources.directory_paths() == [
        sysroot / "etc/maven/fragments",
        sysroot / "usr/share/maven-fragments",
    ]
    assert sources.local_depmap == Path(".xmvn/depmap.xml")
    assert config.repositories == [sysroot / "repo", Path("/abs/repo")]


def test_installer_config_and_settings(project_root: Path) -> None:
    _write(
        project_root / ".artimap/config/installer.yaml",
        "installer:\n  metadataDir: /opt/metadata\n  skipVersions: true\n",
    )

    config = InstallerConfig(project_root)
    settings = InstallerSettings.from_config(config)

    assert config.metadata_dir == Path("opt/metadata")
    assert settings == InstallerSettings(metadata_dir=Path("opt/metadata"), skip_versions=True)


def test_logging_config_resolves_file_against_repo_root(project_root: Path) -> None:
    _write(project_root / ".artimap/config/logging.yaml", "logging:\n  level: debug\n  file: logs/artimap.log\n")

    config = LoggingConfig(project_root)

    assert config.level == "DEBUG"
    assert config.file == project_root.resolve() / "logs/artimap.log"


def test_logging_config_defaults_to_stderr(project_root: Path) -> None:
    assert LoggingConfig(project_root).file is None
