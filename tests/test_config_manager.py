"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from notedeck.config import (
    ConfigError,
    ConfigManager,
    NoteDeckConfig,
    flatten_for_env,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".notedeck" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "notedeck configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, NoteDeckConfig)
    assert config.view.sort_key == "modified"
    assert config.view.descending is True


def test_load_without_file_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    config = manager.load(include_env=False)

    assert config == NoteDeckConfig()
    assert not manager.config_path.exists()


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"layout": {"margin": 4}, "view": {"sort_key": "title"}})

    env = {"NOTEDECK__VIEW__SORT_KEY": "created", "NOTEDECK__GLYPHS__INBOX_TAG": "TODO"}
    cli = {"view.sort_key": "accessed"}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.layout.margin == 4
    assert config.glyphs.inbox_tag == "TODO"
    # CLI overrides take precedence over environment
    assert config.view.sort_key == "accessed"


def test_environment_lists_are_parsed_as_yaml(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    config = manager.load(env_overrides={"NOTEDECK__NOTES__EXTENSIONS": "[org, TXT]"})

    assert config.notes.extensions == [".org", ".txt"]


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_flatten_for_env_covers_defaults() -> None:
    flat = flatten_for_env(NoteDeckConfig())

    assert flat["NOTEDECK__VIEW__SORT_KEY"] == "modified"
    assert flat["NOTEDECK__LAYOUT__MARGIN"] == "2"
    assert flat["NOTEDECK__NOTES__EXTENSIONS"] == "[.org]"


@pytest.mark.parametrize(
    "overrides",
    [
        {"layout": {"margin": "wide"}},
        {"view": {"sort_key": "size"}},
        {"unknown_section": {}},
    ],
)
def test_resolve_with_precedence_invalid_value_raises(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=NoteDeckConfig(), file_overrides=overrides)
