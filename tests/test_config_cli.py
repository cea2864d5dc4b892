"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from notedeck.cli import cli
from notedeck.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("NOTEDECK__")}
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".notedeck" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "view"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "sort_key" in result.output
    assert _config_path(tmp_path).exists()


def test_config_set_updates_value(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", "layout.margin", "--value", "5"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    assert "Updated layout.margin" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.layout.margin == 5


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["config", "set", "view.sort_key", "--value", "size"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output
    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.view.sort_key == "modified"


def test_config_view_as_env_prints_assignments(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    env["NOTEDECK__LAYOUT__MARGIN"] = "7"

    result = runner.invoke(cli, ["config", "view", "--as-env"], env=env)

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "NOTEDECK__LAYOUT__MARGIN=7" in lines
    assert "NOTEDECK__VIEW__SORT_KEY=modified" in lines
    assert "NOTEDECK__NOTES__EXTENSIONS='[.org]'" in lines

    ignored = runner.invoke(cli, ["config", "view", "--as-env", "--no-env"], env=env)

    assert "NOTEDECK__LAYOUT__MARGIN=2" in ignored.output.splitlines()
