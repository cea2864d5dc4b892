"""Smoke tests for the CLI entrypoint."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from notedeck.cli import KEY_BINDINGS, cli


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("NOTEDECK__")}
    env["HOME"] = str(tmp_path)
    return env


def _write_note(directory: Path, name: str, body: str, mtime: float) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(body, encoding="utf-8")
    os.utime(path, (mtime, mtime))


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "notedeck lists note files" in result.output
    for command in ("list", "browse", "config"):
        assert command in result.output


def test_list_renders_notes_in_sort_order(tmp_path: Path) -> None:
    notes = tmp_path / "notes"
    _write_note(notes, "older.org", "#+TITLE: Older note\n#+FILETAGS: :work:\n", 1_700_000_000)
    _write_note(notes, "newer.org", "#+TITLE: Newer note\n", 1_700_000_600)
    _write_note(notes, "ignored.txt", "#+TITLE: Not a note\n", 1_700_000_900)
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["list", str(notes), "--width", "60", "--no-icons"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 0, result.output
    assert "Not a note" not in result.output
    assert result.output.index("Newer note") < result.output.index("Older note")
    assert "work" in result.output


def test_list_ascending_by_title(tmp_path: Path) -> None:
    notes = tmp_path / "notes"
    _write_note(notes, "b.org", "#+TITLE: Beta\n", 1_700_000_000)
    _write_note(notes, "a.org", "#+TITLE: Alpha\n", 1_700_000_600)
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["list", str(notes), "--sort", "title", "--ascending", "--width", "40", "--no-icons"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 0, result.output
    assert result.output.index("Alpha") < result.output.index("Beta")


def test_list_empty_directory_reports_no_notes(tmp_path: Path) -> None:
    notes = tmp_path / "notes"
    notes.mkdir()
    runner = CliRunner()

    result = runner.invoke(cli, ["list", str(notes)], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "No notes found" in result.output


def test_list_rejects_unknown_sort_key(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["list", str(tmp_path), "--sort", "size"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0


def test_key_bindings_cover_navigation_and_quit() -> None:
    actions = set(KEY_BINDINGS.values())

    assert {"next", "previous", "open", "quit", "reverse", "cycle_sort"} <= actions
