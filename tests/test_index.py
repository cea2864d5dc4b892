"""Tests covering note discovery and the in-memory index."""

from pathlib import Path

import pytest

from notedeck.config.models import NotesSettings
from notedeck.errors import NoteReadError
from notedeck.index import MetadataParser, NoteIndex, NoteRecord, NoteScanner


def _note(directory: Path, name: str, title: str | None = None) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    header = f"#+TITLE: {title}\n" if title else ""
    path.write_text(header + "body\n", encoding="utf-8")
    return path


def _index(workers: int = 1) -> NoteIndex:
    return NoteIndex(NoteScanner(extensions=[".org"]), MetadataParser(), workers=workers)


def test_scanner_filters_non_notes(tmp_path: Path) -> None:
    _note(tmp_path, "b.org")
    _note(tmp_path, "A.ORG")
    _note(tmp_path, "readme.md")
    _note(tmp_path, ".hidden.org")
    (tmp_path / "folder.org").mkdir()
    _note(tmp_path / "nested", "deep.org")
    (tmp_path / "dangling.org").symlink_to(tmp_path / "does-not-exist.org")

    found = [path.name for path in NoteScanner(extensions=[".org"]).scan(tmp_path)]

    assert found == ["A.ORG", "b.org"]


def test_scanner_can_include_hidden_files(tmp_path: Path) -> None:
    _note(tmp_path, ".hidden.org")

    found = list(NoteScanner(extensions=[".org"], include_hidden=True).scan(tmp_path))

    assert [path.name for path in found] == [".hidden.org"]
    assert all(path.is_absolute() for path in found)


def test_scanner_ignores_missing_directory(tmp_path: Path) -> None:
    assert list(NoteScanner(extensions=[".org"]).scan(tmp_path / "missing")) == []


def test_collect_gathers_notes_across_directories(tmp_path: Path) -> None:
    first = _note(tmp_path / "one", "a.org", "Alpha")
    second = _note(tmp_path / "two", "b.org", "Beta")

    index = _index()
    records = index.collect([tmp_path / "one", tmp_path / "two", tmp_path / "missing"])

    assert [record.title for record in records] == ["Alpha", "Beta"]
    assert index.records == records
    assert len(index) == 2
    assert index.get(first.resolve()) is records[0]
    assert index.get(second.resolve()) is records[1]
    assert index.errors == ()


def test_collect_with_no_readable_directories_is_empty(tmp_path: Path) -> None:
    index = _index()

    assert index.collect([tmp_path / "nope", tmp_path / "also-nope"]) == ()
    assert index.collect([]) == ()


def test_collect_lists_duplicate_directories_once(tmp_path: Path) -> None:
    _note(tmp_path, "a.org")

    records = _index().collect([tmp_path, tmp_path])

    assert len(records) == 1


def test_collect_replaces_previous_contents(tmp_path: Path) -> None:
    removed = _note(tmp_path, "a.org", "Old")
    index = _index()
    index.collect([tmp_path])

    removed.unlink()
    _note(tmp_path, "b.org", "New")
    records = index.collect([tmp_path])

    assert [record.title for record in records] == ["New"]
    assert index.get(removed.resolve()) is None


def test_snapshot_held_by_reader_stays_consistent_across_collect(tmp_path: Path) -> None:
    old = _note(tmp_path, "a.org", "Old").resolve()
    index = _index()
    index.collect([tmp_path])
    before = index.snapshot

    old.unlink()
    new = _note(tmp_path, "b.org", "New").resolve()
    index.collect([tmp_path])
    after = index.snapshot

    assert before is not after
    assert [record.path for record in before.records] == [old]
    assert before.get(old) is not None
    assert before.get(new) is None
    assert [record.path for record in after.records] == [new]
    assert after.get(old) is None
    assert index.records is after.records
    with pytest.raises(TypeError):
        after.by_path[old] = before.records[0]  # type: ignore[index]


def test_collect_skips_unreadable_notes_and_continues(tmp_path: Path) -> None:
    class FailingParser(MetadataParser):
        def parse(self, path: Path) -> NoteRecord:  # type: ignore[override]
            if path.name == "broken.org":
                raise NoteReadError(f"{path}: permission denied")
            return super().parse(path)

    _note(tmp_path, "broken.org")
    _note(tmp_path, "fine.org", "Fine")

    index = NoteIndex(NoteScanner(extensions=[".org"]), FailingParser())
    records = index.collect([tmp_path])

    assert [record.title for record in records] == ["Fine"]
    assert len(index.errors) == 1
    assert "broken.org" in index.errors[0]


def test_parallel_collect_keeps_directory_order(tmp_path: Path) -> None:
    directories = []
    for number in range(5):
        directory = tmp_path / f"dir{number}"
        _note(directory, f"note{number}.org", f"Note {number}")
        directories.append(directory)

    records = _index(workers=4).collect(directories)

    assert [record.title for record in records] == [f"Note {n}" for n in range(5)]


def test_from_settings_honours_extensions(tmp_path: Path) -> None:
    _note(tmp_path, "a.txt", "Text note")
    _note(tmp_path, "b.org", "Org note")

    index = NoteIndex.from_settings(
        NotesSettings(extensions=["txt"]), default_icon="material/note-outline"
    )

    assert [record.title for record in index.collect([tmp_path])] == ["Text note"]
