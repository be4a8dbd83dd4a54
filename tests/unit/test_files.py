"""
Module: tests/unit/test_files.py

What:
    Exercise :func:`tipbook.utils.files.atomic_write_text`.

Why:
    ``tipbook fmt`` rewrites corpus files in place; an interrupted rewrite must
    never leave a truncated entry.

Invariants & Safety Rules:
    - A failed write leaves the original file byte-for-byte unchanged.
    - No temporary files are left behind, successful or not.
"""

import pathlib

import pytest

from tipbook.utils.files import atomic_write_text


@pytest.fixture
def workdir(tmp_path):
    target = tmp_path / "tips"
    target.mkdir()
    return target


def test_atomic_write_replaces_content(workdir):
    path = workdir / "entry.tip"
    path.write_text("old\n")
    path.chmod(0o640)

    atomic_write_text(path, "new\n")

    assert path.read_text() == "new\n"
    assert path.stat().st_mode & 0o777 == 0o640
    assert [child.name for child in workdir.iterdir()] == ["entry.tip"]


def test_atomic_write_creates_missing_file(workdir):
    path = workdir / "fresh.tip"
    atomic_write_text(path, "name: X\n")
    assert path.read_text() == "name: X\n"


def test_failed_encoding_keeps_original(workdir):
    path = workdir / "entry.tip"
    path.write_text("name: Original\n", encoding="ascii")

    with pytest.raises(UnicodeEncodeError):
        atomic_write_text(path, "name: Café\n", encoding="ascii")

    assert path.read_text(encoding="ascii") == "name: Original\n"
    assert [child.name for child in workdir.iterdir()] == ["entry.tip"]


def test_failed_rename_keeps_original(workdir, monkeypatch):
    path = workdir / "entry.tip"
    path.write_text("name: Original\n")

    def refuse(self, target):
        raise OSError("No space left on device")

    monkeypatch.setattr(pathlib.Path, "replace", refuse)

    with pytest.raises(OSError, match="No space left"):
        atomic_write_text(path, "name: Rewritten\n")

    assert path.read_text() == "name: Original\n"
    assert [child.name for child in workdir.iterdir()] == ["entry.tip"]
