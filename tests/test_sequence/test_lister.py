"""Tests for EntryLister."""

import os

import pytest

from sequence.errors import ListingError
from sequence.lister import Entry, EntryLister, resolve_directory
from sequence.options import ListingMode


@pytest.fixture
def scripts_dir(tmp_path):
    d = tmp_path / "rc.d"
    d.mkdir()
    return d


def touch(directory, *names):
    for name in names:
        (directory / name).write_text("#!/bin/sh\n")


def names(entries):
    return [e.name for e in entries]


class TestOrdering:
    def test_bytewise_not_numeric(self, scripts_dir):
        touch(scripts_dir, "9-c", "2-b", "10-a")
        entries = EntryLister(str(scripts_dir)).list_entries()
        assert names(entries) == ["10-a", "2-b", "9-c"]

    def test_case_sensitive(self, scripts_dir):
        touch(scripts_dir, "b", "B", "a", "A")
        entries = EntryLister(str(scripts_dir)).list_entries()
        assert names(entries) == ["A", "B", "a", "b"]

    def test_empty_directory(self, scripts_dir):
        assert EntryLister(str(scripts_dir)).list_entries() == []


class TestFiltering:
    def test_dot_entries_excluded(self, scripts_dir):
        touch(scripts_dir, ".hidden", "visible")
        (scripts_dir / ".dotdir").mkdir()
        for mode in ListingMode:
            entries = EntryLister(str(scripts_dir), mode=mode).list_entries()
            assert names(entries) == ["visible"]

    def test_strict_skips_directories(self, scripts_dir):
        touch(scripts_dir, "a")
        (scripts_dir / "sub").mkdir()
        assert names(EntryLister(str(scripts_dir)).list_entries()) == ["a"]

    def test_strict_follows_symlink_to_file(self, scripts_dir, tmp_path):
        target = tmp_path / "real"
        target.write_text("#!/bin/sh\n")
        os.symlink(target, scripts_dir / "link")
        assert names(EntryLister(str(scripts_dir)).list_entries()) == ["link"]

    def test_strict_skips_symlink_to_directory(self, scripts_dir, tmp_path):
        (tmp_path / "elsewhere").mkdir()
        os.symlink(tmp_path / "elsewhere", scripts_dir / "dirlink")
        assert EntryLister(str(scripts_dir)).list_entries() == []

    def test_strict_skips_broken_symlink(self, scripts_dir):
        os.symlink(scripts_dir / "missing", scripts_dir / "broken")
        touch(scripts_dir, "ok")
        assert names(EntryLister(str(scripts_dir)).list_entries()) == ["ok"]

    def test_strict_symlink_loop_is_fatal(self, scripts_dir):
        os.symlink("loop", scripts_dir / "loop")
        with pytest.raises(ListingError, match="Could not stat"):
            EntryLister(str(scripts_dir)).list_entries()

    def test_permissive_admits_everything_visible(self, scripts_dir):
        touch(scripts_dir, "a")
        (scripts_dir / "sub").mkdir()
        os.symlink(scripts_dir / "missing", scripts_dir / "broken")
        entries = EntryLister(str(scripts_dir), mode=ListingMode.PERMISSIVE).list_entries()
        assert names(entries) == ["a", "broken", "sub"]


class TestEntries:
    def test_full_path_uses_directory_as_given(self, scripts_dir):
        touch(scripts_dir, "a")
        [entry] = EntryLister(str(scripts_dir)).list_entries()
        assert entry == Entry(
            name="a",
            full_path=os.path.join(str(scripts_dir), "a"),
            directory=str(scripts_dir),
        )
        assert entry.executable == str(scripts_dir / "a")

    def test_base_directory(self, scripts_dir, tmp_path):
        touch(scripts_dir, "a")
        [entry] = EntryLister("rc.d", base_directory=str(tmp_path)).list_entries()
        assert entry.full_path == os.path.join("rc.d", "a")
        assert entry.directory == str(scripts_dir)
        assert entry.executable == str(scripts_dir / "a")


class TestErrors:
    def test_missing_directory(self, tmp_path):
        missing = str(tmp_path / "nope")
        with pytest.raises(ListingError, match="Could not open") as exc_info:
            EntryLister(missing).list_entries()
        assert missing in str(exc_info.value)
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_not_a_directory(self, tmp_path):
        f = tmp_path / "file"
        f.write_text("")
        with pytest.raises(ListingError):
            EntryLister(str(f)).list_entries()


class TestResolveDirectory:
    def test_absolute_directory_ignores_base(self, tmp_path):
        assert resolve_directory(str(tmp_path), "/somewhere") == str(tmp_path)

    def test_relative_to_base(self, tmp_path):
        assert resolve_directory("x", str(tmp_path)) == str(tmp_path / "x")

    def test_relative_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_directory("x") == os.path.join(os.getcwd(), "x")
