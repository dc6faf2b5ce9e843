"""Tests for directory tree walking."""

import os

import pytest

from supload.models import UploadTask, normalize_prefix
from supload.walker import walk


class TestNormalizePrefix:
    """Destination prefixes always end with exactly one slash."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("a/b", "a/b/"),
            ("a/b/", "a/b/"),
            ("a/b//", "a/b/"),
            ("cont", "cont/"),
        ],
    )
    def test_normalize_prefix(self, value, expected):
        assert normalize_prefix(value) == expected

    def test_upload_task_normalizes_prefix(self, tmp_path):
        task = UploadTask("a/b", tmp_path / "x.txt")

        assert task.destination_prefix == "a/b/"
        assert task.object_name == "a/b/x.txt"


class TestWalk:
    """Test UploadTask enumeration."""

    def test_walk_preserves_relative_directories(self, tmp_path):
        """Nested files keep their directory under the destination."""
        (tmp_path / "x.txt").write_text("x")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "y.txt").write_text("y")

        tasks = list(walk(tmp_path, "a/b"))

        assert [task.object_name for task in tasks] == ["a/b/x.txt", "a/b/sub/y.txt"]
        assert [task.destination_prefix for task in tasks] == ["a/b/", "a/b/sub/"]
        assert all(not task.destination_prefix.endswith("//") for task in tasks)

    def test_walk_with_trailing_slash_destination(self, tmp_path):
        (tmp_path / "sub" / "deeper").mkdir(parents=True)
        (tmp_path / "sub" / "deeper" / "z.bin").write_bytes(b"z")

        tasks = list(walk(tmp_path, "cont/dir/"))

        assert [task.object_name for task in tasks] == ["cont/dir/sub/deeper/z.bin"]

    def test_walk_skips_directories(self, tmp_path):
        """Empty directories never become tasks."""
        (tmp_path / "empty").mkdir()
        (tmp_path / "also-empty" / "nested").mkdir(parents=True)

        assert list(walk(tmp_path, "cont")) == []

    def test_walk_source_paths_are_files(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "c.txt").write_text("c")

        tasks = list(walk(tmp_path, "cont"))

        assert [task.source_path for task in tasks] == [tmp_path / "a.txt", tmp_path / "b" / "c.txt"]
        assert all(task.source_path.is_file() for task in tasks)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_walk_ignores_symlinks(self, tmp_path):
        """Only regular files are uploaded, like find -type f.

        os.walk already stays out of symlinked directories; symlinked files
        are skipped on purpose as well.
        """
        root = tmp_path / "root"
        root.mkdir()
        (root / "real.txt").write_text("real")
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "hidden.txt").write_text("hidden")

        os.symlink(root / "real.txt", root / "link.txt")
        os.symlink(outside, root / "linked-dir")

        tasks = list(walk(root, "cont"))

        assert [task.object_name for task in tasks] == ["cont/real.txt"]

    def test_walk_is_lazy(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")

        tasks = walk(tmp_path, "cont")

        assert next(tasks).object_name == "cont/a.txt"
        with pytest.raises(StopIteration):
            next(tasks)
