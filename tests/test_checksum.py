"""Tests for MD5 checksum calculation."""

import hashlib
from pathlib import Path

import pytest

from supload.checksum import ChecksumCalculator
from supload.exceptions import DigestComputeError


class TestChecksumCalculator:
    """Test checksum calculation functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.calculator = ChecksumCalculator()

    def test_md5_known_answer(self, tmp_path):
        """Test MD5 calculation against a known answer."""
        fixture_path = tmp_path / "small.txt"
        fixture_path.write_bytes(b"Hello, supload! This is a test file for checksum validation.")

        actual_md5 = self.calculator.calculate_md5(fixture_path)

        assert actual_md5 == "c296c9e5fc32b704a84efc22eba8e158"
        assert len(actual_md5) == 32
        assert all(c in "0123456789abcdef" for c in actual_md5)

    def test_md5_empty_file(self, tmp_path):
        """A zero-byte file still has a digest."""
        fixture_path = tmp_path / "empty.txt"
        fixture_path.touch()

        assert self.calculator.calculate_md5(fixture_path) == "d41d8cd98f00b204e9800998ecf8427e"

    def test_md5_chunk_boundaries(self, tmp_path):
        """Test MD5 calculation for files at and around the chunk size."""
        chunk_size = 8192

        test_cases = [
            ("exactly_chunk", chunk_size),
            ("chunk_plus_one", chunk_size + 1),
            ("chunk_minus_one", chunk_size - 1),
            ("multi_chunk", chunk_size * 2 + 100),
        ]

        for test_name, file_size in test_cases:
            content = b"B" * file_size
            fixture_path = tmp_path / f"{test_name}.bin"
            fixture_path.write_bytes(content)

            actual_md5 = self.calculator.calculate_md5(fixture_path)

            assert actual_md5 == hashlib.md5(content).hexdigest(), test_name

    def test_md5_rereads_file_every_call(self, tmp_path):
        """Digests are not cached between calls."""
        fixture_path = tmp_path / "changing.txt"
        fixture_path.write_bytes(b"hello world\n")
        first = self.calculator.calculate_md5(fixture_path)

        fixture_path.write_bytes(b"version two\n")
        second = self.calculator.calculate_md5(fixture_path)

        assert first == "6f5902ac237024bdd0c176cb93063dc4"
        assert second == "223deef93d3131e3705ab44c2cd042f9"

    def test_md5_missing_file_raises(self, tmp_path):
        """A missing file is a digest error, not a crash."""
        with pytest.raises(DigestComputeError) as exc_info:
            self.calculator.calculate_md5(tmp_path / "missing.txt")

        assert "No such file" in str(exc_info.value)

    def test_md5_directory_raises(self, tmp_path):
        """Reading a directory fails with a digest error."""
        with pytest.raises(DigestComputeError):
            self.calculator.calculate_md5(tmp_path)
    def test_custom_chunk_size(self, tmp_path):
        """A small chunk size produces the same digest."""
        fixture_path = tmp_path / "chunks.txt"
        fixture_path.write_bytes(b"hello world\n")

        calculator = ChecksumCalculator(chunk_size=3)

        assert calculator.calculate_md5(Path(fixture_path)) == "6f5902ac237024bdd0c176cb93063dc4"
