"""
Unit tests for fstab module.
"""

import pytest

from hostprep.cli.lib.fstab import build_entry, ensure_entry, has_entry


class TestBuildEntry:
    """Tests for build_entry function."""

    @pytest.mark.unit
    def test_build_entry(self):
        assert build_entry("UUID=abc", "/app", "xfs") == "UUID=abc  /app  xfs  defaults  0 0"


class TestHasEntry:
    """Tests for has_entry function."""

    @pytest.mark.unit
    def test_commented_entry_does_not_count(self, temp_dir):
        fstab = temp_dir / "fstab"
        fstab.write_text("# UUID=abc /app xfs defaults 0 0\n", encoding="utf-8")

        assert has_entry(fstab, "UUID=abc") is False

    @pytest.mark.unit
    def test_prefix_of_other_uuid_does_not_count(self, temp_dir):
        fstab = temp_dir / "fstab"
        fstab.write_text("UUID=abcdef /data xfs defaults 0 0\n", encoding="utf-8")

        assert has_entry(fstab, "UUID=abc") is False


class TestEnsureEntry:
    """Tests for ensure_entry function."""

    @pytest.mark.unit
    def test_appends_once(self, temp_dir):
        fstab = temp_dir / "fstab"
        fstab.write_text("/dev/mapper/rhel-root  /  xfs  defaults  0 0\n", encoding="utf-8")

        assert ensure_entry(fstab, "UUID=abc", "/app", "xfs") is True
        assert ensure_entry(fstab, "UUID=abc", "/app", "xfs") is False

        lines = fstab.read_text(encoding="utf-8").splitlines()
        assert lines == [
            "/dev/mapper/rhel-root  /  xfs  defaults  0 0",
            "UUID=abc  /app  xfs  defaults  0 0",
        ]

    @pytest.mark.unit
    def test_existing_entry_with_other_mount_point_is_kept(self, temp_dir):
        fstab = temp_dir / "fstab"
        fstab.write_text("UUID=abc /srv xfs defaults 0 0\n", encoding="utf-8")

        assert ensure_entry(fstab, "UUID=abc", "/app", "xfs") is False
        assert fstab.read_text(encoding="utf-8") == "UUID=abc /srv xfs defaults 0 0\n"

    @pytest.mark.unit
    def test_missing_trailing_newline(self, temp_dir):
        fstab = temp_dir / "fstab"
        fstab.write_text("/dev/sda1 /boot xfs defaults 0 0", encoding="utf-8")

        ensure_entry(fstab, "/dev/data_vg/app", "/app", "ext4")

        assert fstab.read_text(encoding="utf-8").splitlines()[-1] == "/dev/data_vg/app  /app  ext4  defaults  0 0"

    @pytest.mark.unit
    def test_missing_file_is_created(self, temp_dir):
        fstab = temp_dir / "fstab"

        assert ensure_entry(fstab, "UUID=abc", "/app", "xfs") is True
        assert fstab.read_text(encoding="utf-8") == "UUID=abc  /app  xfs  defaults  0 0\n"
