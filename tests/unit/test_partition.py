"""
Unit tests for partition module.
"""

from unittest.mock import patch

import pytest

from hostprep.cli.lib.partition import (
    create_partition,
    detect_partition,
    fdisk_script,
    is_block_device,
    list_disks,
    list_partitions,
    reread_partition_table,
)


class TestFdiskScript:
    """Tests for fdisk_script function."""

    @pytest.mark.unit
    def test_full_disk(self):
        assert fdisk_script() == "n\np\n\n\n\nw\n"

    @pytest.mark.unit
    def test_size_and_lvm_type(self):
        assert fdisk_script("+10G", "8e") == "n\np\n\n\n+10G\nt\n\n8e\nw\n"


class TestCreatePartition:
    """Tests for create_partition function."""

    @pytest.mark.unit
    def test_pipes_script_to_fdisk(self, fake_commands):
        assert create_partition("/dev/sdb", "+5G") is True

        assert fake_commands.calls == [["fdisk", "/dev/sdb"]]
        assert fake_commands.inputs == ["n\np\n\n\n+5G\nw\n"]

    @pytest.mark.unit
    def test_fdisk_error_is_not_raised(self, fake_commands, capsys):
        fake_commands.set("fdisk", returncode=1, stderr="Re-reading the partition table failed.")

        assert create_partition("/dev/sdb") is False
        assert "fdisk returned an error" in capsys.readouterr().err


class TestRereadPartitionTable:
    """Tests for reread_partition_table function."""

    @pytest.mark.unit
    def test_uses_partprobe(self, fake_commands, mock_which):
        mock_which.return_value = "/usr/sbin/partprobe"

        reread_partition_table("/dev/sdb")

        assert fake_commands.calls == [["partprobe", "/dev/sdb"]]

    @pytest.mark.unit
    def test_falls_back_to_blockdev(self, fake_commands, mock_which):
        mock_which.return_value = None
        fake_commands.set("blockdev", returncode=1, stderr="busy")

        reread_partition_table("/dev/sdb")

        assert fake_commands.calls == [["blockdev", "--rereadpt", "/dev/sdb"]]


class TestListing:
    """Tests for lsblk based listings."""

    @pytest.mark.unit
    def test_list_partitions(self, fake_commands):
        fake_commands.set(
            "lsblk", "-ln",
            stdout="sdb  disk\nsdb1 part\nsdb2 part\ndata_vg-app lvm\n",
        )

        assert list_partitions("/dev/sdb") == ["sdb1", "sdb2"]
        assert fake_commands.calls == [["lsblk", "-ln", "-o", "NAME,TYPE", "/dev/sdb"]]

    @pytest.mark.unit
    def test_list_disks(self, fake_commands):
        fake_commands.set(
            "lsblk", "-dpno",
            stdout="/dev/sda 40G disk\n/dev/sdb 100G disk\n/dev/sr0 1024M rom\n",
        )

        assert list_disks() == ["/dev/sda (40G)", "/dev/sdb (100G)"]


class TestDetectPartition:
    """Tests for detect_partition function."""

    @pytest.mark.unit
    def test_first_partition_on_empty_disk(self):
        assert detect_partition("/dev/sdb", [], ["sdb1"]) == "/dev/sdb1"

    @pytest.mark.unit
    def test_new_partition_wins_over_existing(self):
        assert detect_partition("/dev/sdb", ["sdb1", "sdb2"], ["sdb1", "sdb2", "sdb3"]) == "/dev/sdb3"

    @pytest.mark.unit
    def test_highest_numbered_new_partition(self):
        assert detect_partition("/dev/sdc", ["sdc1"], ["sdc1", "sdc10", "sdc9"]) == "/dev/sdc10"

    @pytest.mark.unit
    def test_nvme_naming(self):
        assert detect_partition("/dev/nvme0n1", ["nvme0n1p1"], ["nvme0n1p1", "nvme0n1p2"]) == "/dev/nvme0n1p2"

    @pytest.mark.unit
    def test_no_new_partition_takes_highest_existing(self):
        assert detect_partition("/dev/sdb", ["sdb1", "sdb2"], ["sdb2", "sdb1"]) == "/dev/sdb2"

    @pytest.mark.unit
    def test_disk_without_partitions(self):
        assert detect_partition("/dev/sdb", [], []) is None

    @pytest.mark.unit
    def test_disk_name_is_never_a_partition(self):
        assert detect_partition("/dev/sdb", [], ["sdb"]) is None


class TestIsBlockDevice:
    """Tests for is_block_device function."""

    @pytest.mark.unit
    def test_regular_file(self, temp_dir):
        path = temp_dir / "disk.img"
        path.write_bytes(b"\0")

        assert is_block_device(str(path)) is False

    @pytest.mark.unit
    def test_missing_path(self, temp_dir):
        assert is_block_device(str(temp_dir / "sdz")) is False

    @pytest.mark.unit
    @patch("os.stat")
    def test_block_device(self, mock_stat):
        mock_stat.return_value.st_mode = 0o060660

        assert is_block_device("/dev/sdb") is True
