"""
Disk partitioning helpers built on fdisk and lsblk.
"""

import logging
import os
import re
import shutil
import stat
from typing import List, Optional, Sequence

import typer

from hostprep.cli.lib.command import OnError, run

LOG = logging.getLogger(__name__)

_PARTITION_NUMBER_RE = re.compile(r"(\d+)$")


def list_disks() -> List[str]:
    """
    List whole disks with their sizes, e.g. "/dev/sdb (100G)".
    """
    result = run(["lsblk", "-dpno", "NAME,SIZE,TYPE"], on_error=OnError.IGNORE)
    disks = []
    for line in (result.stdout or "").splitlines():
        fields = line.split()
        if len(fields) == 3 and fields[2] == "disk":
            disks.append(f"{fields[0]} ({fields[1]})")
    return disks


def fdisk_script(size: str = "", lvm_type: Optional[str] = None) -> str:
    """
    Build the fdisk dialogue that adds one primary partition.

    Args:
        size: Last sector / size token (e.g. "+10G"); empty uses the remaining space
        lvm_type: Partition type code to set (e.g. "8e"), or None to keep the default

    Returns:
        Newline-separated fdisk commands ending with "w"
    """
    lines = [
        "n",  # new partition
        "p",  # primary
        "",  # default partition number
        "",  # default first sector
        size,  # last sector, default is the end of the free space
    ]
    if lvm_type:
        lines += [
            "t",  # change type
            "",  # of the last partition
            lvm_type,
        ]
    lines.append("w")
    return "\n".join(lines) + "\n"


def create_partition(disk: str, size: str = "", lvm_type: Optional[str] = None) -> bool:
    """
    Create a new primary partition on a disk.

    An fdisk error is reported but not raised; the caller detects the
    resulting partition and the operator confirms it.

    Returns:
        True if fdisk exited successfully
    """
    result = run(["fdisk", disk], input=fdisk_script(size, lvm_type), on_error=OnError.IGNORE)
    if result.returncode != 0:
        typer.echo("Warning: fdisk returned an error. Attempting to continue.", err=True)
        return False
    return True


def reread_partition_table(disk: str) -> None:
    """
    Ask the kernel to reread the partition table of a disk.

    Uses partprobe when available and falls back to blockdev.
    """
    if shutil.which("partprobe"):
        run(["partprobe", disk], on_error=OnError.IGNORE)
    else:
        run(["blockdev", "--rereadpt", disk], on_error=OnError.IGNORE)


def list_partitions(disk: str) -> List[str]:
    """
    List partition names of a disk in lsblk order (e.g. ["sdb1", "sdb2"]).
    """
    result = run(["lsblk", "-ln", "-o", "NAME,TYPE", disk], on_error=OnError.IGNORE)
    partitions = []
    for line in (result.stdout or "").splitlines():
        fields = line.split()
        if len(fields) >= 2 and fields[1] == "part":
            partitions.append(fields[0])
    return partitions


def _partition_number(name: str) -> int:
    match = _PARTITION_NUMBER_RE.search(name)
    return int(match.group(1)) if match else -1


def detect_partition(disk: str, before: Sequence[str], after: Sequence[str]) -> Optional[str]:
    """
    Pick the partition created on a disk.

    Partitions that were not present before partitioning win; otherwise the
    highest-numbered partition of the disk is taken. Ties keep lsblk order.

    Args:
        disk: Disk device path (e.g. "/dev/sdb")
        before: Partition names listed before partitioning
        after: Partition names listed after partitioning

    Returns:
        Partition device path (e.g. "/dev/sdb1"), or None if the disk has none
    """
    base = os.path.basename(disk)
    existing = set(before)
    candidates = [name for name in after if name != base and name not in existing]
    if not candidates:
        candidates = [name for name in after if name != base]
    if not candidates:
        return None

    newest = max(candidates, key=_partition_number)
    LOG.debug("Partition candidates on %s: %s -> %s", disk, candidates, newest)
    return f"/dev/{newest}"


def is_block_device(path: str) -> bool:
    """Check whether a path exists and is a block device."""
    try:
        return stat.S_ISBLK(os.stat(path).st_mode)
    except OSError:
        return False
