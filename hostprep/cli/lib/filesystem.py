"""
Filesystem management functions (XFS and ext4).
"""

import logging
import os
from typing import Optional

from hostprep.cli.lib.command import OnError, run
from hostprep.cli.lib.errors import FatalError

LOG = logging.getLogger(__name__)

MKFS_COMMANDS = {
    "xfs": ["mkfs.xfs", "-f"],
    "ext4": ["mkfs.ext4", "-F"],
}


def make_filesystem(device: str, fs_type: str) -> None:
    """
    Format a device, overwriting any existing signature.

    Args:
        device: Device path (e.g., "/dev/vg_name/lv_name")
        fs_type: "xfs" or "ext4"

    Raises:
        FatalError: If the type is unsupported or formatting fails
    """
    if fs_type not in MKFS_COMMANDS:
        raise FatalError(f"Unsupported filesystem type: {fs_type}")

    cmd = MKFS_COMMANDS[fs_type]
    run([*cmd, device], error=cmd[0])


def ensure_mount_point(path: str) -> bool:
    """
    Create a mount point directory (and parents) if it does not exist.

    Returns:
        True if the directory was created

    Raises:
        FatalError: If the directory cannot be created
    """
    if os.path.isdir(path):
        return False
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FatalError(f"could not create mount point {path}: {e}")
    return True


def mount(device: str, mount_point: str) -> None:
    """
    Mount a device.

    Raises:
        FatalError: If mounting fails
    """
    run(["mount", device, mount_point], error="mount")


def filesystem_uuid(device: str) -> Optional[str]:
    """
    Resolve the filesystem UUID of a device.

    Returns:
        The UUID, or None if blkid cannot resolve it
    """
    result = run(["blkid", "-s", "UUID", "-o", "value", device], on_error=OnError.IGNORE)
    uuid = (result.stdout or "").strip() if result.returncode == 0 else ""
    return uuid or None


def detect_fs_type(device: str) -> Optional[str]:
    """
    Detect the filesystem type on a device.

    Returns:
        Filesystem type (e.g. "xfs"), or None if none was detected
    """
    result = run(["blkid", "-o", "value", "-s", "TYPE", device], on_error=OnError.IGNORE)
    fs_type = (result.stdout or "").strip() if result.returncode == 0 else ""
    return fs_type or None


def find_mount_point(device: str) -> Optional[str]:
    """
    Find where a device is mounted.

    Returns:
        The first mount target, or None if the device is not mounted
    """
    result = run(["findmnt", "-nr", "-o", "TARGET", device], on_error=OnError.IGNORE)
    if result.returncode != 0:
        return None
    targets = [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]
    return targets[0] if targets else None


def grow_xfs(mount_point: str) -> None:
    """
    Grow a mounted XFS filesystem (after LV resize).

    Raises:
        FatalError: If growing fails
    """
    run(["xfs_growfs", mount_point], error="xfs_growfs")


def grow_ext4(device: str) -> None:
    """
    Grow an ext4 filesystem on its device node, mounted or not.

    Raises:
        FatalError: If growing fails
    """
    run(["resize2fs", device], error="resize2fs")
