"""
LVM management functions.
"""

from typing import List, Sequence

from hostprep.cli.lib import partition
from hostprep.cli.lib.command import OnError, run


def lv_path(vg_name: str, lv_name: str) -> str:
    """Device node of a logical volume (e.g. "/dev/data_vg/app")."""
    return f"/dev/{vg_name}/{lv_name}"


def list_volume_groups() -> List[str]:
    """
    List existing volume group names.

    Returns:
        Volume group names, empty if vgs fails
    """
    result = run(["vgs", "--noheadings", "-o", "vg_name"], on_error=OnError.IGNORE)
    if result.returncode != 0:
        return []
    return [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]


def volume_group_exists(vg_name: str) -> bool:
    return vg_name in list_volume_groups()


def show_volume_groups() -> str:
    """Human readable `vgs` report."""
    return (run(["vgs"], on_error=OnError.IGNORE).stdout or "").rstrip()


def show_logical_volumes() -> str:
    """Human readable `lvs` report."""
    return (run(["lvs"], on_error=OnError.IGNORE).stdout or "").rstrip()


def create_pv(device: str) -> None:
    """
    Initialize a device as a physical volume.

    Raises:
        FatalError: If pvcreate fails
    """
    run(["pvcreate", device], error=f"pvcreate for {device}")


def create_vg(vg_name: str, devices: Sequence[str]) -> None:
    """
    Create a volume group from physical volumes.

    Args:
        vg_name: Volume group name
        devices: Physical volume paths

    Raises:
        FatalError: If vgcreate fails
    """
    run(["vgcreate", vg_name, *devices], error="vgcreate")


def extend_vg(vg_name: str, device: str) -> None:
    """
    Add a physical volume to an existing volume group.

    Raises:
        FatalError: If vgextend fails
    """
    run(["vgextend", vg_name, device], error="vgextend")


def create_lv(vg_name: str, lv_name: str, size: str) -> str:
    """
    Create a logical volume.

    Args:
        vg_name: Volume group name
        lv_name: Logical volume name
        size: LVM size token (e.g. "50G")

    Returns:
        Path to the logical volume (e.g., "/dev/vg_name/lv_name")

    Raises:
        FatalError: If LV creation fails
    """
    run(["lvcreate", "-L", size, "-n", lv_name, vg_name], error="lvcreate")
    return lv_path(vg_name, lv_name)


def extend_lv(path: str, additional_size: str) -> None:
    """
    Grow a logical volume by an additional size.

    Args:
        path: Logical volume device path
        additional_size: Size to add (e.g. "10G"; a leading "+" is optional)

    Raises:
        FatalError: If lvextend fails
    """
    run(["lvextend", "-L", f"+{additional_size.lstrip('+')}", path], error="lvextend")


def lv_exists(path: str) -> bool:
    """Check whether a logical volume device node exists (directories do not count)."""
    return partition.is_block_device(path)
