"""
Provisioning steps of the filesystem manager.

Each step is a strictly ordered sequence of external tool invocations. A
FatalError ends the process; StepAborted returns control to the menu. No step
keeps state between invocations and nothing is rolled back on failure.
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

import typer

from hostprep.cli.lib import filesystem, fstab, lvm, partition
from hostprep.cli.lib.config import HostprepConfig
from hostprep.cli.lib.errors import StepAborted
from hostprep.cli.lib.prompt import Prompter
from hostprep.cli.lib.validators import validate_fs_type, validate_mount_point, validate_name, validate_size

LOG = logging.getLogger(__name__)

# Filesystem growth outcomes of extend_logical_volume
GROWN = "grown"
SKIPPED = "skipped"


@dataclass(frozen=True)
class LogicalVolumeRequest:
    name: str
    size: str
    fs_type: str
    mount_point: str


def _validated(check, value: str) -> str:
    try:
        result = check(value)
    except ValueError as e:
        raise StepAborted(str(e))
    return value if result is None else result


def _show_disks() -> None:
    typer.echo("Available block devices (disks and sizes):")
    for disk in partition.list_disks():
        typer.echo(disk)


def prepare_disk(disk: str, prompter: Prompter, cfg: HostprepConfig) -> str:
    """
    Optionally partition a disk and return the device to use for LVM.

    Args:
        disk: Disk device path (e.g. "/dev/sdb")
        prompter: Operator input provider
        cfg: Loaded configuration

    Returns:
        The detected partition, or the disk itself when partitioning is
        declined or the new partition cannot be detected
    """
    typer.echo("")
    if not prompter.confirm(f"Do you want to partition {disk} with fdisk before using it for LVM?"):
        typer.echo(f"Skipping partitioning for {disk}; will use raw disk.")
        return disk

    typer.echo("Example size format: +10G, +500M. Leave blank for full disk.")
    size = prompter.ask("Enter partition size (or press Enter to use remaining space)")
    lvm_type = cfg.lvm_partition_type if prompter.confirm(
        f"Do you want to set the partition type to Linux LVM ({cfg.lvm_partition_type})?"
    ) else None

    typer.echo(f"Running fdisk to create a new partition on {disk}...")
    before = partition.list_partitions(disk)
    partition.create_partition(disk, size, lvm_type)
    partition.reread_partition_table(disk)
    time.sleep(cfg.settle_seconds)
    after = partition.list_partitions(disk)

    detected = partition.detect_partition(disk, before, after)
    if detected is None:
        typer.echo(f"ERROR: Could not detect created partition on {disk}. Using raw disk: {disk}", err=True)
        return disk

    typer.echo(f"Detected new partition: {detected}")
    return detected


def iter_physical_volumes(devices: Iterable[str], prompter: Prompter, cfg: HostprepConfig) -> Iterator[str]:
    """
    Prepare and initialize each device as a physical volume.

    Devices the operator maps to something that is not a block device are
    reported and skipped. A pvcreate failure is fatal.

    Yields:
        Initialized physical volume paths, in input order
    """
    for device in devices:
        typer.echo("")
        typer.echo(f"Preparing {device} for LVM...")
        typer.echo("----------------------------------")
        detected = prepare_disk(device, prompter, cfg)

        target = prompter.ask(
            f"Enter device to use for PV creation (raw or partition), e.g. {device} or {device}1",
            default=detected,
        )
        if not partition.is_block_device(target):
            typer.echo(f"ERROR: device {target} does not exist or is not a block device. Skipping.", err=True)
            continue

        typer.echo(f"Creating PV on {target}...")
        lvm.create_pv(target)
        yield target


def _ask_devices(prompter: Prompter, label: str) -> List[str]:
    return prompter.ask(f"{label} (space-separated, e.g., /dev/sdb /dev/sdc)").split()


def create_volume_group(prompter: Prompter, cfg: HostprepConfig) -> str:
    """
    Create a new volume group from operator-selected devices.

    Returns:
        The volume group name

    Raises:
        StepAborted: If the name is invalid or taken, or no PV was created
        FatalError: If pvcreate or vgcreate fails
    """
    typer.echo("")
    typer.echo("=== Create New VG ===")
    _show_disks()
    vg_name = _validated(validate_name, prompter.ask("Enter new VG name"))
    if lvm.volume_group_exists(vg_name):
        raise StepAborted(f"VG '{vg_name}' already exists. Aborting VG creation.")

    devices = _ask_devices(prompter, "Enter PV(s) to include")
    pvs = list(iter_physical_volumes(devices, prompter, cfg))
    if not pvs:
        raise StepAborted("No PVs created. Aborting VG creation.")

    typer.echo(f"Creating VG '{vg_name}' with PV(s): {' '.join(pvs)} ...")
    lvm.create_vg(vg_name, pvs)
    typer.echo("")
    typer.echo(f"VG '{vg_name}' created successfully with PV(s): {' '.join(pvs)}")
    return vg_name


def extend_volume_group(prompter: Prompter, cfg: HostprepConfig) -> List[str]:
    """
    Add operator-selected devices to an existing volume group.

    Each PV is added to the group as soon as it is initialized.

    Returns:
        Physical volumes added

    Raises:
        StepAborted: If the group does not exist or no PV was added
        FatalError: If pvcreate or vgextend fails
    """
    typer.echo("")
    typer.echo("=== Extend Existing VG ===")
    typer.echo("Available Volume Groups:")
    typer.echo(lvm.show_volume_groups())
    vg_name = prompter.ask("Enter VG name to extend")
    if not lvm.volume_group_exists(vg_name):
        raise StepAborted(f"VG '{vg_name}' not found.")

    _show_disks()
    devices = _ask_devices(prompter, "Enter PV(s) to add")

    added = []
    for pv in iter_physical_volumes(devices, prompter, cfg):
        lvm.extend_vg(vg_name, pv)
        added.append(pv)

    if not added:
        raise StepAborted("No PVs added. VG not extended.")

    typer.echo("")
    typer.echo(f"VG '{vg_name}' extended successfully with new PV(s): {' '.join(added)}")
    return added


def _ask_logical_volume(prompter: Prompter, cfg: HostprepConfig, index: int) -> LogicalVolumeRequest:
    name = _validated(validate_name, prompter.ask(f"Enter LV #{index} name"))
    size = _validated(validate_size, prompter.ask(f"Enter LV #{index} size (e.g., 100G, 1T)"))
    fs_type = _validated(
        validate_fs_type,
        prompter.ask(f"Filesystem type (xfs/ext4, default {cfg.default_fs_type})", default=cfg.default_fs_type),
    )
    mount_point = _validated(
        validate_mount_point, prompter.ask("Enter mount point (full path, e.g., /data or /oracle)")
    )
    return LogicalVolumeRequest(name=name, size=size, fs_type=fs_type, mount_point=mount_point)


def provision_logical_volume(vg_name: str, request: LogicalVolumeRequest, cfg: HostprepConfig) -> str:
    """
    Create, format, mount and persist one logical volume.

    Returns:
        The logical volume device path

    Raises:
        FatalError: If lvcreate, mkfs, mount point creation or mount fails
    """
    device = lvm.create_lv(vg_name, request.name, request.size)
    filesystem.make_filesystem(device, request.fs_type)

    if filesystem.ensure_mount_point(request.mount_point):
        typer.echo(f"Created mount directory: {request.mount_point}")
    filesystem.mount(device, request.mount_point)

    uuid = filesystem.filesystem_uuid(device)
    source = f"UUID={uuid}" if uuid else device
    if fstab.ensure_entry(cfg.fstab_path, source, request.mount_point, request.fs_type):
        LOG.info("Added %s to %s", source, cfg.fstab_path)
    else:
        typer.echo(f"{cfg.fstab_path} already has an entry for {source}; not adding another.")

    typer.echo(
        f"LV {request.name} created, formatted as {request.fs_type}, "
        f"mounted at {request.mount_point}, added to fstab."
    )
    return device


def create_logical_volumes(prompter: Prompter, cfg: HostprepConfig, vg_name: Optional[str] = None) -> List[str]:
    """
    Create logical volumes with filesystems, mounts and fstab entries.

    Args:
        prompter: Operator input provider
        cfg: Loaded configuration
        vg_name: Volume group to use; asked for when None

    Returns:
        Device paths of the created logical volumes
    """
    typer.echo("")
    typer.echo("=== Create Logical Volumes ===")
    if vg_name is None:
        typer.echo(lvm.show_volume_groups())
        vg_name = _validated(validate_name, prompter.ask("Enter VG name to use"))

    raw_count = prompter.ask("How many LVs to create?")
    try:
        count = int(raw_count)
    except ValueError:
        raise StepAborted(f"Invalid LV count: {raw_count!r}")
    if count < 1:
        raise StepAborted(f"Invalid LV count: {raw_count!r}")

    devices = []
    for index in range(1, count + 1):
        typer.echo("")
        typer.echo(f"---- LV #{index} Configuration ----")
        request = _ask_logical_volume(prompter, cfg, index)
        devices.append(provision_logical_volume(vg_name, request, cfg))
    return devices


def extend_logical_volume(prompter: Prompter, cfg: HostprepConfig) -> str:
    """
    Extend a logical volume and grow its filesystem in place.

    Returns:
        GROWN if the filesystem was grown, SKIPPED otherwise

    Raises:
        StepAborted: If a name is invalid or the logical volume does not exist
        FatalError: If lvextend or the filesystem grow tool fails
    """
    typer.echo("")
    typer.echo("=== Extend Logical Volume ===")
    typer.echo(lvm.show_logical_volumes())
    vg_name = _validated(validate_name, prompter.ask("Enter VG name"))
    lv_name = _validated(validate_name, prompter.ask("Enter LV name to extend"))
    size = _validated(validate_size, prompter.ask("Enter additional size (e.g., 100G, 1T)"))

    path = lvm.lv_path(vg_name, lv_name)
    if not lvm.lv_exists(path):
        raise StepAborted(f"LV {path} not found.")

    typer.echo(f"Extending {path} by {size}...")
    lvm.extend_lv(path, size)

    fs_type = filesystem.detect_fs_type(path)
    outcome = SKIPPED
    if fs_type == "xfs":
        typer.echo("Detected filesystem: XFS")
        mount_point = filesystem.find_mount_point(path)
        if mount_point:
            filesystem.grow_xfs(mount_point)
            outcome = GROWN
        else:
            typer.echo("WARNING: LV not mounted; cannot run xfs_growfs automatically.", err=True)
    elif fs_type == "ext4":
        typer.echo("Detected filesystem: EXT4")
        filesystem.grow_ext4(path)
        outcome = GROWN
    else:
        typer.echo(f"Unknown or no filesystem detected ({fs_type or 'none'}). Skipping resize.")

    typer.echo(f"LV {lv_name} extended successfully by {size} and filesystem resized (if applicable).")
    return outcome


def full_setup(prompter: Prompter, cfg: HostprepConfig) -> List[str]:
    """
    Create a new volume group and then logical volumes inside it.

    Returns:
        Device paths of the created logical volumes
    """
    typer.echo("")
    typer.echo("=== Full LVM + Filesystem Clean Setup ===")
    vg_name = create_volume_group(prompter, cfg)
    devices = create_logical_volumes(prompter, cfg, vg_name=vg_name)

    typer.echo("")
    typer.echo("Full clean setup completed successfully!")
    typer.echo(f"VG: {vg_name}")
    typer.echo(f"LV(s) created and mounted: {' '.join(devices)}")
    return devices
