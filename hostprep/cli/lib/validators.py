"""
Input validation functions.
"""

import re

SUPPORTED_FS_TYPES = ("xfs", "ext4")

_SIZE_RE = re.compile(r"^\+?\d+(\.\d+)?[bBsSkKmMgGtTpPeE]?$")


def validate_name(name: str) -> None:
    """
    Validate a volume group or logical volume name.

    Args:
        name: Name to validate

    Raises:
        ValueError: If name is invalid
    """
    if not name:
        raise ValueError("Name cannot be empty")

    if len(name) > 127:
        raise ValueError("Name must be at most 127 characters")

    # LVM accepts alphanumerics and "+_.-" but not a leading hyphen
    if not re.match(r'^[a-zA-Z0-9+_.][a-zA-Z0-9+_.-]*$', name):
        raise ValueError(
            "Name must not start with a hyphen and may contain only alphanumeric, '+', '_', '.', or '-'"
        )

    if name in (".", ".."):
        raise ValueError(f"Name cannot be '{name}'")


def validate_size(size: str) -> str:
    """
    Validate an LVM size token (e.g. "100G", "+500M", "1.5T").

    Args:
        size: Size token

    Returns:
        The size token without a leading "+"

    Raises:
        ValueError: If size is invalid
    """
    if not size or not _SIZE_RE.match(size):
        raise ValueError(f"Invalid size '{size}' (expected e.g. 100G, 500M, 1T)")
    return size.lstrip("+")


def validate_fs_type(fs_type: str) -> str:
    """
    Validate a filesystem type.

    Returns:
        The normalized (lowercase) filesystem type

    Raises:
        ValueError: If the type is not supported
    """
    normalized = fs_type.strip().lower()
    if normalized not in SUPPORTED_FS_TYPES:
        raise ValueError(f"Unsupported filesystem type '{fs_type}' (choose {' or '.join(SUPPORTED_FS_TYPES)})")
    return normalized


def validate_mount_point(path: str) -> str:
    """
    Validate a mount point path.

    Returns:
        The path without trailing slashes

    Raises:
        ValueError: If the path is not absolute, contains whitespace or is the root
    """
    if not path:
        raise ValueError("Mount point cannot be empty")
    if not path.startswith("/"):
        raise ValueError(f"Mount point must be an absolute path: {path}")
    if re.search(r"\s", path):
        raise ValueError(f"Mount point must not contain whitespace: {path}")
    normalized = path.rstrip("/")
    if not normalized:
        raise ValueError("Mount point cannot be /")
    return normalized
