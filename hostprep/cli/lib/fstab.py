"""
Persistent mount table (/etc/fstab) management.

Entries are only ever appended; existing lines are never rewritten or removed.
"""

import logging
from pathlib import Path
from typing import Iterator, Union

LOG = logging.getLogger(__name__)

PathLike = Union[str, Path]


def build_entry(source: str, mount_point: str, fs_type: str) -> str:
    """
    Format a mount table line.

    Args:
        source: "UUID=<uuid>" or a device path
        mount_point: Mount point directory
        fs_type: Filesystem type

    Returns:
        The line without a trailing newline
    """
    return f"{source}  {mount_point}  {fs_type}  defaults  0 0"


def _sources(path: Path) -> Iterator[str]:
    if not path.exists():
        return
    with open(path, "r", encoding="utf-8") as file:
        for line in file:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            yield stripped.split()[0]


def has_entry(path: PathLike, source: str) -> bool:
    """Check whether an active line already mounts `source`."""
    return any(existing == source for existing in _sources(Path(path)))


def ensure_entry(path: PathLike, source: str, mount_point: str, fs_type: str) -> bool:
    """
    Append a mount table line unless one already exists for `source`.

    Returns:
        True if a line was appended
    """
    path = Path(path)
    if has_entry(path, source):
        LOG.debug("%s already has an entry for %s", path, source)
        return False

    prefix = ""
    if path.exists():
        content = path.read_text(encoding="utf-8")
        if content and not content.endswith("\n"):
            prefix = "\n"

    with open(path, "a", encoding="utf-8") as file:
        file.write(prefix + build_entry(source, mount_point, fs_type) + "\n")
    LOG.debug("Appended %s -> %s to %s", source, mount_point, path)
    return True
