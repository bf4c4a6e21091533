"""
Configuration loader for hostprep.

The configuration only locates system files (mount table, sshd config, plugin
directory) and tunes constants; provisioning decisions are always taken from
operator answers.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


DEFAULT_CONFIG_PATH = Path("/etc/hostprep/hostprep.conf")

DEFAULT_REQUIRED_TOOLS = (
    "pvcreate",
    "vgcreate",
    "lvcreate",
    "mkfs.xfs",
    "mkfs.ext4",
    "blkid",
    "lvs",
    "vgs",
    "lsblk",
    "fdisk",
    "partprobe",
)

DEFAULT_PUBLIC_KEY = (
    "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIBEuxy3oDAAUDqVY4pDOISchf5DDrU491kluibL64HqK awx-ansible"
)


@dataclass(frozen=True)
class HostprepConfig:
    log_level: str = "WARNING"
    # [filesystem]
    fstab_path: Path = Path("/etc/fstab")
    default_fs_type: str = "xfs"
    settle_seconds: float = 1.0
    lvm_partition_type: str = "8e"
    required_tools: Tuple[str, ...] = field(default=DEFAULT_REQUIRED_TOOLS)
    # [bootstrap]
    bootstrap_user: str = "ansible"
    public_key: str = DEFAULT_PUBLIC_KEY
    authorized_keys_file: str = ".ssh/authorized_keys"
    sshd_config: Path = Path("/etc/ssh/sshd_config")
    sshd_unit: str = "sshd"
    sudoers_dir: Path = Path("/etc/sudoers.d")
    # [checkmk]
    plugin_dir: Path = Path("/usr/lib/check_mk_agent/plugins")
    passwd_warn_days: int = 3
    passwd_crit_days: int = 1


def _config_path() -> Path:
    env = os.environ.get("HOSTPREP_CONFIG_PATH")
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _read_ini(path: Path) -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    if path.exists():
        parser.read(path, encoding="utf-8")
    return parser


def load_config() -> HostprepConfig:
    """
    Load config from `HOSTPREP_CONFIG_PATH` or `/etc/hostprep/hostprep.conf`.

    Missing files are not an error; defaults are returned.
    """
    parser = _read_ini(_config_path())
    defaults = HostprepConfig()

    def _get(section: str, key: str, default: str) -> str:
        if not parser.has_section(section):
            return default
        return parser.get(section, key, fallback=default).strip()

    def _get_int(section: str, key: str, default: int) -> int:
        raw = _get(section, key, str(default))
        try:
            return int(raw)
        except ValueError:
            return default

    def _get_float(section: str, key: str, default: float) -> float:
        raw = _get(section, key, str(default))
        try:
            return float(raw)
        except ValueError:
            return default

    tools_raw = _get("filesystem", "required_tools", "")
    required_tools = tuple(tools_raw.split()) if tools_raw else defaults.required_tools

    return HostprepConfig(
        log_level=_get("general", "log_level", defaults.log_level).upper(),
        fstab_path=Path(_get("filesystem", "fstab_path", str(defaults.fstab_path))),
        default_fs_type=_get("filesystem", "default_fs_type", defaults.default_fs_type).lower(),
        settle_seconds=_get_float("filesystem", "settle_seconds", defaults.settle_seconds),
        lvm_partition_type=_get("filesystem", "lvm_partition_type", defaults.lvm_partition_type),
        required_tools=required_tools,
        bootstrap_user=_get("bootstrap", "user", defaults.bootstrap_user),
        public_key=_get("bootstrap", "public_key", defaults.public_key),
        authorized_keys_file=_get("bootstrap", "authorized_keys_file", defaults.authorized_keys_file),
        sshd_config=Path(_get("bootstrap", "sshd_config", str(defaults.sshd_config))),
        sshd_unit=_get("bootstrap", "sshd_unit", defaults.sshd_unit),
        sudoers_dir=Path(_get("bootstrap", "sudoers_dir", str(defaults.sudoers_dir))),
        plugin_dir=Path(_get("checkmk", "plugin_dir", str(defaults.plugin_dir))),
        passwd_warn_days=_get_int("checkmk", "passwd_warn_days", defaults.passwd_warn_days),
        passwd_crit_days=_get_int("checkmk", "passwd_crit_days", defaults.passwd_crit_days),
    )
