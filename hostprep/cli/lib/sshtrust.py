"""
SSH trust bootstrap for an automation account.

All functions are idempotent: re-running them leaves files unchanged once the
desired state is reached.
"""

from __future__ import annotations

import logging
import os
import pwd
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Union

from hostprep.cli.lib.command import OnError, run
from hostprep.cli.lib.errors import FatalError

LOG = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_user(user: str) -> bool:
    """
    Create a login account with a home directory if it does not exist.

    Returns:
        True if the account was created

    Raises:
        FatalError: If useradd fails
    """
    if run(["id", user], on_error=OnError.IGNORE).returncode == 0:
        return False
    run(["useradd", "-m", "-s", "/bin/bash", user], error=f"useradd {user}")
    return True


def lookup_account(user: str) -> pwd.struct_passwd:
    try:
        return pwd.getpwnam(user)
    except KeyError:
        raise FatalError(f"user {user} does not exist")


def ensure_ssh_dir(home: PathLike, uid: int, gid: int) -> Path:
    """
    Create `<home>/.ssh` with mode 0700 owned by the account.

    Returns:
        The SSH directory path
    """
    ssh_dir = Path(home) / ".ssh"
    ssh_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(ssh_dir, 0o700)
    os.chown(ssh_dir, uid, gid)
    return ssh_dir


def ensure_authorized_key(path: PathLike, public_key: str, uid: int, gid: int) -> bool:
    """
    Make sure an authorized_keys file (mode 0600) contains a key line exactly once.

    Returns:
        True if the key was appended
    """
    path = Path(path)
    path.touch(exist_ok=True)
    os.chmod(path, 0o600)
    os.chown(path, uid, gid)

    content = path.read_text(encoding="utf-8")
    if public_key in content.splitlines():
        return False

    with open(path, "a", encoding="utf-8") as file:
        if content and not content.endswith("\n"):
            file.write("\n")
        file.write(public_key + "\n")
    return True


def write_sudoers(sudoers_dir: PathLike, user: str) -> Path:
    """
    Grant passwordless sudo to an account through a sudoers.d drop-in.

    The file is validated with `visudo -cf` when visudo is available.

    Returns:
        The sudoers file path

    Raises:
        FatalError: If the written file does not validate
    """
    path = Path(sudoers_dir) / user
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{user} ALL=(ALL) NOPASSWD:ALL\n", encoding="utf-8")
    os.chmod(path, 0o440)

    if shutil.which("visudo"):
        result = run(["visudo", "-cf", str(path)], on_error=OnError.IGNORE)
        if result.returncode != 0:
            path.unlink()
            raise FatalError(f"sudoers validation of {path} failed: {(result.stderr or result.stdout).strip()}")
    return path


def restore_selinux_context(path: PathLike) -> bool:
    """
    Restore SELinux labels on a path when SELinux is not disabled.

    Returns:
        True if restorecon was run
    """
    if not shutil.which("getenforce"):
        return False
    mode = run(["getenforce"], on_error=OnError.IGNORE).stdout or ""
    if mode.strip() in ("", "Disabled"):
        return False
    run(["restorecon", "-Rv", str(path)], on_error=OnError.IGNORE)
    return True


def _directive_key(line: str) -> str:
    # sshd_config accepts "Keyword value" and "Keyword=value"
    keyword = re.split(r"[\s=]", line.strip(), maxsplit=1)[0]
    return keyword.lower() if not keyword.startswith("#") else ""


def set_directives(lines: List[str], directives: Dict[str, str]) -> List[str]:
    """
    Make each directive appear exactly once as an active line with its value.

    The first active occurrence is rewritten in place, later active
    duplicates are dropped, and missing directives are added before the first
    Match block (or at the end). Comments and Match blocks are left alone.
    """
    wanted = {key.lower(): f"{key} {value}" for key, value in directives.items()}
    seen = set()
    result = []
    tail: List[str] = []
    for index, line in enumerate(lines):
        key = _directive_key(line)
        if key == "match":
            tail = lines[index:]
            break
        if key in wanted:
            if key in seen:
                continue
            seen.add(key)
            result.append(wanted[key])
        else:
            result.append(line)

    missing = [line for key, line in wanted.items() if key not in seen]
    return result + missing + tail


def ensure_sshd_directives(path: PathLike, directives: Dict[str, str]) -> bool:
    """
    Apply directives to an sshd_config file.

    The file is replaced atomically and keeps its permissions.

    Returns:
        True if the file changed
    """
    path = Path(path)
    original = path.read_text(encoding="utf-8") if path.exists() else ""
    updated = "\n".join(set_directives(original.splitlines(), directives)) + "\n"
    if updated == original:
        return False

    tmp_fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as file:
            file.write(updated)
        if path.exists():
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    finally:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
    LOG.debug("Updated %s", path)
    return True
