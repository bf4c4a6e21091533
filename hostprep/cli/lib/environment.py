"""
Environment probing: OS family detection and required tool checks.

Nothing here installs packages; missing tools are reported and the operator
decides whether to continue.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

import typer

from hostprep.cli.lib.errors import FatalError
from hostprep.cli.lib.prompt import Prompter

LOG = logging.getLogger(__name__)

RHEL = "RHEL"
DEBIAN = "DEBIAN"


@dataclass(frozen=True)
class OsInfo:
    family: str
    package_manager: str
    description: str


def detect_os(root: Union[str, Path] = "/") -> OsInfo:
    """
    Detect the OS family from release marker files.

    Args:
        root: Filesystem root holding `etc/` (default: "/")

    Returns:
        Detected OS family and package manager label

    Raises:
        FatalError: If the OS is neither RHEL- nor Debian-based
    """
    etc = Path(root) / "etc"

    if (etc / "redhat-release").exists():
        info = OsInfo(RHEL, "yum", "Red Hat-based system (RHEL/CentOS/Rocky/Alma)")
    elif (etc / "lsb-release").exists() or (etc / "debian_version").exists():
        info = OsInfo(DEBIAN, "apt-get", "Debian-based system (Ubuntu/Debian)")
    else:
        raise FatalError("Unsupported OS")

    LOG.debug("Detected OS family %s", info.family)
    typer.echo(f"Detected OS: {info.description}")
    typer.echo(f"Package manager set to: {info.package_manager} (no automatic installs will be performed)")
    return info


def find_missing_tools(tools: Iterable[str]) -> List[str]:
    """Return the tools that are not found in PATH, in the given order."""
    return [tool for tool in tools if shutil.which(tool) is None]


def check_tools(prompter: Prompter, tools: Iterable[str], package_manager: str) -> List[str]:
    """
    Warn about missing tools and ask the operator whether to proceed.

    Args:
        prompter: Operator input provider
        tools: Required command names
        package_manager: Package manager label used in the install hint

    Returns:
        Missing tools (empty if everything is present)

    Raises:
        FatalError: If tools are missing and the operator does not answer "yes"
    """
    missing = find_missing_tools(tools)
    if not missing:
        return missing

    for tool in missing:
        typer.echo(f"Warning: required command not found: {tool}", err=True)

    typer.echo("")
    typer.echo("NOTE: Some commands are missing. They will not be installed automatically.")
    typer.echo(f"If you need them please install using your package manager (sudo {package_manager} install <pkg>).")
    typer.echo("")

    if not prompter.confirm("Proceed anyway?", default=False, exact=True):
        raise FatalError("Required commands missing; install them and re-run")

    LOG.warning("Continuing without required commands: %s", ", ".join(missing))
    return missing
