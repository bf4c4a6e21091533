"""
systemd unit management functions.
"""

from hostprep.cli.lib.command import OnError, run


def restart_unit(unit_name: str) -> None:
    """
    Restart a systemd unit.

    Args:
        unit_name: Unit name (e.g., "sshd")

    Raises:
        FatalError: If restarting the unit fails
    """
    run(["systemctl", "restart", unit_name], error=f"restart of {unit_name}")


def is_active(unit_name: str) -> bool:
    """
    Check if a systemd unit is active.

    Args:
        unit_name: Unit name

    Returns:
        True if unit is active, False otherwise
    """
    return run(["systemctl", "is-active", unit_name], on_error=OnError.IGNORE).returncode == 0
