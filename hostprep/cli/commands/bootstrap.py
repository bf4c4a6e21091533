"""
Bootstrap commands for automation account access.
"""

from __future__ import annotations

from typing import Optional

import typer

from hostprep.cli.lib import sshtrust
from hostprep.cli.lib.config import load_config
from hostprep.cli.lib.errors import HostprepError
from hostprep.cli.lib.systemd import is_active, restart_unit
from hostprep.cli.lib.validators import validate_name

app = typer.Typer(help="Bootstrap automation account access")

STAGES = 6


def _stage(index: int, title: str) -> None:
    typer.echo(f"=== [{index}/{STAGES}] {title} ===")


@app.command()
def ssh(
    user: Optional[str] = typer.Option(None, "--user", help="Automation account (default: from config or ansible)"),
    public_key: Optional[str] = typer.Option(None, "--public-key", help="Public key line to authorize (default: from config)"),
    restart: bool = typer.Option(True, "--restart/--no-restart", help="Restart the SSH daemon afterwards"),
):
    """
    Bootstrap SSH key trust and passwordless sudo for an automation account.

    This command is designed to be idempotent.
    """
    try:
        cfg = load_config()
        user = user or cfg.bootstrap_user
        public_key = (public_key or cfg.public_key).strip()
        validate_name(user)
        if not public_key:
            raise ValueError("Public key cannot be empty")

        _stage(1, f"Creating {user} user if it does not exist")
        if sshtrust.ensure_user(user):
            typer.echo(f"  Created user: {user}")
        account = sshtrust.lookup_account(user)

        _stage(2, "Setting up SSH directory")
        ssh_dir = sshtrust.ensure_ssh_dir(account.pw_dir, account.pw_uid, account.pw_gid)

        _stage(3, "Installing public SSH key")
        if sshtrust.ensure_authorized_key(ssh_dir / "authorized_keys", public_key, account.pw_uid, account.pw_gid):
            typer.echo("  Key added to authorized_keys")
        else:
            typer.echo("  Key already present")

        _stage(4, "Configuring passwordless sudo")
        sudoers_path = sshtrust.write_sudoers(cfg.sudoers_dir, user)
        typer.echo(f"  Wrote {sudoers_path}")

        _stage(5, "Fixing SELinux context (if applicable)")
        if not sshtrust.restore_selinux_context(ssh_dir):
            typer.echo("  SELinux disabled or not present; skipped")

        _stage(6, "Ensuring SSH allows key authentication")
        changed = sshtrust.ensure_sshd_directives(
            cfg.sshd_config,
            {"PubkeyAuthentication": "yes", "AuthorizedKeysFile": cfg.authorized_keys_file},
        )
        typer.echo(f"  {cfg.sshd_config} {'updated' if changed else 'already configured'}")
        if restart:
            restart_unit(cfg.sshd_unit)
            if not is_active(cfg.sshd_unit):
                typer.echo(f"Warning: {cfg.sshd_unit} is not active after restart", err=True)

        typer.echo("=== Bootstrap completed successfully ===")

    except (HostprepError, ValueError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
