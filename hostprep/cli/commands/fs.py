"""
Filesystem manager commands.
"""

import typer

from hostprep.cli.lib.config import load_config
from hostprep.cli.lib.environment import check_tools, detect_os
from hostprep.cli.lib.errors import HostprepError
from hostprep.cli.lib.menu import run_menu
from hostprep.cli.lib.prompt import ConsolePrompter

app = typer.Typer(help="Interactive LVM and filesystem manager")


@app.command()
def menu():
    """
    Run the interactive LVM + filesystem manager.

    Creates and extends volume groups, creates logical volumes with XFS or
    ext4 filesystems, mounts them and records them in fstab. Run as root.
    """
    prompter = ConsolePrompter()
    try:
        cfg = load_config()

        typer.echo("==========================================================")
        typer.echo("Welcome to the intelligent file-system manager")
        typer.echo("==========================================================")

        os_info = detect_os()
        check_tools(prompter, cfg.required_tools, os_info.package_manager)
        code = run_menu(prompter, cfg)

    except HostprepError as e:
        typer.echo(f"ERROR: {e}. Exiting...", err=True)
        raise typer.Exit(1)

    raise typer.Exit(code)
