#!/usr/bin/env python3
"""
Main CLI entry point using Typer.
"""

import logging
import sys

import typer

from hostprep.cli.commands import bootstrap, checkmk, fs
from hostprep.cli.lib.config import load_config

app = typer.Typer(
    name="hostprep",
    help="Linux host preparation tools",
    add_completion=False,
)

# Add command groups
app.add_typer(fs.app, name="fs", help="Interactive LVM and filesystem manager")
app.add_typer(bootstrap.app, name="bootstrap", help="Automation account bootstrap commands")
app.add_typer(checkmk.app, name="checkmk", help="Checkmk agent plugin commands")


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log external commands (DEBUG level)"),
):
    """Configure logging for all commands."""
    cfg = load_config()
    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main() -> int:
    """Main entry point."""
    try:
        app()
        return 0
    except KeyboardInterrupt:
        typer.echo("\nOperation cancelled by user", err=True)
        return 130
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
