"""
Checkmk agent plugin commands.
"""

from pathlib import Path
from typing import Optional

import typer

from hostprep.cli.lib.checkmk import deploy_plugins, run_plugin
from hostprep.cli.lib.config import load_config
from hostprep.cli.lib.errors import StepAborted

app = typer.Typer(help="Checkmk agent plugin commands")


@app.command()
def deploy(
    plugin_dir: Optional[Path] = typer.Option(None, "--plugin-dir", help="Agent plugin directory (default: from config)"),
    test: bool = typer.Option(True, "--test/--no-test", help="Run each plugin once after deployment"),
):
    """
    Deploy the login count and password expiry plugins.
    """
    try:
        cfg = load_config()
        plugin_dir = plugin_dir or cfg.plugin_dir

        typer.echo(f"Deploying Checkmk plugins to {plugin_dir}...")
        deployed = deploy_plugins(plugin_dir, cfg.passwd_warn_days, cfg.passwd_crit_days)
        typer.echo("Plugins deployed successfully!")

    except (ValueError, OSError) as e:
        typer.echo(f"Error deploying plugins: {e}", err=True)
        raise typer.Exit(1)

    if test:
        for path in deployed:
            typer.echo("-----------------------------------")
            typer.echo(f"Test {path.name}:")
            try:
                typer.echo(run_plugin(path))
            except StepAborted as e:
                typer.echo(f"Warning: {e}", err=True)
        typer.echo("-----------------------------------")

    typer.echo("Done. You can now run service discovery on the Checkmk Web UI.")
