"""
Interactive menu of the filesystem manager.
"""

import logging
from typing import Callable, Dict, Tuple

import typer

from hostprep.cli.lib import workflow
from hostprep.cli.lib.config import HostprepConfig
from hostprep.cli.lib.errors import StepAborted
from hostprep.cli.lib.prompt import Prompter

LOG = logging.getLogger(__name__)

EXIT_CHOICE = "6"

MENU: Dict[str, Tuple[str, Callable[[Prompter, HostprepConfig], object]]] = {
    "1": ("Create New VG", workflow.create_volume_group),
    "2": ("Extend Existing VG", workflow.extend_volume_group),
    "3": ("Create LV(s) + FS + Mount", workflow.create_logical_volumes),
    "4": ("Extend Existing LV + Auto-Resize FS", workflow.extend_logical_volume),
    "5": ("Full Clean Setup (new VG + multiple LVs)", workflow.full_setup),
}


def print_menu() -> None:
    typer.echo("================ File-System Manager ================")
    for key, (title, _) in MENU.items():
        typer.echo(f"{key}) {title}")
    typer.echo(f"{EXIT_CHOICE}) Exit")


def run_menu(prompter: Prompter, cfg: HostprepConfig) -> int:
    """
    Show the menu and dispatch selections until the operator exits.

    StepAborted is reported and the menu is shown again; FatalError propagates.

    Returns:
        0 when the operator selects Exit
    """
    while True:
        print_menu()
        choice = prompter.ask(f"Select an option [1-{EXIT_CHOICE}]")

        if choice == EXIT_CHOICE:
            typer.echo("Goodbye!")
            return 0

        entry = MENU.get(choice)
        if entry is None:
            typer.echo("Invalid option. Try again.")
            continue

        title, step = entry
        LOG.debug("Menu selection %s: %s", choice, title)
        try:
            step(prompter, cfg)
        except StepAborted as e:
            typer.echo(str(e), err=True)
        typer.echo("")
