"""
Operator input providers.

Workflows ask for input through a Prompter so that the console can be swapped
for a scripted answer source.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Tuple

import typer

from hostprep.cli.lib.errors import HostprepError


class Prompter(ABC):
    """Reads a labeled value, applying a default when the answer is empty."""

    @abstractmethod
    def read(self, label: str, default: str) -> str:
        """Return the raw answer to a prompt."""

    def ask(self, label: str, default: str = "") -> str:
        answer = self.read(label, default).strip()
        return answer if answer else default

    def confirm(self, label: str, default: bool = False, exact: bool = False) -> bool:
        """
        Ask a yes/no question.

        Args:
            label: Question text
            default: Answer used when the operator just presses Enter
            exact: Accept only a literal lowercase "yes" instead of any casing
        """
        answer = self.ask(f"{label} (yes/no)", "yes" if default else "no")
        return (answer if exact else answer.lower()) == "yes"


class ConsolePrompter(Prompter):
    """Prompter reading from standard input."""

    def read(self, label: str, default: str) -> str:
        return typer.prompt(label, default=default, show_default=bool(default))


class ScriptedPrompter(Prompter):
    """Prompter answering from a fixed list; an empty answer selects the default."""

    def __init__(self, answers: Iterable[str]):
        self._answers: List[str] = list(answers)
        self.asked: List[Tuple[str, str]] = []

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def read(self, label: str, default: str) -> str:
        if not self._answers:
            raise HostprepError(f"No scripted answer left for prompt: {label}")
        answer = self._answers.pop(0)
        self.asked.append((label, answer))
        return answer
