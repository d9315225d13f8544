"""Interactive single-choice picker and free-text prompt."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import click
from rich.console import Console

CANCEL_TOKENS: frozenset[str] = frozenset({"q", "quit", "exit"})


class Picker(Protocol):
    def select_one(self, prompt: str, candidates: Sequence[str]) -> str | None:
        ...

    def input_text(self, prompt: str) -> str | None:
        ...


class ConsolePicker:
    """Numbered list picker on the terminal.

    Returns ``None`` when the operator cancels: blank input, ``q``, EOF or Ctrl-C.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def select_one(self, prompt: str, candidates: Sequence[str]) -> str | None:
        if not candidates:
            return None

        self.console.print(f"\n[bold]{prompt}[/bold]")
        for index, candidate in enumerate(candidates, 1):
            self.console.print(f"  {index}. {candidate}", markup=False, highlight=False)

        while True:
            raw = self._read("Enter number (blank to cancel)")
            if raw is None:
                return None
            choice = raw.strip()
            if not choice or choice.lower() in CANCEL_TOKENS:
                return None
            if choice.isdigit():
                position = int(choice)
                if 1 <= position <= len(candidates):
                    return candidates[position - 1]
            elif choice in candidates:
                return choice
            self.console.print(
                f"[red]Invalid choice[/red] enter a number between 1 and {len(candidates)}"
            )

    def input_text(self, prompt: str) -> str | None:
        return self._read(prompt)

    @staticmethod
    def _read(prompt: str) -> str | None:
        try:
            value = click.prompt(prompt, default="", show_default=False, err=True)
        except click.Abort:
            return None
        return str(value)
