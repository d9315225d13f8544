"""Operator-facing outcome messages."""

from __future__ import annotations

from typing import Protocol

import structlog
from rich.console import Console
from rich.markup import escape


class Reporter(Protocol):
    def info(self, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class ConsoleReporter:
    """Prints outcomes on a stderr console and records each one as a ``report`` event."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)
        self._logger = structlog.get_logger("kubepick.report")

    def info(self, message: str) -> None:
        self._logger.info("report", report_level="info", text=message)
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def success(self, message: str) -> None:
        self._logger.info("report", report_level="success", text=message)
        self.console.print(f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        self._logger.error("report", report_level="error", text=message)
        self.console.print(f"[red]Error: {escape(message)}[/red]")
