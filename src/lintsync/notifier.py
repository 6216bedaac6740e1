# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""User notification surface."""

import logging
from typing import Protocol

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Define how user-visible messages are delivered."""

    def info(self, message: str) -> None:
        """Show an informational message."""

    def warning(self, message: str) -> None:
        """Show a warning message."""

    def error(self, message: str) -> None:
        """Show an error message."""


class LoggingNotifier:
    """Deliver notifications through the logging system only."""

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)


class ConsoleNotifier:
    """Deliver notifications to a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize notifier.

        Args:
            console: Target console; defaults to a stderr console.
        """
        self._console = console or Console(stderr=True)

    def info(self, message: str) -> None:
        self._console.print(f"[green]info[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[bold red]error[/bold red] {escape(message)}")
