"""Console output with an explicit verbosity level.

A ``Console`` is created by the CLI and handed to whatever needs to report
progress. Nothing in the engine writes to stdout on its own.
"""

from enum import Enum

import click

METHOD_COLORS = {
    "GET": "green",
    "POST": "blue",
    "PUT": "yellow",
    "PATCH": "yellow",
    "DELETE": "red",
}


class LogLevel(str, Enum):
    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class Console:
    """Level-aware wrapper around ``click.echo``."""

    def __init__(self, level: LogLevel = LogLevel.NORMAL, color: bool | None = None):
        self.level = level
        self.color = color

    def _echo(self, message: str, err: bool = False) -> None:
        click.echo(message, err=err, color=self.color)

    def info(self, message: str) -> None:
        if self.level != LogLevel.QUIET:
            self._echo(f"{click.style('i', fg='blue')} {message}")

    def success(self, message: str) -> None:
        if self.level != LogLevel.QUIET:
            self._echo(f"{click.style('✓', fg='green')} {message}")

    def warn(self, message: str) -> None:
        if self.level != LogLevel.QUIET:
            self._echo(f"{click.style('⚠', fg='yellow')} {message}")

    def error(self, message: str) -> None:
        """Errors are shown at every level, on stderr."""
        self._echo(f"{click.style('✗', fg='red')} {message}", err=True)

    def verbose(self, message: str) -> None:
        if self.level == LogLevel.VERBOSE:
            self._echo(f"{click.style('→', fg='bright_black')} {message}")

    def log(self, message: str) -> None:
        if self.level != LogLevel.QUIET:
            self._echo(message)

    def separator(self, char: str = "=", length: int = 80) -> None:
        if self.level != LogLevel.QUIET:
            self._echo(click.style(char * length, fg="bright_black"))

    def header(self, text: str) -> None:
        if self.level != LogLevel.QUIET:
            self.separator()
            self._echo(click.style(text, bold=True))
            self.separator()


def format_bytes(size: int) -> str:
    """Human-readable byte count: ``512 B``, ``1.5 KB``, ``2.00 MB``."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def format_operation(method: str, path: str, summary: str | None = None) -> str:
    """One table row: padded, colored method and path followed by the summary."""
    method = method.upper()
    color = METHOD_COLORS.get(method, "white")
    row = f"{click.style(method.ljust(7), fg=color)} {click.style(path.ljust(45), fg='cyan')}"
    if summary:
        row += f" {click.style(summary, fg='bright_black')}"
    return row
