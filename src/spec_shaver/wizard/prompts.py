"""Interactive prompts used by the selection wizard.

The wizard only talks to a ``Prompter``; ``ClickPrompter`` is the terminal
implementation, tests use scripted fakes.
"""

from typing import Protocol

import click

from spec_shaver.errors import WizardCancelled


class Prompter(Protocol):
    def select(self, message: str, options: list[tuple[str, str]], default: str | None = None) -> str:
        """Pick one option; returns its value."""
        ...

    def checkbox(self, message: str, labels: list[str], checked: list[bool]) -> list[int]:
        """Pick any number of labels; returns their indices in ascending order."""
        ...

    def confirm(self, message: str, default: bool = False) -> bool:
        ...


def parse_selection(text: str, count: int) -> list[int]:
    """Turn "1,3-4" / "all" / "none" into zero-based indices."""
    text = text.strip().lower()
    if text in ("", "none"):
        return []
    if text == "all":
        return list(range(count))

    indices: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        start, sep, end = part.partition("-")
        try:
            first = int(start)
            last = int(end) if sep else first
        except ValueError:
            raise click.BadParameter(f"'{part}' is not a number or range")
        if first < 1 or last > count or first > last:
            raise click.BadParameter(f"'{part}' is out of range 1-{count}")
        indices.update(range(first - 1, last))
    return sorted(indices)


def _format_selection(checked: list[bool]) -> str:
    if checked and all(checked):
        return "all"
    picked = [str(i + 1) for i, on in enumerate(checked) if on]
    return ",".join(picked) if picked else "none"


class ClickPrompter:
    """Terminal prompts built on ``click.prompt``. Ctrl+C cancels the wizard."""

    def select(self, message: str, options: list[tuple[str, str]], default: str | None = None) -> str:
        click.echo(message)
        for i, (_, label) in enumerate(options, start=1):
            click.echo(f"  {i}) {label}")
        values = [value for value, _ in options]
        default_index = values.index(default) + 1 if default in values else 1
        try:
            choice = click.prompt("Choice", type=click.IntRange(1, len(options)), default=default_index)
        except click.Abort:
            raise WizardCancelled("Cancelled.")
        return values[choice - 1]

    def checkbox(self, message: str, labels: list[str], checked: list[bool]) -> list[int]:
        click.echo(message)
        for i, (label, on) in enumerate(zip(labels, checked), start=1):
            mark = "x" if on else " "
            click.echo(f"  [{mark}] {i:>3}) {label}")
        try:
            return click.prompt(
                "Numbers (e.g. 1,3-5), 'all' or 'none'",
                default=_format_selection(checked),
                value_proc=lambda text: parse_selection(text, len(labels)),
            )
        except click.Abort:
            raise WizardCancelled("Cancelled.")

    def confirm(self, message: str, default: bool = False) -> bool:
        try:
            return click.confirm(message, default=default)
        except click.Abort:
            raise WizardCancelled("Cancelled.")
