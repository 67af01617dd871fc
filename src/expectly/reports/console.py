"""Rich console reporter for expectation failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

if TYPE_CHECKING:
    from expectly.assertions.result import ExpectationFailure
    from expectly.context.context import TestContext


def render_failures(failures: list[ExpectationFailure]) -> str:
    """Plain-text block listing every failure, numbered."""
    lines = []
    for index, failure in enumerate(failures, start=1):
        lines.append(f"{index}) {failure.message}")
    return "\n".join(lines)


class ConsoleReporter:
    """Print a panel per failing test once it completes.

    With ``live=True`` each failure is also printed as soon as it is recorded.
    """

    def __init__(self, console: Console | None = None, live: bool = False) -> None:
        self.console = console or Console(stderr=True)
        self.live = live

    def on_failure(self, failure: ExpectationFailure) -> None:
        if not self.live:
            return
        self.console.print(Text(f"✗ {failure.test_name or ''} {failure.operation}", style="bold red"))

    def on_test_complete(self, ctx: TestContext) -> None:
        if not ctx.failures:
            return
        self.console.print(
            Panel(
                Text(render_failures(ctx.failures)),
                title=f"[bold red]{len(ctx.failures)} failed expectation(s)[/bold red]",
                subtitle=ctx.name or None,
                border_style="red",
            )
        )
