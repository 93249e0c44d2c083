"""Error types with helpful suggestions.

This module provides the exception hierarchy for httpscript along with
rich-rendered display helpers used by the command line.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class HTTPScriptError(Exception):
    """Base exception with helpful suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def show(self) -> None:
        """Display the error with suggestion."""
        text = Text()
        text.append("✗ ", style="bold red")
        text.append(self.message, style="red")

        if self.suggestion:
            text.append("\n\n💡 ", style="bold yellow")
            text.append(self.suggestion, style="yellow")

        console.print(Panel(text, border_style="red", title="Error"))


class FlushNotSupportedError(HTTPScriptError):
    """The response sink cannot flush partial output.

    Paced body streaming depends on pushing every byte to the transport as
    soon as it is written, so a sink without flush is a fixture bug.
    """

    def __init__(self, sink: object) -> None:
        super().__init__(
            f"httpscript: {type(sink).__name__} is not a Flusher",
            suggestion="Wrap the response in a sink that implements httpscript.Flusher.",
        )
        self.sink = sink


class ScriptConfigError(HTTPScriptError):
    """Malformed script data."""

    pass


def show_validation_warnings(issues: list[str]) -> None:
    """Display validation warnings.

    Args:
        issues: List of validation issues
    """
    if not issues:
        return

    text = Text()
    text.append("⚠ Script Warnings:\n\n", style="bold yellow")

    for issue in issues:
        text.append(f"  • {issue}\n", style="yellow")

    console.print(Panel(text, border_style="yellow", title="Warning"))
