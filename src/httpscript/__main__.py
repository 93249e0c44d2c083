"""Entry point for running httpscript from the command line."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from httpscript import __version__
from httpscript.config import from_dict, read_raw, validate_config
from httpscript.errors import HTTPScriptError, show_validation_warnings
from httpscript.instruction import Instruction
from httpscript.server import ScriptedServer

console = Console()


def setup_logging(level: str) -> None:
    """Route library logging through rich.

    Args:
        level: Logging level name, e.g. "INFO".
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def print_error(message: str, details: str = "") -> None:
    """Print a formatted error message.

    Args:
        message: Short error message.
        details: Additional error details.
    """
    console.print(Panel(
        f"[bold red]Error:[/bold red] {message}\n{details}",
        title="❌ httpscript Error",
        border_style="red"
    ))


def print_success(message: str) -> None:
    """Print a formatted success message."""
    console.print(f"[bold green]✓[/bold green] {message}")


def script_table(instructions: tuple[Instruction, ...], title: str) -> Table:
    """Render a script as a table.

    Args:
        instructions: The script.
        title: Table title.

    Returns:
        A rich Table with one row per instruction.
    """
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Status", style="cyan")
    table.add_column("Header delay", justify="right")
    table.add_column("Body delay", justify="right")
    table.add_column("Service time", justify="right")
    table.add_column("Body", style="green")
    table.add_column("Headers", style="white")

    for i, inst in enumerate(instructions):
        table.add_row(
            str(i),
            str(inst.status_code),
            f"{inst.header_delay:.3f}s",
            f"{inst.body_delay:.3f}s",
            f"{inst.body_service_time:.3f}s",
            "none" if inst.body is None else f"{len(inst.body)} bytes",
            ", ".join(f"{name}: {'; '.join(values)}" for name, values in inst.headers.items()),
        )
    return table


def load_script(path: str) -> tuple[tuple[Instruction, ...], list[str]]:
    """Read a script file, returning its instructions and any warnings.

    Args:
        path: Path to a .json, .yaml or .yml script.

    Returns:
        The instructions and the validation issues.
    """
    raw = read_raw(path)
    return from_dict(raw), validate_config(raw)


def _load_or_report(path: str) -> tuple[tuple[Instruction, ...], list[str]] | None:
    try:
        return load_script(path)
    except FileNotFoundError as e:
        print_error(str(e), "Please check that the file path is correct.")
    except ImportError as e:
        print_error(str(e))
    except HTTPScriptError as e:
        e.show()
    return None


def run_validate(path: str) -> int:
    """Validate a script file.

    Returns:
        Exit code (0 when the script has no issues, 1 otherwise).
    """
    loaded = _load_or_report(path)
    if loaded is None:
        return 1
    instructions, issues = loaded

    console.print(script_table(instructions, title=path))
    if issues:
        show_validation_warnings(issues)
        return 1
    print_success(f"{len(instructions)} instruction(s) OK")
    return 0


def run_serve(path: str, host: str, port: int) -> int:
    """Serve a script file until interrupted.

    Returns:
        Exit code.
    """
    loaded = _load_or_report(path)
    if loaded is None:
        return 1
    instructions, issues = loaded

    show_validation_warnings(issues)
    server = ScriptedServer(instructions, host=host, port=port)
    try:
        server.bind()
    except OSError as e:
        print_error(f"Could not listen on {host}:{port}: {e}")
        return 1
    print_success(f"Serving {len(instructions)} instruction(s) on {server.url}")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        console.print(
            f"\n[yellow]⚠ Stopped after {server.handler.served} request(s)[/yellow]"
        )
        return 130
    return 0


def show_version() -> None:
    """Display version information."""
    console.print(Panel(
        f"[bold]httpscript[/bold] version [cyan]{__version__}[/cyan]\n"
        "Scripted HTTP responder for testing HTTP clients",
        title="📜 httpscript",
        border_style="cyan"
    ))


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        prog="httpscript",
        description="Serve a scripted sequence of HTTP responses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  httpscript serve script.yaml              # Serve on a random port
  httpscript serve script.json -p 8080      # Serve on port 8080
  httpscript validate script.yaml           # Check a script file
        """
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve a script file",
        description="Answer HTTP requests with the instructions in a JSON or YAML script.",
    )
    serve_parser.add_argument("script", metavar="FILE", help="Path to the script file")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument(
        "-p", "--port", type=int, default=0, help="Port to listen on (0 for random port)"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate a script file")
    validate_parser.add_argument("script", metavar="FILE", help="Path to the script file")

    subparsers.add_parser("version", help="Show version information")

    parsed = parser.parse_args(args)
    setup_logging(parsed.log_level)

    if parsed.command == "serve":
        return run_serve(parsed.script, parsed.host, parsed.port)
    elif parsed.command == "validate":
        return run_validate(parsed.script)
    elif parsed.command == "version":
        show_version()
        return 0
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
