"""
Command-line interface for exec-harness.

Runs benchmark commands with instrumentation attached, and exposes the
LD_PRELOAD injection checks individually.
"""

from __future__ import annotations

import typer

from eh_common.api import configure_logging
from eh_ui.cli.commands.inspect import register_inspect_commands
from eh_ui.cli.commands.run import register_run_command
from eh_ui.wiring import UIContext

ctx_store = UIContext()

app = typer.Typer(help="Run benchmark commands with performance instrumentation attached.", no_args_is_help=True)


@app.callback()
def entry(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable verbose debug logging.",
    ),
    events: bool = typer.Option(
        False,
        "--events",
        help="Print machine-readable EH_EVENT lines to stdout.",
    ),
) -> None:
    """Global options shared by every command."""
    configure_logging(debug=debug, force=True)
    ctx_store.events = events


register_run_command(app, ctx_store)
register_inspect_commands(app, ctx_store)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
