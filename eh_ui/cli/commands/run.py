from __future__ import annotations

from typing import List, Optional

import typer

from eh_common.errors import HarnessError
from eh_runner.api import BenchmarkCommand, ExecutionMode, HarnessConfig
from eh_ui.presenters.errors import render_error
from eh_ui.presenters.outcomes import build_outcome_table
from eh_ui.wiring import UIContext


def register_run_command(app: typer.Typer, ctx: UIContext) -> None:
    """Register the run command on the given Typer app."""

    @app.command(
        "run",
        context_settings={"ignore_unknown_options": True},
    )
    def run(
        command: List[str] = typer.Argument(
            ...,
            help="Benchmark command and its arguments; put them after `--`.",
        ),
        name: Optional[str] = typer.Option(
            None,
            "--name",
            "-n",
            help="Reportable benchmark name; defaults to the command line.",
        ),
        mode: Optional[ExecutionMode] = typer.Option(
            None,
            "--mode",
            "-m",
            case_sensitive=False,
            help="plain, or valgrind to inject the instrumentation with LD_PRELOAD. Defaults to EXEC_HARNESS_MODE.",
        ),
        summary: bool = typer.Option(
            False,
            "--summary",
            help="Print a table of executed benchmarks at the end.",
        ),
    ) -> None:
        """Run a benchmark command with instrumentation attached."""
        try:
            config = HarnessConfig.from_env(mode=mode)
            benchmark = BenchmarkCommand(name=name, command=command)
            outcomes = ctx.create_executor(config).run([benchmark], config.mode)
        except HarnessError as exc:
            render_error(ctx.console, exc)
            raise typer.Exit(1)

        if summary:
            ctx.console.print(build_outcome_table(outcomes))
