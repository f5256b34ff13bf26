"""Presenter for execution outcomes."""

from __future__ import annotations

from typing import Iterable

from rich.markup import escape
from rich.table import Table

from eh_runner.api import ExecutionOutcome


def build_outcome_table(outcomes: Iterable[ExecutionOutcome]) -> Table:
    """Transform execution outcomes into a rich Table."""
    table = Table(title="Executed benchmarks", show_header=True, header_style="bold magenta")
    table.add_column("Benchmark", style="cyan")
    table.add_column("URI")
    table.add_column("Status", justify="right")
    for outcome in outcomes:
        status = "[green]✓[/]" if outcome.ok else f"[red]{outcome.kind.value}[/]"
        table.add_row(escape(outcome.name), escape(outcome.uri), status)
    return table
