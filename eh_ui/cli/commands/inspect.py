from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from eh_common.errors import HarnessError
from eh_runner.api import (
    HarnessConfig,
    bail_if_command_spawned_subprocesses,
    check_ld_preload_compatible,
    get_preload_lib_path,
)
from eh_ui.presenters.errors import render_error
from eh_ui.wiring import UIContext


def register_inspect_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Register the commands exposing the injection checks one by one."""

    @app.command("check")
    def check(
        executable: str = typer.Argument(..., help="Executable name or path to inspect."),
    ) -> None:
        """Predict whether EXECUTABLE honors LD_PRELOAD, without running it."""
        try:
            check_ld_preload_compatible(executable)
        except HarnessError as exc:
            render_error(ctx.console, exc)
            raise typer.Exit(1)
        ctx.console.print(f"[green]✓[/] {executable} is compatible with LD_PRELOAD injection")

    @app.command("locate")
    def locate() -> None:
        """Print the path of the preload library."""
        try:
            path = get_preload_lib_path(HarnessConfig.from_env().preload_lib)
        except HarnessError as exc:
            render_error(ctx.console, exc)
            raise typer.Exit(1)
        typer.echo(str(path))

    @app.command("audit")
    def audit(
        pid: int = typer.Argument(..., min=1, help="Pid of the benchmarked process."),
        profile_folder: Optional[Path] = typer.Option(
            None,
            "--profile-folder",
            help="Folder holding <pid>.out files; defaults to CODSPEED_PROFILE_FOLDER.",
        ),
    ) -> None:
        """Check a profile folder for processes spawned by PID."""
        try:
            bail_if_command_spawned_subprocesses(pid, profile_folder)
        except HarnessError as exc:
            render_error(ctx.console, exc)
            raise typer.Exit(1)
        ctx.console.print(f"[green]✓[/] no subprocess profiles newer than pid {pid}")
