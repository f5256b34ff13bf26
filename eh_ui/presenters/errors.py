"""Render harness errors for humans, with remediation guidance."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from eh_common.errors import (
    HarnessError,
    IncompatibleTarget,
    PreloadLibraryNotFound,
    ProfileFolderError,
    SubprocessDetected,
    UnsupportedPlatform,
)
from eh_runner.constants import PRELOAD_LIB_ENV, PROFILE_FOLDER_ENV


WALLTIME_HINT = "Use the walltime measurement mode (--mode plain)"

_REMEDIATION: dict[type[HarnessError], list[str]] = {
    SubprocessDetected: [
        WALLTIME_HINT,
        "Benchmark a process that does not create subprocesses",
    ],
    IncompatibleTarget: [
        WALLTIME_HINT,
        "Benchmark a dynamically linked executable",
    ],
    UnsupportedPlatform: [
        WALLTIME_HINT,
    ],
    PreloadLibraryNotFound: [
        f"Point {PRELOAD_LIB_ENV} at a built libcodspeed_preload.so",
        "Reinstall exec-harness from a release build",
    ],
    ProfileFolderError: [
        f"Check the permissions of the folder named by {PROFILE_FOLDER_ENV}",
    ],
}

_HEADLINES: dict[type[HarnessError], str] = {
    SubprocessDetected: (
        "exec-harness in CPU simulation mode does not support measuring processes "
        "that spawn other processes yet."
    ),
}


def remediation_for(error: HarnessError) -> list[str]:
    """Return the remediation steps for ``error``, most specific type first."""
    for error_type in type(error).__mro__:
        if error_type in _REMEDIATION:
            return list(_REMEDIATION[error_type])
    return []


def format_error(error: HarnessError) -> str:
    """Render ``error`` as plain text."""
    lines = [_HEADLINES.get(type(error), str(error))]
    if type(error) in _HEADLINES:
        lines.append(str(error))
    steps = remediation_for(error)
    if steps:
        lines.append("")
        lines.append("Please either:" if len(steps) > 1 else "Please:")
        lines.extend(f"- {step}" for step in steps)
    return "\n".join(lines)


def render_error(console: Console, error: HarnessError) -> None:
    console.print(f"[bold red]Error:[/] {escape(format_error(error))}")
