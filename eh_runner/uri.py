"""Reportable names and URIs for benchmark commands."""

from __future__ import annotations

import hashlib
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from eh_runner.constants import MAX_NAME_LENGTH, URI_PREFIX
from eh_runner.models.commands import NameAndUri


_console = Console(stderr=True, highlight=False)


def _command_digest(command: Sequence[str]) -> str:
    sha1 = hashlib.sha1()
    sha1.update("\0".join(command).encode("utf-8", "surrogateescape"))
    return sha1.hexdigest()[:12]


def _derive_name(command: Sequence[str]) -> str:
    joined = " ".join(command)
    if len(joined) <= MAX_NAME_LENGTH:
        return joined
    return joined[: MAX_NAME_LENGTH - 3] + "..."


def generate_name_and_uri(name: str | None, command: Sequence[str]) -> NameAndUri:
    """Build the reportable identifier of a command.

    The URI embeds a digest of the full argv so two commands sharing a display
    name (or a truncated one) never collide.
    """
    if not command:
        raise ValueError("command must contain at least the executable")
    display_name = name if name else _derive_name(command)
    uri = f"{URI_PREFIX}::{display_name}::{_command_digest(command)}"
    return NameAndUri(name=display_name, uri=uri)


def print_executing(name_and_uri: NameAndUri, console: Console | None = None) -> None:
    """Announce the benchmark about to run on stderr."""
    (console or _console).print(f"[bold green]Executing[/] {escape(name_and_uri.name)}")
