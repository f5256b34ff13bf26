"""Tests for benchmark name and URI generation."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from eh_runner.constants import MAX_NAME_LENGTH
from eh_runner.uri import generate_name_and_uri, print_executing


pytestmark = pytest.mark.unit_runner


def test_uri_is_deterministic() -> None:
    first = generate_name_and_uri("sort", ["./sort", "--size", "10"])
    second = generate_name_and_uri("sort", ["./sort", "--size", "10"])
    assert first == second
    assert first.name == "sort"
    assert first.uri.startswith("exec_harness::sort::")


def test_same_name_different_argv_gets_different_uri() -> None:
    small = generate_name_and_uri("sort", ["./sort", "10"])
    large = generate_name_and_uri("sort", ["./sort", "1000"])
    assert small.uri != large.uri


def test_argv_boundaries_are_part_of_the_uri() -> None:
    joined = generate_name_and_uri(None, ["echo", "a b"])
    split = generate_name_and_uri(None, ["echo", "a", "b"])
    assert joined.name == split.name
    assert joined.uri != split.uri


def test_name_derived_from_command_when_missing() -> None:
    result = generate_name_and_uri(None, ["python", "-c", "pass"])
    assert result.name == "python -c pass"


def test_long_derived_name_is_truncated() -> None:
    result = generate_name_and_uri(None, ["bench"] + ["x" * 50] * 5)
    assert len(result.name) == MAX_NAME_LENGTH
    assert result.name.endswith("...")


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        generate_name_and_uri("empty", [])


def test_print_executing_escapes_markup() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=200)
    print_executing(generate_name_and_uri("[bold]weird", ["true"]), console)
    assert "Executing [bold]weird" in buffer.getvalue()
