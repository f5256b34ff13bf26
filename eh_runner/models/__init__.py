"""Data models for the runner."""

from eh_runner.models.commands import BenchmarkCommand, NameAndUri
from eh_runner.models.config import ExecutionMode, HarnessConfig
from eh_runner.models.outcome import ExecutionOutcome, OutcomeKind

__all__ = [
    "BenchmarkCommand",
    "ExecutionMode",
    "ExecutionOutcome",
    "HarnessConfig",
    "NameAndUri",
    "OutcomeKind",
]
