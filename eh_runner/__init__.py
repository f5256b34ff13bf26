"""Runner facade for exec-harness.

Re-exports the types needed to run benchmark commands, with or without the
LD_PRELOAD injected instrumentation.
"""

from eh_runner.api import (
    BenchmarkCommand,
    BenchmarkExecutor,
    ExecutionMode,
    HarnessConfig,
    perform,
    perform_with_valgrind,
)

__all__ = [
    "BenchmarkCommand",
    "BenchmarkExecutor",
    "ExecutionMode",
    "HarnessConfig",
    "perform",
    "perform_with_valgrind",
]
