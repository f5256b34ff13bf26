"""Stable runner API surface."""

from eh_runner.engine.executor import BenchmarkExecutor, perform, perform_with_valgrind
from eh_runner.events import LogEmitter, ProgressEmitter, RunEvent, StdoutEmitter
from eh_runner.injection import (
    bail_if_command_spawned_subprocesses,
    check_ld_preload_compatible,
    get_preload_lib_path,
)
from eh_runner.instrument_hooks import InstrumentHooks, create_instrument_hooks
from eh_runner.models import (
    BenchmarkCommand,
    ExecutionMode,
    ExecutionOutcome,
    HarnessConfig,
    NameAndUri,
    OutcomeKind,
)
from eh_runner.uri import generate_name_and_uri

__all__ = [
    "BenchmarkCommand",
    "BenchmarkExecutor",
    "ExecutionMode",
    "ExecutionOutcome",
    "HarnessConfig",
    "InstrumentHooks",
    "LogEmitter",
    "NameAndUri",
    "OutcomeKind",
    "ProgressEmitter",
    "RunEvent",
    "StdoutEmitter",
    "bail_if_command_spawned_subprocesses",
    "check_ld_preload_compatible",
    "create_instrument_hooks",
    "generate_name_and_uri",
    "get_preload_lib_path",
    "perform",
    "perform_with_valgrind",
]
