"""
Sequential execution of benchmark commands, plain or under LD_PRELOAD injection.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from rich.console import Console

from eh_common.errors import (
    HarnessError,
    InstrumentationError,
    NonZeroExit,
    SpawnFailure,
)
from eh_runner.constants import LD_PRELOAD_ENV, PYTHON_PERF_SUPPORT_ENV, URI_ENV
from eh_runner.events import LogEmitter, ProgressEmitter, RunEvent
from eh_runner.injection.ld_preload_check import check_ld_preload_compatible
from eh_runner.injection.preload_lib import get_preload_lib_path
from eh_runner.injection.subprocess_check import bail_if_command_spawned_subprocesses
from eh_runner.instrument_hooks import InstrumentHooks, create_instrument_hooks
from eh_runner.models import (
    BenchmarkCommand,
    ExecutionMode,
    ExecutionOutcome,
    HarnessConfig,
    NameAndUri,
)
from eh_runner.uri import generate_name_and_uri, print_executing

logger = logging.getLogger(__name__)


def build_injected_env(
    base_env: Mapping[str, str], preload_lib: Path, uri: str
) -> dict[str, str]:
    """Return a copy of ``base_env`` carrying the injection variables."""
    env = dict(base_env)
    previous = env.get(LD_PRELOAD_ENV)
    if previous:
        logger.warning("Overriding inherited %s=%s for the benchmark", LD_PRELOAD_ENV, previous)
    env[LD_PRELOAD_ENV] = str(preload_lib)
    # Python only writes perf maps when asked to; pytest plugins usually do this
    env[PYTHON_PERF_SUPPORT_ENV] = "1"
    env[URI_ENV] = uri
    return env


def _describe_status(returncode: int) -> str:
    if returncode < 0:
        return f"terminated by signal {-returncode}"
    return f"exit status {returncode}"


class BenchmarkExecutor:
    """Runs benchmark commands one after the other and stops at the first failure."""

    def __init__(
        self,
        hooks: InstrumentHooks | None = None,
        config: HarnessConfig | None = None,
        *,
        emitter: ProgressEmitter | None = None,
        console: Console | None = None,
        environ: Mapping[str, str] | None = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ) -> None:
        self.config = config or HarnessConfig()
        self.hooks = hooks or create_instrument_hooks(
            self.config.integration_name, self.config.integration_version
        )
        self.emitter = emitter or LogEmitter()
        self.console = console
        self._environ = environ
        self._popen = popen

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def run(
        self,
        commands: Iterable[BenchmarkCommand],
        mode: ExecutionMode | str | None = None,
    ) -> list[ExecutionOutcome]:
        """Execute ``commands`` in order.

        Raises the HarnessError of the first failing command; the commands
        after it are never spawned. Returns one successful outcome per command
        otherwise.
        """
        commands = list(commands)
        resolved_mode = ExecutionMode(mode or self.config.mode)
        preload_lib: Optional[Path] = None
        if resolved_mode is ExecutionMode.VALGRIND:
            preload_lib = get_preload_lib_path(self.config.preload_lib, self.environ)
            logger.info("Injecting %s into benchmark processes", preload_lib)

        outcomes: list[ExecutionOutcome] = []
        total = len(commands)
        for index, command in enumerate(commands, start=1):
            outcomes.append(self._execute(command, index, total, resolved_mode, preload_lib))
        return outcomes

    def _execute(
        self,
        command: BenchmarkCommand,
        index: int,
        total: int,
        mode: ExecutionMode,
        preload_lib: Optional[Path],
    ) -> ExecutionOutcome:
        name_and_uri = generate_name_and_uri(command.name, command.command)
        event_args: dict[str, Any] = {
            "name": name_and_uri.name,
            "uri": name_and_uri.uri,
            "index": index,
            "total": total,
            "mode": mode.value,
        }
        self.emitter.emit(RunEvent(status="running", **event_args))
        try:
            if preload_lib is not None:
                returncode = self._run_injected(command, name_and_uri, preload_lib)
            else:
                returncode = self._run_plain(command, name_and_uri)
        except HarnessError as exc:
            outcome = ExecutionOutcome.from_error(name_and_uri.name, name_and_uri.uri, exc)
            self.emitter.emit(
                RunEvent(status="failed", message=str(exc), outcome=outcome.to_dict(), **event_args)
            )
            raise

        outcome = ExecutionOutcome.success(name_and_uri.name, name_and_uri.uri, returncode)
        self.emitter.emit(RunEvent(status="done", outcome=outcome.to_dict(), **event_args))
        return outcome

    def _announce(self, command: BenchmarkCommand, name_and_uri: NameAndUri) -> None:
        print_executing(name_and_uri, self.console)
        logger.debug("Spawning %s", command.command)

    def _call_hook(self, action: str, hook: Callable[..., None], *args: str) -> None:
        try:
            hook(*args)
        except HarnessError:
            raise
        except Exception as exc:
            raise InstrumentationError(
                f"Instrumentation failed to {action}: {exc}",
                context={"action": action},
                cause=exc,
            ) from exc

    def _spawn(self, command: BenchmarkCommand, env: Mapping[str, str] | None) -> subprocess.Popen:
        try:
            return self._popen(command.command, env=None if env is None else dict(env))
        except OSError as exc:
            raise SpawnFailure(
                f"Failed to execute command {command.executable}: {exc}",
                context={"command": command.command, "errno": exc.errno},
                cause=exc,
            ) from exc

    @staticmethod
    def _check_status(command: BenchmarkCommand, returncode: int) -> None:
        if returncode != 0:
            raise NonZeroExit(
                f"Command exited with non-zero status: {_describe_status(returncode)}",
                context={"command": command.command, "returncode": returncode},
            )

    def _run_plain(self, command: BenchmarkCommand, name_and_uri: NameAndUri) -> int:
        self._announce(command, name_and_uri)

        self._call_hook("start benchmark", self.hooks.start_benchmark)
        try:
            proc = self._spawn(command, self._environ)
            with proc:
                returncode = proc.wait()
        finally:
            self._call_hook("stop benchmark", self.hooks.stop_benchmark)

        self._check_status(command, returncode)
        self._call_hook("record benchmark", self.hooks.set_executed_benchmark, name_and_uri.uri)
        return returncode

    def _run_injected(
        self, command: BenchmarkCommand, name_and_uri: NameAndUri, preload_lib: Path
    ) -> int:
        check_ld_preload_compatible(command.executable, self.environ.get("PATH"))
        self._announce(command, name_and_uri)

        env = build_injected_env(self.environ, preload_lib, name_and_uri.uri)
        proc = self._spawn(command, env)
        with proc:
            returncode = proc.wait()

        bail_if_command_spawned_subprocesses(
            proc.pid, self.config.profile_folder, self.environ
        )
        self._check_status(command, returncode)
        return returncode


def perform(
    commands: Sequence[BenchmarkCommand],
    hooks: InstrumentHooks | None = None,
    config: HarnessConfig | None = None,
    **executor_kwargs: Any,
) -> list[ExecutionOutcome]:
    """Run ``commands`` without injection, reporting through ``hooks``."""
    executor = BenchmarkExecutor(hooks, config, **executor_kwargs)
    return executor.run(commands, ExecutionMode.PLAIN)


def perform_with_valgrind(
    commands: Sequence[BenchmarkCommand],
    config: HarnessConfig | None = None,
    **executor_kwargs: Any,
) -> list[ExecutionOutcome]:
    """Run ``commands`` with the instrumentation injected through LD_PRELOAD.

    Only supported on Unix-like platforms, for dynamically linked targets that
    do not spawn subprocesses.
    """
    executor = BenchmarkExecutor(None, config, **executor_kwargs)
    return executor.run(commands, ExecutionMode.VALGRIND)
