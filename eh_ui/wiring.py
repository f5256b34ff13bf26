from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from rich.console import Console

from eh_runner.api import (
    BenchmarkExecutor,
    HarnessConfig,
    LogEmitter,
    ProgressEmitter,
    StdoutEmitter,
)


def _default_executor_factory(
    config: HarnessConfig, emitter: ProgressEmitter, console: Console
) -> BenchmarkExecutor:
    return BenchmarkExecutor(config=config, emitter=emitter, console=console)


@dataclass
class UIContext:
    """Container for CLI collaborators, replaceable in tests."""

    events: bool = False
    executor_factory: Callable[[HarnessConfig, ProgressEmitter, Console], BenchmarkExecutor] = (
        _default_executor_factory
    )
    _console: Optional[Console] = field(default=None, repr=False)

    @property
    def console(self) -> Console:
        # Benchmarks own stdout; harness messages go to stderr
        if self._console is None:
            self._console = Console(stderr=True, highlight=False)
        return self._console

    @console.setter
    def console(self, value: Console) -> None:
        self._console = value

    def create_emitter(self) -> ProgressEmitter:
        return StdoutEmitter() if self.events else LogEmitter()

    def create_executor(self, config: HarnessConfig) -> BenchmarkExecutor:
        return self.executor_factory(config, self.create_emitter(), self.console)
