"""Instrumentation capability used around each benchmark.

The measurement library is an external collaborator. The executor only needs
the start/stop/record contract below; the default implementation tracks the
benchmark lifecycle and logs it.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from eh_common.errors import InstrumentationError


logger = logging.getLogger(__name__)


@runtime_checkable
class InstrumentHooks(Protocol):
    """Start/stop/record contract of the instrumentation capability."""

    def start_benchmark(self) -> None: ...

    def stop_benchmark(self) -> None: ...

    def set_executed_benchmark(self, uri: str) -> None: ...


class LoggingInstrumentHooks:
    """Default hooks: enforce the lifecycle and remember executed benchmarks."""

    def __init__(self, integration_name: str, integration_version: str) -> None:
        self.integration_name = integration_name
        self.integration_version = integration_version
        self.running = False
        self.executed: list[str] = []
        logger.debug("Instrumentation initialized for %s %s", integration_name, integration_version)

    def start_benchmark(self) -> None:
        if self.running:
            raise InstrumentationError("Benchmark already started")
        self.running = True
        logger.debug("Benchmark started")

    def stop_benchmark(self) -> None:
        if not self.running:
            raise InstrumentationError("Benchmark stopped without being started")
        self.running = False
        logger.debug("Benchmark stopped")

    def set_executed_benchmark(self, uri: str) -> None:
        if self.running:
            raise InstrumentationError(
                "Cannot record a benchmark while it is running",
                context={"uri": uri},
            )
        self.executed.append(uri)
        logger.info("Recorded executed benchmark %s", uri)


def create_instrument_hooks(integration_name: str, integration_version: str) -> InstrumentHooks:
    """Build the hooks instance shared by every command of one run."""
    return LoggingInstrumentHooks(integration_name, integration_version)
