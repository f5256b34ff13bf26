"""Structured events for run logging and progress tracking."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any


logger = logging.getLogger(__name__)


@dataclass
class RunEvent:
    """A structured event emitted while a benchmark command runs."""

    name: str
    uri: str
    index: int
    total: int
    status: str  # running | done | failed
    mode: str = "plain"
    message: str = ""
    outcome: dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = time.time()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


class ProgressEmitter:
    """Dispatch RunEvent instances."""

    def emit(self, event: RunEvent) -> None:
        raise NotImplementedError

    def close(self) -> None:  # pragma: no cover - interface hook
        """Optional shutdown hook for emitters."""
        return


class LogEmitter(ProgressEmitter):
    """Forward events to the harness logger."""

    def emit(self, event: RunEvent) -> None:
        level = logging.ERROR if event.status == "failed" else logging.INFO
        logger.log(
            level,
            "[%s/%s] %s %s %s",
            event.index,
            event.total,
            event.name,
            event.status,
            event.message,
        )


class StdoutEmitter(ProgressEmitter):
    """Emit machine-readable progress markers to stdout."""

    def emit(self, event: RunEvent) -> None:
        print(f"EH_EVENT {event.to_json()}", flush=True)
