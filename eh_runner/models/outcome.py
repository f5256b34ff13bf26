"""Per-command execution outcomes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from eh_common.errors import HarnessError


class OutcomeKind(str, Enum):
    """Tag of an ExecutionOutcome."""

    SUCCESS = "success"
    NON_ZERO_EXIT = "non_zero_exit"
    SPAWN_FAILURE = "spawn_failure"
    INCOMPATIBLE_TARGET = "incompatible_target"
    SUBPROCESS_DETECTED = "subprocess_detected"
    LOCATOR_FAILURE = "locator_failure"
    INSTRUMENTATION_FAILURE = "instrumentation_failure"
    PROFILE_FOLDER_ERROR = "profile_folder_error"
    ERROR = "error"


def _kind_of(error: HarnessError) -> OutcomeKind:
    try:
        return OutcomeKind(error.outcome_kind)
    except ValueError:
        return OutcomeKind.ERROR


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of executing one benchmark command."""

    name: str
    uri: str
    kind: OutcomeKind
    returncode: int | None = None
    detail: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def success(cls, name: str, uri: str, returncode: int = 0) -> "ExecutionOutcome":
        return cls(name=name, uri=uri, kind=OutcomeKind.SUCCESS, returncode=returncode)

    @classmethod
    def from_error(cls, name: str, uri: str, error: HarnessError) -> "ExecutionOutcome":
        return cls(
            name=name,
            uri=uri,
            kind=_kind_of(error),
            returncode=error.context.get("returncode"),
            detail=error.to_dict(),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data
