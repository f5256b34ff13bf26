"""Shared error taxonomy for exec-harness."""

from __future__ import annotations

from typing import Any, Mapping


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, list):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, tuple):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class HarnessError(Exception):
    """Base error type for typed failure handling."""

    outcome_kind: str = "error"

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class LocatorError(HarnessError):
    """The preload library cannot be provided on this host."""

    outcome_kind = "locator_failure"


class PreloadLibraryNotFound(LocatorError):
    """The preload library is missing from the expected location."""


class UnsupportedPlatform(LocatorError):
    """The host platform does not honor LD_PRELOAD."""


class IncompatibleTarget(HarnessError):
    """Static inspection predicts the target will ignore LD_PRELOAD."""

    outcome_kind = "incompatible_target"

    @property
    def reason(self) -> str:
        return str(self.context.get("reason", self))


class SpawnFailure(HarnessError):
    """The OS could not create the benchmark process."""

    outcome_kind = "spawn_failure"


class NonZeroExit(HarnessError):
    """The benchmark process ran and reported failure."""

    outcome_kind = "non_zero_exit"

    @property
    def returncode(self) -> int | None:
        return self.context.get("returncode")


class SubprocessDetected(HarnessError):
    """The benchmark process spawned children that escaped instrumentation."""

    outcome_kind = "subprocess_detected"

    @property
    def pids(self) -> list[int]:
        return list(self.context.get("pids", []))


class ProfileFolderError(HarnessError):
    """The profile folder exists but cannot be scanned."""

    outcome_kind = "profile_folder_error"


class InstrumentationError(HarnessError):
    """A call into the instrumentation capability failed."""

    outcome_kind = "instrumentation_failure"
