"""Benchmark command models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BenchmarkCommand(BaseModel):
    """A single benchmark to execute."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, description="Reportable name; derived from the argv when omitted")
    command: List[str] = Field(description="argv of the benchmark, executable first")

    @field_validator("command")
    @classmethod
    def _validate_command(cls, value: List[str]) -> List[str]:
        if not value or not value[0]:
            raise ValueError("BenchmarkCommand: 'command' must name an executable")
        return value

    @property
    def executable(self) -> str:
        return self.command[0]


class NameAndUri(BaseModel):
    """Reportable identifier derived from a BenchmarkCommand."""

    model_config = ConfigDict(frozen=True)

    name: str
    uri: str
