"""Harness configuration."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from eh_common.config.env import parse_path_env
from eh_runner.constants import (
    INTEGRATION_NAME,
    INTEGRATION_VERSION,
    MODE_ENV,
    PRELOAD_LIB_ENV,
    PROFILE_FOLDER_ENV,
)


class ExecutionMode(str, Enum):
    """How benchmark commands are instrumented."""

    PLAIN = "plain"
    VALGRIND = "valgrind"


class HarnessConfig(BaseModel):
    """Settings for one harness invocation."""

    mode: ExecutionMode = Field(default=ExecutionMode.PLAIN, description="Plain execution or LD_PRELOAD injection under valgrind")
    preload_lib: Optional[Path] = Field(default=None, description="Explicit path to the preload library")
    profile_folder: Optional[Path] = Field(default=None, description="Folder where the instrumentation runtime writes <pid>.out files")
    integration_name: str = Field(default=INTEGRATION_NAME, description="Name reported to the instrumentation runtime")
    integration_version: str = Field(default=INTEGRATION_VERSION, description="Version reported to the instrumentation runtime")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "HarnessConfig":
        """Build a config from environment variables; explicit overrides win."""
        env = os.environ if environ is None else environ
        data: dict = {
            "preload_lib": parse_path_env(env.get(PRELOAD_LIB_ENV)),
            "profile_folder": parse_path_env(env.get(PROFILE_FOLDER_ENV)),
        }
        mode = env.get(MODE_ENV)
        if mode and mode.strip():
            data["mode"] = mode.strip().lower()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(data)
