"""Locate the shared library injected into benchmark processes."""

from __future__ import annotations

import atexit
import contextlib
import logging
import os
import sys
from importlib import resources
from pathlib import Path
from typing import Mapping

from eh_common.errors import PreloadLibraryNotFound, UnsupportedPlatform
from eh_runner.constants import PRELOAD_LIB_ENV


logger = logging.getLogger(__name__)

PRELOAD_LIB_NAME = "libcodspeed_preload.so"

# Keeps resources extracted from zipped installs alive until the process exits
_RESOURCE_STACK = contextlib.ExitStack()
atexit.register(_RESOURCE_STACK.close)


def ensure_platform_supported(os_name: str | None = None, platform: str | None = None) -> None:
    """Raise UnsupportedPlatform unless the host dynamic loader honors LD_PRELOAD."""
    os_name = os_name or os.name
    platform = platform or sys.platform
    if os_name != "posix" or platform == "darwin":
        raise UnsupportedPlatform(
            "LD_PRELOAD injection is only supported on Unix-like platforms using ELF binaries",
            context={"os_name": os_name, "platform": platform},
        )


def _bundled_library() -> Path:
    resource = resources.files("eh_runner.injection").joinpath("lib").joinpath(PRELOAD_LIB_NAME)
    if not resource.is_file():
        raise PreloadLibraryNotFound(
            f"{PRELOAD_LIB_NAME} is not bundled with this installation",
            context={"resource": str(resource), "override_env": PRELOAD_LIB_ENV},
        )
    return _RESOURCE_STACK.enter_context(resources.as_file(resource))


def _check_readable(path: Path) -> Path:
    if not path.is_file():
        raise PreloadLibraryNotFound(
            f"Preload library not found at {path}",
            context={"path": path},
        )
    if not os.access(path, os.R_OK):
        raise PreloadLibraryNotFound(
            f"Preload library at {path} is not readable",
            context={"path": path},
        )
    return path.resolve()


def get_preload_lib_path(
    override: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the absolute path of the preload library.

    An explicit override wins, then ``EXEC_HARNESS_PRELOAD_LIB``, then the
    copy shipped as package data.
    """
    ensure_platform_supported()

    env = os.environ if environ is None else environ
    candidate = override or env.get(PRELOAD_LIB_ENV) or None
    if candidate:
        path = _check_readable(Path(candidate).expanduser())
        logger.debug("Using preload library override %s", path)
        return path

    path = _check_readable(_bundled_library())
    logger.debug("Using bundled preload library %s", path)
    return path
