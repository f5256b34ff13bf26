"""Detect benchmarks that spawned subprocesses under valgrind.

The instrumentation runtime writes one ``<pid>.out`` file per process it ran in
the profile folder. The LD_PRELOAD trick only injects the instrumentation into
the first process, so a child gets an almost empty file with a zero cost. A
``<pid>.out`` with a pid greater than the benchmark's own pid is taken as
evidence of such a child. Pid reuse and wrap-around make this a heuristic; the
window of one benchmark is short enough for it to be reliable in practice.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterator, Mapping

from eh_common.config.env import parse_path_env
from eh_common.errors import ProfileFolderError, SubprocessDetected
from eh_runner.constants import PROFILE_FOLDER_ENV


logger = logging.getLogger(__name__)

_PROFILE_ENTRY = re.compile(r"([0-9]+)\.out")


def resolve_profile_folder(environ: Mapping[str, str] | None = None) -> Path | None:
    env = os.environ if environ is None else environ
    return parse_path_env(env.get(PROFILE_FOLDER_ENV))


def iter_profile_pids(profile_folder: Path) -> Iterator[int]:
    """Yield the pid of every ``<pid>.out`` entry; only names are read."""
    try:
        names = os.listdir(profile_folder)
    except FileNotFoundError:
        logger.warning("Profile folder %s does not exist, assuming no profiles", profile_folder)
        return
    except OSError as exc:
        raise ProfileFolderError(
            f"Cannot read profile folder {profile_folder}: {exc}",
            context={"profile_folder": profile_folder},
            cause=exc,
        )

    for name in names:
        match = _PROFILE_ENTRY.fullmatch(name)
        if match:
            yield int(match.group(1))


def bail_if_command_spawned_subprocesses(
    pid: int,
    profile_folder: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Raise SubprocessDetected if the profile folder holds a newer process' profile.

    ``profile_folder`` defaults to ``CODSPEED_PROFILE_FOLDER``; the audit is
    skipped when neither is set.
    """
    folder = Path(profile_folder) if profile_folder else resolve_profile_folder(environ)
    if folder is None:
        logger.debug("%s is not set, skipping subprocess detection", PROFILE_FOLDER_ENV)
        return

    spawned = sorted(p for p in iter_profile_pids(folder) if p > pid)
    if spawned:
        raise SubprocessDetected(
            f"Benchmark process {pid} spawned subprocesses under valgrind",
            context={"pid": pid, "pids": spawned, "profile_folder": folder},
        )
    logger.debug("No subprocess profiles newer than pid %s in %s", pid, folder)
