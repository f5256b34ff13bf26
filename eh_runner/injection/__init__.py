"""LD_PRELOAD based injection of the instrumentation into benchmark processes."""

from eh_runner.injection.ld_preload_check import check_ld_preload_compatible
from eh_runner.injection.preload_lib import get_preload_lib_path
from eh_runner.injection.subprocess_check import bail_if_command_spawned_subprocesses

__all__ = [
    "bail_if_command_spawned_subprocesses",
    "check_ld_preload_compatible",
    "get_preload_lib_path",
]
