"""Names shared with the instrumentation runtime."""

INTEGRATION_NAME = "exec-harness"
INTEGRATION_VERSION = "0.3.0"

# Prefix of every benchmark URI produced by this harness
URI_PREFIX = "exec_harness"
MAX_NAME_LENGTH = 100

# Produced for the child process only
LD_PRELOAD_ENV = "LD_PRELOAD"
PYTHON_PERF_SUPPORT_ENV = "PYTHONPERFSUPPORT"
URI_ENV = "CODSPEED_BENCHMARK_URI"

# Consumed from the harness environment
PROFILE_FOLDER_ENV = "CODSPEED_PROFILE_FOLDER"
PRELOAD_LIB_ENV = "EXEC_HARNESS_PRELOAD_LIB"
MODE_ENV = "EXEC_HARNESS_MODE"
