"""Public API surface for eh_common."""

from eh_common.errors import HarnessError
from eh_common.logging import configure_logging

__all__ = ["configure_logging", "HarnessError"]
