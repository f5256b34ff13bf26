"""Shared helpers for exec-harness."""

from eh_common.api import HarnessError, configure_logging

__all__ = ["configure_logging", "HarnessError"]
