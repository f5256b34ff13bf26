"""Configuration helpers for eh_common."""

from .env import parse_bool_env, parse_path_env

__all__ = [
    "parse_bool_env",
    "parse_path_env",
]
