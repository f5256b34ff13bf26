"""Benchmark execution engine."""

from eh_runner.engine.executor import BenchmarkExecutor, perform, perform_with_valgrind

__all__ = ["BenchmarkExecutor", "perform", "perform_with_valgrind"]
