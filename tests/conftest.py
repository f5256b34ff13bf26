import os
import struct
from collections import defaultdict
from pathlib import Path
from typing import Callable, Optional

import pytest
from rich.console import Console
from rich.table import Table


PT_LOAD = 1
PT_DYNAMIC = 2
PT_INTERP = 3


def _build_elf(
    interpreter: Optional[str],
    *,
    elf_class: int = 64,
    little_endian: bool = True,
    dynamic: bool = True,
) -> bytes:
    """Assemble a minimal ELF executable image with the requested program headers."""
    endian = "<" if little_endian else ">"
    is_64 = elf_class == 64
    ehsize, phentsize = (64, 56) if is_64 else (52, 32)

    segments: list[tuple[int, bytes]] = []
    if interpreter is not None:
        segments.append((PT_INTERP, interpreter.encode() + b"\0"))
    if dynamic:
        segments.append((PT_DYNAMIC, b"\0" * 16))
    segments.append((PT_LOAD, b""))

    phnum = len(segments)
    data_offset = ehsize + phnum * phentsize
    ident = b"\x7fELF" + bytes([2 if is_64 else 1, 1 if little_endian else 2, 1, 0]) + b"\0" * 8
    if is_64:
        header = struct.pack(endian + "HHIQQQIHHHHHH", 2, 62, 1, 0x401000, ehsize, 0, 0, ehsize, phentsize, phnum, 64, 0, 0)
    else:
        header = struct.pack(endian + "HHIIIIIHHHHHH", 2, 3, 1, 0x8048000, ehsize, 0, 0, ehsize, phentsize, phnum, 40, 0, 0)

    phdrs = b""
    payload = b""
    for p_type, data in segments:
        offset = data_offset + len(payload)
        if is_64:
            phdrs += struct.pack(endian + "IIQQQQQQ", p_type, 4, offset, 0, 0, len(data), len(data), 1)
        else:
            phdrs += struct.pack(endian + "IIIIIIII", p_type, offset, 0, 0, len(data), len(data), 4, 1)
        payload += data
    return ident + header + phdrs + payload


@pytest.fixture
def make_elf(tmp_path: Path) -> Callable[..., Path]:
    """Write a fake ELF executable into tmp_path and return its path."""

    def factory(name: str, interpreter: Optional[str] = "/lib64/ld-linux-x86-64.so.2", **kwargs) -> Path:
        path = tmp_path / name
        path.write_bytes(_build_elf(interpreter, **kwargs))
        os.chmod(path, 0o755)
        return path

    return factory


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable script with the given shebang line."""

    def factory(name: str, shebang: str) -> Path:
        path = tmp_path / name
        path.write_text(f"#!{shebang}\necho benchmark\n")
        os.chmod(path, 0o755)
        return path

    return factory


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """
    Custom hook to print statistics by marker at the end of the test session.
    """
    _ = (exitstatus, config)  # unused in our reporting helper

    # Defined markers in pyproject.toml
    known_markers = {"unit_common", "unit_runner", "unit_ui"}

    marker_stats = defaultdict(lambda: {"passed": 0, "failed": 0, "skipped": 0, "total": 0, "duration": 0.0})

    for outcome in ["passed", "failed", "skipped"]:
        reports = terminalreporter.stats.get(outcome, [])
        for report in reports:
            # Only count the actual test call, or setup skips
            if report.when == "call" or (report.when == "setup" and report.outcome == "skipped"):
                duration = getattr(report, "duration", 0.0)
                for marker in known_markers:
                    if marker in report.keywords:
                        stats = marker_stats[marker]
                        stats[outcome] += 1
                        stats["total"] += 1
                        stats["duration"] += duration

    if not marker_stats:
        return

    table = Table(title="Test Statistics by Marker", show_header=True, header_style="bold magenta")
    table.add_column("Marker", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Duration (s)", justify="right", style="blue")

    for marker in sorted(marker_stats):
        stats = marker_stats[marker]
        table.add_row(
            marker,
            str(stats["total"]),
            str(stats["passed"]),
            str(stats["failed"]),
            str(stats["skipped"]),
            f"{stats['duration']:.2f}",
        )

    console = Console()
    console.print("\n")
    console.print(table)
