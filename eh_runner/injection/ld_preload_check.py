"""Predict whether an executable honors LD_PRELOAD.

The dynamic loader named in the ELF ``PT_INTERP`` segment is what reads
``LD_PRELOAD``. Statically linked binaries have no such segment and silently
ignore the variable, which would yield an empty measurement. The check is a
static heuristic: binaries that dlopen or exec other programs can still escape
the injection at runtime.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from eh_common.errors import IncompatibleTarget


logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"
ELFCLASS32 = 1
ELFCLASS64 = 2
ELFDATA2LSB = 1
ELFDATA2MSB = 2

PT_DYNAMIC = 2
PT_INTERP = 3

MAX_SHEBANG_DEPTH = 4
SHEBANG_READ_SIZE = 256

# e_phoff, e_phentsize, e_phnum for each ELF class
_EHDR_FORMATS = {
    ELFCLASS32: ("HHIIIIIHHHHHH", 4, 8, 9),
    ELFCLASS64: ("HHIQQQIHHHHHH", 4, 8, 9),
}
# p_type, p_offset, p_filesz for each ELF class
_PHDR_FORMATS = {
    ELFCLASS32: ("IIIIIIII", 0, 1, 4),
    ELFCLASS64: ("IIQQQQQQ", 0, 2, 5),
}

_STANDARD_LOADER = re.compile(
    r"^(ld-linux[\w.-]*\.so[.\d]*"
    r"|ld64\.so[.\d]*"
    r"|ld\.so[.\d]*"
    r"|ld-elf\.so[.\d]*"
    r"|ld-musl-[\w.-]+\.so[.\d]*)$"
)


@dataclass(frozen=True)
class ElfInfo:
    """Facts about an ELF image relevant to LD_PRELOAD."""

    path: Path
    elf_class: int
    interpreter: Optional[str]
    dynamic: bool

    @property
    def statically_linked(self) -> bool:
        return self.interpreter is None


def _incompatible(executable: str | Path, reason: str) -> IncompatibleTarget:
    return IncompatibleTarget(
        f"{executable} will not honor LD_PRELOAD: {reason}",
        context={"executable": executable, "reason": reason},
    )


def resolve_executable(executable: str, path: str | None = None) -> Optional[Path]:
    """Resolve ``executable`` the way execvp would."""
    if os.sep in executable:
        candidate = Path(executable)
        return candidate if candidate.is_file() else None
    found = shutil.which(executable, path=path)
    return Path(found) if found else None


def _read_struct(stream: BinaryIO, fmt: str, offset: int) -> tuple:
    stream.seek(offset)
    size = struct.calcsize(fmt)
    data = stream.read(size)
    if len(data) != size:
        raise ValueError("truncated ELF file")
    return struct.unpack(fmt, data)


def inspect_elf(path: Path) -> Optional[ElfInfo]:
    """Return ELF facts for ``path``, or None if it is not an ELF image."""
    with open(path, "rb") as stream:
        ident = stream.read(16)
        if len(ident) < 16 or not ident.startswith(ELF_MAGIC):
            return None

        elf_class, data_encoding = ident[4], ident[5]
        if elf_class not in _EHDR_FORMATS or data_encoding not in (ELFDATA2LSB, ELFDATA2MSB):
            raise ValueError(f"unsupported ELF class/encoding {elf_class}/{data_encoding}")
        endian = "<" if data_encoding == ELFDATA2LSB else ">"

        ehdr_fmt, phoff_idx, phentsize_idx, phnum_idx = _EHDR_FORMATS[elf_class]
        ehdr = _read_struct(stream, endian + ehdr_fmt, 16)
        phoff, phentsize, phnum = ehdr[phoff_idx], ehdr[phentsize_idx], ehdr[phnum_idx]

        phdr_fmt, type_idx, offset_idx, filesz_idx = _PHDR_FORMATS[elf_class]
        interpreter = None
        dynamic = False
        for index in range(phnum):
            phdr = _read_struct(stream, endian + phdr_fmt, phoff + index * phentsize)
            p_type = phdr[type_idx]
            if p_type == PT_DYNAMIC:
                dynamic = True
            elif p_type == PT_INTERP:
                stream.seek(phdr[offset_idx])
                raw = stream.read(phdr[filesz_idx])
                interpreter = raw.split(b"\0", 1)[0].decode("utf-8", "replace")

    return ElfInfo(path=path, elf_class=elf_class, interpreter=interpreter, dynamic=dynamic)


def read_shebang(path: Path) -> Optional[list[str]]:
    """Return the interpreter argv of a ``#!`` script, or None."""
    with open(path, "rb") as stream:
        head = stream.read(SHEBANG_READ_SIZE)
    if not head.startswith(b"#!"):
        return None
    line = head[2:].split(b"\n", 1)[0].decode("utf-8", "replace").strip()
    return line.split() or None


def _shebang_target(argv: list[str]) -> Optional[str]:
    interpreter, args = argv[0], argv[1:]
    if os.path.basename(interpreter) != "env":
        return interpreter
    # /usr/bin/env [-S] [-i] [NAME=VALUE...] prog
    for arg in args:
        if arg.startswith("-") or "=" in arg:
            continue
        return arg
    return None


def is_standard_loader(interpreter: str) -> bool:
    return bool(_STANDARD_LOADER.match(os.path.basename(interpreter)))


def check_ld_preload_compatible(executable: str | Path, path: str | None = None) -> None:
    """Raise IncompatibleTarget if ``executable`` is predicted to ignore LD_PRELOAD.

    Never spawns a process. Scripts are followed to their interpreter.
    ``path`` overrides the PATH used to look up bare command names.
    """
    target = str(executable)
    for _ in range(MAX_SHEBANG_DEPTH + 1):
        resolved = resolve_executable(target, path)
        if resolved is None:
            raise _incompatible(executable, f"{target} not found")

        try:
            info = inspect_elf(resolved)
            shebang = None if info else read_shebang(resolved)
        except (OSError, ValueError) as exc:
            raise IncompatibleTarget(
                f"Cannot inspect {resolved}: {exc}",
                context={"executable": executable, "reason": str(exc)},
                cause=exc,
            )

        if info is not None:
            if info.statically_linked:
                raise _incompatible(executable, f"{resolved} is statically linked")
            if not is_standard_loader(info.interpreter):
                raise _incompatible(
                    executable, f"{resolved} uses non-standard loader {info.interpreter}"
                )
            logger.debug("%s is dynamically linked via %s", resolved, info.interpreter)
            return

        if shebang is None:
            raise _incompatible(executable, f"{resolved} is neither an ELF binary nor a script")
        next_target = _shebang_target(shebang)
        if next_target is None:
            raise _incompatible(executable, f"{resolved} has an unusable shebang")
        logger.debug("Following shebang of %s to %s", resolved, next_target)
        target = next_target

    raise _incompatible(executable, "too many nested script interpreters")
