"""Tests for detecting subprocesses spawned under valgrind."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from eh_common.errors import ProfileFolderError, SubprocessDetected
from eh_runner.injection.subprocess_check import (
    bail_if_command_spawned_subprocesses,
    iter_profile_pids,
)


pytestmark = pytest.mark.unit_runner


def _profiles(folder: Path, *names: str) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    for name in names:
        (folder / name).write_text("")
    return folder


def _env(folder: Path) -> dict[str, str]:
    return {"CODSPEED_PROFILE_FOLDER": str(folder)}


def test_own_profile_passes(tmp_path: Path) -> None:
    folder = _profiles(tmp_path / "profiles", "100.out")
    bail_if_command_spawned_subprocesses(100, environ=_env(folder))


def test_newer_pid_fails(tmp_path: Path) -> None:
    folder = _profiles(tmp_path / "profiles", "100.out", "150.out")
    with pytest.raises(SubprocessDetected) as excinfo:
        bail_if_command_spawned_subprocesses(100, environ=_env(folder))
    assert excinfo.value.pids == [150]
    assert excinfo.value.context["pid"] == 100


def test_unset_variable_skips_audit(tmp_path: Path) -> None:
    _profiles(tmp_path / "profiles", "999.out")
    bail_if_command_spawned_subprocesses(100, environ={})


def test_blank_variable_skips_audit(tmp_path: Path) -> None:
    _profiles(tmp_path / "profiles", "999.out")
    bail_if_command_spawned_subprocesses(100, environ={"CODSPEED_PROFILE_FOLDER": ""})


@pytest.mark.parametrize("other_pid", [1, 42, 99, 100])
def test_older_or_equal_pids_pass(tmp_path: Path, other_pid: int) -> None:
    folder = _profiles(tmp_path / "profiles", "100.out", f"{other_pid}.out")
    bail_if_command_spawned_subprocesses(100, environ=_env(folder))


@pytest.mark.parametrize("other_pid", [101, 1000, 4194304])
def test_any_newer_pid_fails(tmp_path: Path, other_pid: int) -> None:
    folder = _profiles(tmp_path / "profiles", f"{other_pid}.out")
    with pytest.raises(SubprocessDetected):
        bail_if_command_spawned_subprocesses(100, environ=_env(folder))


def test_only_pid_out_names_count(tmp_path: Path) -> None:
    folder = _profiles(
        tmp_path / "profiles",
        "100.out",
        "200.log",
        "300.out.tmp",
        "callgrind.400.out",
        "x500.out",
        ".out",
    )
    bail_if_command_spawned_subprocesses(100, environ=_env(folder))


def test_non_ascii_digit_names_are_ignored(tmp_path: Path) -> None:
    folder = _profiles(tmp_path / "profiles", "100.out", "\u0661\u0665\u0660.out", "150.out\n")
    bail_if_command_spawned_subprocesses(100, profile_folder=folder)
    assert list(iter_profile_pids(folder)) == [100]


def test_explicit_folder_wins_over_env(tmp_path: Path) -> None:
    clean = _profiles(tmp_path / "clean", "100.out")
    dirty = _profiles(tmp_path / "dirty", "150.out")
    bail_if_command_spawned_subprocesses(100, profile_folder=clean, environ=_env(dirty))


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    folder = _profiles(tmp_path / "profiles", "150.out")
    monkeypatch.setenv("CODSPEED_PROFILE_FOLDER", str(folder))
    with pytest.raises(SubprocessDetected):
        bail_if_command_spawned_subprocesses(100)


def test_missing_folder_has_no_entries(tmp_path: Path) -> None:
    bail_if_command_spawned_subprocesses(100, environ=_env(tmp_path / "missing"))


def test_folder_that_is_a_file_is_an_error(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "profiles"
    not_a_dir.write_text("")
    with pytest.raises(ProfileFolderError):
        bail_if_command_spawned_subprocesses(100, environ=_env(not_a_dir))


def test_audit_leaves_entries_untouched(tmp_path: Path) -> None:
    folder = _profiles(tmp_path / "profiles", "100.out", "150.out")
    before = sorted(os.listdir(folder))
    with pytest.raises(SubprocessDetected):
        bail_if_command_spawned_subprocesses(100, environ=_env(folder))
    assert sorted(os.listdir(folder)) == before


def test_iter_profile_pids(tmp_path: Path) -> None:
    folder = _profiles(tmp_path / "profiles", "7.out", "12.out", "notes.txt")
    assert sorted(iter_profile_pids(folder)) == [7, 12]
