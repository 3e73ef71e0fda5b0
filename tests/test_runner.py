"""Tests for CommandRunner."""

from __future__ import annotations

import errno
import logging
import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from binderbuild.build.runner import CommandRunner
from binderbuild.core.exceptions import CommandError


def test_dry_run_records_without_executing(tmp_path: Path) -> None:
    runner = CommandRunner(dry_run=True)
    with patch("binderbuild.build.runner.subprocess.run") as m:
        out = runner.run(["apt-get", "install", "-y", "git"])
    m.assert_not_called()
    assert out == ""
    runner.mkdir(tmp_path / "made")
    runner.write_text(tmp_path / "file.txt", "x")
    assert not (tmp_path / "made").exists()
    assert not (tmp_path / "file.txt").exists()
    assert runner.history[0] == "apt-get install -y git"
    assert runner.history[1].startswith("mkdir -p ")


def test_run_records_cwd(tmp_path: Path) -> None:
    runner = CommandRunner(dry_run=True)
    runner.run(["./postBuild"], cwd=tmp_path)
    assert runner.history == [f"(cd {tmp_path} && ./postBuild)"]


def test_run_quotes_arguments() -> None:
    runner = CommandRunner(dry_run=True)
    runner.run(["echo", "two words"])
    assert runner.history == ["echo 'two words'"]


def test_run_passes_env_and_returns_output(tmp_path: Path) -> None:
    runner = CommandRunner(env={"A": "1"}, timeout=5)
    completed = subprocess.CompletedProcess(args=["x"], returncode=0, stdout="done\n", stderr="")
    with patch("binderbuild.build.runner.subprocess.run", return_value=completed) as m:
        out = runner.run(["x", 1], cwd=tmp_path)
    assert out == "done"
    args, kwargs = m.call_args
    assert args[0] == ["x", "1"]
    assert kwargs["env"] == {"A": "1"}
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["timeout"] == 5


def test_run_nonzero_exit_raises() -> None:
    runner = CommandRunner()
    completed = subprocess.CompletedProcess(args=["x"], returncode=2, stdout="", stderr="E: Unable to locate package nope")
    with patch("binderbuild.build.runner.subprocess.run", return_value=completed):
        with pytest.raises(CommandError) as excinfo:
            runner.run(["apt-get", "install", "-y", "nope"])
    assert excinfo.value.returncode == 2
    assert "Unable to locate package" in excinfo.value.output
    assert "apt-get install -y nope" in str(excinfo.value)


def test_run_missing_executable_raises() -> None:
    runner = CommandRunner()
    with patch("binderbuild.build.runner.subprocess.run", side_effect=FileNotFoundError("mamba")):
        with pytest.raises(CommandError, match="executable not found"):
            runner.run(["mamba", "--version"])


def test_run_timeout_raises() -> None:
    runner = CommandRunner(timeout=1)
    with patch(
        "binderbuild.build.runner.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="sleep", timeout=1),
    ):
        with pytest.raises(CommandError) as excinfo:
            runner.run(["sleep", "10"])
    assert excinfo.value.returncode is None
    assert "timed out" in excinfo.value.output


def test_run_real_command(tmp_path: Path) -> None:
    runner = CommandRunner(env={"PATH": os.environ.get("PATH", ""), "GREETING": "hi"})
    out = runner.run(["sh", "-c", 'echo "$GREETING"'], cwd=tmp_path)
    assert out == "hi"


def test_copy_and_make_executable(tmp_path: Path) -> None:
    src = tmp_path / "start"
    src.write_text("#!/bin/sh\n")
    dest_dir = tmp_path / "srv"
    dest_dir.mkdir()
    runner = CommandRunner()
    runner.make_executable(src)
    runner.copy(src, dest_dir / "start")
    assert os.access(dest_dir / "start", os.X_OK)
    assert runner.history[0].startswith("chmod +x ")
    assert runner.history[1].startswith("cp ")


def test_remove_files_and_trees(tmp_path: Path) -> None:
    tree = tmp_path / "tree"
    (tree / "sub").mkdir(parents=True)
    (tree / "sub" / "f").write_text("x")
    single = tmp_path / "single"
    single.write_text("x")
    runner = CommandRunner()
    runner.remove([tree, single, tmp_path / "missing"])
    assert not tree.exists()
    assert not single.exists()
    assert runner.history[0].startswith("rm -rf ")


def test_remove_label_recorded_even_when_empty() -> None:
    runner = CommandRunner()
    runner.remove([], label="rm -rf /tmp/*")
    runner.remove([])
    assert runner.history == ["rm -rf /tmp/*"]


def test_run_falls_back_to_shell_for_script_without_shebang(tmp_path: Path) -> None:
    runner = CommandRunner()
    completed = subprocess.CompletedProcess(args=["x"], returncode=0, stdout="", stderr="")
    with patch(
        "binderbuild.build.runner.subprocess.run",
        side_effect=[OSError(errno.ENOEXEC, "Exec format error"), completed],
    ) as m:
        runner.run(["./postBuild"], cwd=tmp_path)
    assert m.call_args_list[1].args[0] == ["/bin/sh", "./postBuild"]
    assert runner.history == [f"(cd {tmp_path} && ./postBuild)"]


def test_run_other_os_error_raises_command_error() -> None:
    runner = CommandRunner()
    with patch(
        "binderbuild.build.runner.subprocess.run",
        side_effect=PermissionError(errno.EACCES, "Permission denied"),
    ):
        with pytest.raises(CommandError, match="Permission denied"):
            runner.run(["./start"])


def test_run_logs_output_at_info(caplog: pytest.LogCaptureFixture) -> None:
    runner = CommandRunner()
    completed = subprocess.CompletedProcess(args=["x"], returncode=0, stdout="Setting up git\n", stderr="")
    with caplog.at_level(logging.INFO, logger="binderbuild.build"):
        with patch("binderbuild.build.runner.subprocess.run", return_value=completed):
            runner.run(["apt-get", "install", "-y", "git"])
    assert any(r.levelno == logging.INFO and r.getMessage() == "Setting up git" for r in caplog.records)
