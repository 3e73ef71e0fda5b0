"""Tests for build logging."""

from __future__ import annotations

from pathlib import Path

import pytest

from binderbuild.build.build_log import LOGGER_NAME, build_log_context, get_logger


def test_get_logger_returns_logger_with_correct_name() -> None:
    assert get_logger().name == LOGGER_NAME


def test_build_log_context_creates_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "build.log"
    with build_log_context(log_file, verbose=False) as log:
        log.info("Checking for 'apt.txt'...")
    content = log_file.read_text(encoding="utf-8")
    assert "Checking for 'apt.txt'..." in content
    assert "[INFO]" in content


def test_build_log_context_removes_handler_on_exit(tmp_path: Path) -> None:
    log_file = tmp_path / "build.log"
    with build_log_context(log_file) as log:
        log.info("inside context")
    get_logger().info("after context")
    content = log_file.read_text(encoding="utf-8")
    assert "inside context" in content
    assert "after context" not in content


def test_build_log_context_verbose_sets_debug_level(tmp_path: Path) -> None:
    log_file = tmp_path / "build.log"
    with build_log_context(log_file, verbose=True) as log:
        log.debug("command output")
    assert "command output" in log_file.read_text(encoding="utf-8")


def test_build_log_context_echo_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    with build_log_context(None, echo=True) as log:
        log.info("Using 'binder/' build context")
    assert "Using 'binder/' build context" in capsys.readouterr().err
