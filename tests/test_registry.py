"""Tests for ComponentRegistry."""

from __future__ import annotations

import logging

import pytest

from binderbuild.bootstrap import register_bootstrap_steps
from binderbuild.core.exceptions import RegistryError
from binderbuild.core.registry import ComponentRegistry
from binderbuild.reporters import JsonReporter, register_builtin_reporters
from binderbuild.steps import AptStep, register_builtin_steps


def test_register_and_get_step() -> None:
    reg = ComponentRegistry()
    reg.register_step("apt", AptStep)
    step = reg.get_step("apt")
    assert isinstance(step, AptStep)
    assert reg.get_step("apt") is not step


def test_unknown_step_raises() -> None:
    with pytest.raises(RegistryError, match="Unknown build step"):
        ComponentRegistry().get_step("nope")


def test_unknown_reporter_raises() -> None:
    with pytest.raises(RegistryError, match="Unknown reporter"):
        ComponentRegistry().get_reporter("xml")


def test_overwrite_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    reg = ComponentRegistry()
    reg.register_step("apt", AptStep)
    with caplog.at_level(logging.WARNING):
        reg.register_step("apt", AptStep)
    assert "Overwriting step registration" in caplog.text


def test_builtin_registrations() -> None:
    reg = ComponentRegistry()
    register_builtin_steps(reg)
    register_bootstrap_steps(reg)
    register_builtin_reporters(reg)
    avail = reg.list_available()
    assert avail["steps"] == [
        "context",
        "apt",
        "jupyter_config",
        "conda_env",
        "pip",
        "post_build",
        "start",
        "user",
        "conda_profile",
        "base_apt",
        "conda_install",
    ]
    assert avail["reporters"] == ["json"]
    assert isinstance(reg.get_reporter("json"), JsonReporter)
