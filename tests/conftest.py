"""Shared pytest fixtures for binderbuild tests.

Factory functions live in ``_helpers.py``; this module re-exports them as
pytest fixtures so tests can receive them via dependency injection.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from binderbuild.build.runner import CommandRunner
from binderbuild.core.config import AppConfig, ConfigManager

from _helpers import (  # noqa: F401
    make_build_context,
    make_config_manager,
    make_dry_runner,
    make_repo,
    make_settings,
)


@pytest.fixture()
def config_manager(tmp_path: Path) -> ConfigManager:
    """A real ConfigManager backed by default config (no YAML/env file)."""
    return make_config_manager(tmp_path)


@pytest.fixture()
def settings(tmp_path: Path) -> AppConfig:
    """AppConfig with every system path sandboxed under tmp_path."""
    return make_settings(tmp_path / "root")


@pytest.fixture()
def dry_runner() -> CommandRunner:
    """A CommandRunner that records actions without executing them."""
    return make_dry_runner()
