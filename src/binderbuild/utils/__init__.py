"""Shared utilities for build steps."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from binderbuild.core.context import resolve_build_context
from binderbuild.core.schema import BuildContext, StepResult


def get_runner_and_settings(
    context: BuildContext,
    step_name: str,
) -> tuple[Any, Any, StepResult | None]:
    """Extract the command runner and AppConfig from the build context.

    Returns:
        (runner, settings, None) on success.
        (None, None, StepResult) on failure; the caller should return the StepResult.
    """
    runner = context.config.get("runner")
    settings = context.config.get("settings")
    if runner is None or settings is None:
        return None, None, StepResult(
            step_name=step_name,
            success=False,
            message="runner or settings not set in context.config",
        )
    return runner, settings, None


def context_dir_for(context: BuildContext) -> Path | None:
    """Return the resolved build context dir, resolving it from repo_path if needed."""
    if context.context_dir is not None:
        return Path(context.context_dir)
    if context.repo_path is None:
        return None
    return resolve_build_context(Path(context.repo_path))


def trigger_path(context: BuildContext, filename: str) -> Path | None:
    """Return the path of filename in the build context if it is a file, else None."""
    context_dir = context_dir_for(context)
    if context_dir is None:
        return None
    candidate = context_dir / filename
    return candidate if candidate.is_file() else None
