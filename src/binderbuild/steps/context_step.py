"""Context step: pick the directory whose files drive the build."""

from __future__ import annotations

from pathlib import Path

from binderbuild.build.build_log import get_logger
from binderbuild.core.context import describe_build_context, resolve_build_context
from binderbuild.core.schema import BuildContext, StepResult


class ContextStep:
    """Resolve ``binder/``, ``.binder/`` or the repository root as build context."""

    name = "context"
    trigger: str | None = None

    def execute(self, context: BuildContext) -> StepResult:
        if context.repo_path is None:
            return StepResult(
                step_name=self.name,
                success=False,
                message="repo_path not set in context",
            )
        log = get_logger()
        log.info("Checking for 'binder' or '.binder' subfolder")
        repo_path = Path(context.repo_path)
        context_dir = resolve_build_context(repo_path)
        label = describe_build_context(repo_path, context_dir)
        log.info("Using '%s' build context", label)
        return StepResult(
            step_name=self.name,
            message=f"Using '{label}' build context",
            data={"context_dir": context_dir},
        )

    def can_skip(self, context: BuildContext) -> bool:
        return False
