"""Pydantic models and data structures for the framework."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class StepResult(BaseModel):
    """Result produced by a build step."""

    step_name: str
    success: bool = True
    skipped: bool = False
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class BuildContext(BaseModel):
    """Mutable context passed between build steps."""

    model_config = {"arbitrary_types_allowed": True}

    repo_path: Path | None = None
    context_dir: Path | None = None
    dependency_file: Path | None = None
    entrypoint: Path | None = None
    step_results: list[StepResult] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)

    def update(self, result: StepResult) -> None:
        """Append a step result and merge its data into context."""
        self.step_results.append(result)
        if result.data:
            if "context_dir" in result.data:
                self.context_dir = result.data["context_dir"]
            if "dependency_file" in result.data:
                self.dependency_file = result.data["dependency_file"]
            if "entrypoint" in result.data:
                self.entrypoint = result.data["entrypoint"]

    def finalize(self) -> BuildResult:
        """Build final result from context."""
        runner = self.config.get("runner")
        return BuildResult(
            success=all(r.success for r in self.step_results),
            step_results=self.step_results,
            context_dir=self.context_dir,
            dependency_file=self.dependency_file,
            entrypoint=self.entrypoint,
            commands=list(runner.history) if runner is not None else [],
        )


class BuildResult(BaseModel):
    """Final result of a pipeline run."""

    success: bool = True
    step_results: list[StepResult] = Field(default_factory=list)
    context_dir: Path | None = None
    dependency_file: Path | None = None
    entrypoint: Path | None = None
    commands: list[str] = Field(default_factory=list)

    @property
    def executed_steps(self) -> list[str]:
        return [r.step_name for r in self.step_results if not r.skipped]
