"""Pipeline engine: run build steps in order, skipping absent triggers."""

from __future__ import annotations

from dataclasses import dataclass, field

from binderbuild.build.build_log import get_logger
from binderbuild.core.exceptions import PipelineError
from binderbuild.core.registry import ComponentRegistry
from binderbuild.core.schema import BuildContext, BuildResult, StepResult


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution."""

    steps: list[str]
    skip_steps: list[str] = field(default_factory=list)
    stop_on_failure: bool = True


class PipelineEngine:
    """Executes build steps sequentially; the first failure aborts the build."""

    def __init__(
        self,
        registry: ComponentRegistry,
        config: PipelineConfig,
    ) -> None:
        self._registry = registry
        self._config = config

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    def run(self, context: BuildContext) -> BuildResult:
        """Run all non-skipped steps and return the final result."""
        log = get_logger()
        for step_name in self._config.steps:
            if step_name in self._config.skip_steps:
                log.info("Step %s disabled by configuration", step_name)
                continue
            try:
                step = self._registry.get_step(step_name)
            except Exception as e:
                context.update(StepResult(step_name=step_name, success=False, message=str(e)))
                if self._config.stop_on_failure:
                    raise PipelineError(f"Failed to get step {step_name}: {e}") from e
                continue

            trigger = getattr(step, "trigger", None)
            if trigger:
                log.info("Checking for '%s'...", trigger)
            if step.can_skip(context):
                log.debug("Step %s: nothing to do", step_name)
                context.update(
                    StepResult(
                        step_name=step.name,
                        skipped=True,
                        message=f"'{trigger}' not found" if trigger else "nothing to do",
                    )
                )
                continue

            try:
                result = step.execute(context)
            except Exception as e:
                result = StepResult(step_name=step_name, success=False, message=str(e))
                if self._config.stop_on_failure:
                    context.update(result)
                    log.error("Step %s failed: %s", step_name, e)
                    raise PipelineError(f"Step {step_name} failed: {e}") from e

            context.update(result)
            if not result.success:
                log.error("Step %s failed: %s", step_name, result.message)
                if self._config.stop_on_failure:
                    raise PipelineError(f"Step {step_name} failed: {result.message}")

        return context.finalize()
