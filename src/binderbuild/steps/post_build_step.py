"""PostBuild step: run the repository's postBuild script, then clean up after it."""

from __future__ import annotations

from binderbuild.build.cleanup import clean_after_post_build
from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings, trigger_path


class PostBuildStep:
    """Execute postBuild from the build context directory."""

    name = "post_build"
    trigger = "postBuild"

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        path = trigger_path(context, self.trigger)
        if path is None:
            return StepResult(step_name=self.name, skipped=True, message=f"'{self.trigger}' not found")

        runner.make_executable(path)
        runner.run([f"./{path.name}"], cwd=path.parent)
        clean_after_post_build(runner, settings)
        return StepResult(step_name=self.name, message=f"Ran {self.trigger}")

    def can_skip(self, context: BuildContext) -> bool:
        return trigger_path(context, self.trigger) is None
