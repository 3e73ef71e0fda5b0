"""Start step: install the repository's start script as the image entrypoint."""

from __future__ import annotations

from pathlib import Path

from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings, trigger_path


class StartStep:
    """Copy an executable start script to the fixed entrypoint path."""

    name = "start"
    trigger = "start"

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        path = trigger_path(context, self.trigger)
        if path is None:
            return StepResult(step_name=self.name, skipped=True, message=f"'{self.trigger}' not found")

        entrypoint = Path(settings.paths.start_path)
        runner.make_executable(path)
        runner.mkdir(entrypoint.parent)
        runner.copy(path, entrypoint)
        return StepResult(
            step_name=self.name,
            message=f"Installed entrypoint {entrypoint}",
            data={"entrypoint": entrypoint},
        )

    def can_skip(self, context: BuildContext) -> bool:
        return trigger_path(context, self.trigger) is None
