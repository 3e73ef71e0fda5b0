"""Pip step: install extra packages from requirements.txt into the notebook env."""

from __future__ import annotations

from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings, trigger_path


class PipStep:
    """Run the environment's pip on requirements.txt without keeping wheel caches."""

    name = "pip"
    trigger = "requirements.txt"

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        path = trigger_path(context, self.trigger)
        if path is None:
            return StepResult(step_name=self.name, skipped=True, message=f"'{self.trigger}' not found")

        pip = settings.environment.nb_python_prefix / "bin" / "pip"
        # cwd is the context dir so nested "-r other.txt" lines resolve.
        runner.run([pip, "install", "--no-cache", "-r", path.name], cwd=path.parent)
        return StepResult(step_name=self.name, message=f"Installed packages from {self.trigger}")

    def can_skip(self, context: BuildContext) -> bool:
        return trigger_path(context, self.trigger) is None
