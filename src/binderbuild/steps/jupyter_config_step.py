"""Jupyter config step: install jupyter_notebook_config.py system-wide."""

from __future__ import annotations

from pathlib import Path

from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings, trigger_path


class JupyterConfigStep:
    """Copy jupyter_notebook_config.py where every Jupyter process reads it."""

    name = "jupyter_config"
    trigger = "jupyter_notebook_config.py"

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        path = trigger_path(context, self.trigger)
        if path is None:
            return StepResult(step_name=self.name, skipped=True, message=f"'{self.trigger}' not found")

        config_dir = Path(settings.paths.jupyter_config_dir)
        runner.mkdir(config_dir)
        runner.copy(path, config_dir)
        return StepResult(
            step_name=self.name,
            message=f"Installed {self.trigger} into {config_dir}",
            data={"jupyter_config": config_dir / self.trigger},
        )

    def can_skip(self, context: BuildContext) -> bool:
        return trigger_path(context, self.trigger) is None
