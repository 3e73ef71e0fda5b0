"""Profile step: activate the notebook env in every login shell."""

from __future__ import annotations

from pathlib import Path

from binderbuild.core.config import AppConfig
from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings


def profile_script(settings: AppConfig) -> str:
    env_cfg = settings.environment
    return f". {env_cfg.conda_dir}/etc/profile.d/conda.sh ; conda activate {env_cfg.conda_env}\n"


class CondaProfileStep:
    """Write a profile.d snippet so bash sessions start inside the notebook env."""

    name = "conda_profile"
    trigger: str | None = None

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        script = Path(settings.paths.profile_script)
        runner.mkdir(script.parent)
        runner.write_text(script, profile_script(settings))
        return StepResult(step_name=self.name, message=f"Wrote {script}")

    def can_skip(self, context: BuildContext) -> bool:
        return False
