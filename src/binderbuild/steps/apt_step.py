"""Apt step: install OS packages listed in apt.txt."""

from __future__ import annotations

from binderbuild.build.apt import install_apt_packages, parse_apt_packages
from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings, trigger_path


class AptStep:
    """Install apt packages when the build context has an apt.txt."""

    name = "apt"
    trigger = "apt.txt"

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        path = trigger_path(context, self.trigger)
        if path is None:
            return StepResult(step_name=self.name, skipped=True, message=f"'{self.trigger}' not found")

        packages = parse_apt_packages(path.read_text(encoding="utf-8"))
        if not packages:
            return StepResult(step_name=self.name, message=f"{self.trigger} lists no packages")
        install_apt_packages(runner, settings, packages)
        return StepResult(
            step_name=self.name,
            message=f"Installed {len(packages)} apt package(s)",
            data={"apt_packages": packages},
        )

    def can_skip(self, context: BuildContext) -> bool:
        return trigger_path(context, self.trigger) is None
