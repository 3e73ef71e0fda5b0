"""Base apt step: install the OS packages every image needs."""

from __future__ import annotations

from binderbuild.build.apt import install_apt_packages
from binderbuild.build.build_log import get_logger
from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings


class BaseAptStep:
    name = "base_apt"
    trigger: str | None = None

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        packages = list(settings.install.base_apt_packages)
        if not packages:
            return StepResult(step_name=self.name, message="No base apt packages configured")
        get_logger().info("Installing apt-get packages...")
        install_apt_packages(runner, settings, packages)
        return StepResult(
            step_name=self.name,
            message=f"Installed {len(packages)} base apt package(s)",
            data={"apt_packages": packages},
        )

    def can_skip(self, context: BuildContext) -> bool:
        return False
