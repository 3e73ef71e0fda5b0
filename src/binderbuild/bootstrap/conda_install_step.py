"""Conda install step: install Mambaforge and conda-lock into CONDA_DIR."""

from __future__ import annotations

from pathlib import Path

from binderbuild.build.build_log import get_logger
from binderbuild.build.cleanup import STATIC_LIBRARY_PATTERN, delete_matching
from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings

INSTALLER_NAME = "installer.sh"


class CondaInstallStep:
    """Download and run the Mambaforge installer, then add conda-lock."""

    name = "conda_install"
    trigger: str | None = None

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        conda_dir = Path(settings.environment.conda_dir)
        installer = settings.environment.home_dir / INSTALLER_NAME
        mamba = settings.install.mamba_bin

        get_logger().info("Installing Mambaforge...")
        runner.run(["wget", "--quiet", settings.install.conda_installer_url, "-O", installer])
        runner.run(["/bin/bash", installer, "-u", "-b", "-p", conda_dir])
        runner.remove([installer])
        runner.run([mamba, "install", "conda-lock", "-y"])
        runner.run([mamba, "clean", "-afy"])
        delete_matching(runner, conda_dir, STATIC_LIBRARY_PATTERN)
        return StepResult(
            step_name=self.name,
            message=f"Installed Mambaforge into {conda_dir}",
            data={"conda_dir": conda_dir},
        )

    def can_skip(self, context: BuildContext) -> bool:
        """Skip when conda is already installed and this is a real run."""
        settings = context.config.get("settings")
        runner = context.config.get("runner")
        if settings is None or runner is None or runner.dry_run:
            return False
        return (Path(settings.environment.conda_dir) / "bin" / "conda").exists()
