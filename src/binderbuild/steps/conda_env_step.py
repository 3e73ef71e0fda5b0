"""Conda environment step: create the notebook environment from the best spec available."""

from __future__ import annotations

from pathlib import Path

from binderbuild.build.build_log import get_logger
from binderbuild.build.cleanup import clean_after_conda_install
from binderbuild.core.config import AppConfig
from binderbuild.core.context import find_first
from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import context_dir_for, get_runner_and_settings

CONDA_LOCK_FILE = "conda-lock.yml"
EXPLICIT_LOCK_FILE = "conda-linux-64.lock"
ENVIRONMENT_FILE = "environment.yml"

#: Dependency spec files in precedence order; the first present one wins.
DEPENDENCY_FILES = (CONDA_LOCK_FILE, EXPLICIT_LOCK_FILE, ENVIRONMENT_FILE)


def select_dependency_file(context_dir: Path) -> Path | None:
    """Return the highest-precedence dependency spec in context_dir, or None."""
    return find_first(context_dir, DEPENDENCY_FILES)


def install_command(spec_file: Path | None, settings: AppConfig) -> list[str]:
    """Return the single command that creates the environment from spec_file.

    Lock files pin every package so rebuilds install identical versions;
    without any spec the configured default package set is installed.
    """
    env_name = settings.environment.conda_env
    mamba = settings.install.mamba_bin
    if spec_file is None:
        return [mamba, "create", "--yes", "--name", env_name, *settings.install.default_packages]
    if spec_file.name == CONDA_LOCK_FILE:
        return [settings.install.conda_lock_bin, "install", "--name", env_name, spec_file.name]
    if spec_file.name == EXPLICIT_LOCK_FILE:
        return [mamba, "create", "--yes", "--name", env_name, "--file", spec_file.name]
    if spec_file.name == ENVIRONMENT_FILE:
        return [mamba, "env", "create", "--name", env_name, "-f", spec_file.name]
    raise ValueError(f"Not a dependency spec file: {spec_file}")


class CondaEnvStep:
    """Install the conda environment; always runs, falling back to default packages."""

    name = "conda_env"
    trigger: str | None = None

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        context_dir = context_dir_for(context)
        if context_dir is None:
            return StepResult(step_name=self.name, success=False, message="repo_path not set in context")

        log = get_logger()
        log.info("Checking for %s...", ", ".join(f"'{n}'" for n in DEPENDENCY_FILES))
        spec_file = select_dependency_file(context_dir)
        if spec_file is None:
            log.info(
                "No %s! *creating default env* (%s)",
                ", ".join(DEPENDENCY_FILES),
                " ".join(settings.install.default_packages),
            )
        else:
            log.info("Installing packages from %s", spec_file.name)

        runner.run(install_command(spec_file, settings), cwd=context_dir)
        clean_after_conda_install(runner, settings)
        return StepResult(
            step_name=self.name,
            message=f"Created environment {settings.environment.conda_env!r}",
            data={"dependency_file": spec_file},
        )

    def can_skip(self, context: BuildContext) -> bool:
        return False
