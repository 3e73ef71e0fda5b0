"""apt-get helpers shared by the base and build pipelines."""

from __future__ import annotations

from pathlib import Path

from binderbuild.build.cleanup import clear_directory
from binderbuild.build.runner import CommandRunner
from binderbuild.core.config import AppConfig


def parse_apt_packages(text: str) -> list[str]:
    """Split apt.txt into package names.

    Names are whitespace separated, as ``xargs`` reads them; ``#`` starts a
    comment running to end of line.
    """
    packages: list[str] = []
    for line in text.splitlines():
        packages.extend(line.split("#", 1)[0].split())
    return packages


def install_apt_packages(runner: CommandRunner, settings: AppConfig, packages: list[str]) -> None:
    """Refresh package lists, install packages, then drop the apt caches."""
    apt_get = settings.install.apt_get_bin
    runner.run([apt_get, "update", "--fix-missing"])
    runner.run([apt_get, "install", "-y", *packages])
    runner.run([apt_get, "clean"])
    clear_directory(runner, Path(settings.paths.apt_lists_dir))
