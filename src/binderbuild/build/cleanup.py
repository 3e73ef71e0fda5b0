"""Remove build byproducts to keep the final image small.

See https://jcristharif.com/conda-docker-tips.html. Compiled ``.pyc`` files
are never removed.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path

from binderbuild.build.build_log import get_logger
from binderbuild.build.runner import CommandRunner
from binderbuild.core.config import AppConfig

STATIC_LIBRARY_PATTERN = "*.a"
SOURCE_MAP_PATTERN = "*.js.map"
BOKEH_STATIC_GLOB = "lib/python*/site-packages/bokeh/server/static"


def find_files(root: Path, pattern: str, exclude: str | None = None) -> list[Path]:
    """Return regular files under root whose name matches pattern (like ``find -follow -type f``).

    Symlinked directories are followed, but each directory is entered only
    once, so symlink loops terminate.
    """
    root = Path(root)
    if not root.is_dir():
        return []
    matches: list[Path] = []
    visited: set[tuple[int, int]] = set()
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        st = os.stat(dirpath)
        key = (st.st_dev, st.st_ino)
        if key in visited:
            get_logger().debug("File system loop detected at %s", dirpath)
            dirnames[:] = []
            continue
        visited.add(key)
        for filename in filenames:
            if not fnmatch.fnmatch(filename, pattern):
                continue
            if exclude and fnmatch.fnmatch(filename, exclude):
                continue
            path = Path(dirpath) / filename
            if path.is_file():
                matches.append(path)
    return sorted(matches)


def delete_matching(runner: CommandRunner, root: Path, pattern: str, exclude: str | None = None) -> int:
    """Delete files matching pattern under root; return how many were found."""
    label = f"find {root} -follow -type f -name '{pattern}'"
    if exclude:
        label += f" ! -name '{exclude}'"
    label += " -delete"
    matches = find_files(root, pattern, exclude=exclude)
    runner.remove(matches, label=label)
    return len(matches)


def clear_directory(runner: CommandRunner, directory: Path) -> None:
    """Remove everything inside directory, keeping the directory itself (``rm -rf dir/*``)."""
    directory = Path(directory)
    children = sorted(directory.iterdir()) if directory.is_dir() else []
    runner.remove(children, label=f"rm -rf {directory}/*")


def bokeh_static_dirs(prefix: Path) -> list[Path]:
    return sorted(p for p in Path(prefix).glob(BOKEH_STATIC_GLOB) if p.is_dir())


def clean_after_conda_install(runner: CommandRunner, settings: AppConfig) -> None:
    """Drop package caches, static libraries, JS source maps and unminified bokeh JS."""
    conda_dir = Path(settings.environment.conda_dir)
    runner.run([settings.install.mamba_bin, "clean", "-yaf"])
    delete_matching(runner, conda_dir, STATIC_LIBRARY_PATTERN)
    delete_matching(runner, conda_dir, SOURCE_MAP_PATTERN)
    for static_dir in bokeh_static_dirs(settings.environment.nb_python_prefix):
        delete_matching(runner, static_dir, "*.js", exclude="*.min.js")


def clean_after_post_build(runner: CommandRunner, settings: AppConfig) -> None:
    """Remove cruft a postBuild script (e.g. JupyterLab extension builds) leaves behind."""
    env_cfg = settings.environment
    home = env_cfg.home_dir
    clear_directory(runner, Path(settings.paths.tmp_dir))
    runner.remove(
        [
            home / ".cache",
            home / ".npm",
            home / ".yarn",
            env_cfg.nb_python_prefix / "share" / "jupyter" / "lab" / "staging",
        ]
    )
    delete_matching(runner, Path(env_cfg.conda_dir), STATIC_LIBRARY_PATTERN)
    delete_matching(runner, Path(env_cfg.conda_dir), SOURCE_MAP_PATTERN)
