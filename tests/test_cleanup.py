"""Tests for image-size cleanup helpers."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from binderbuild.build.cleanup import (
    clean_after_conda_install,
    clean_after_post_build,
    clear_directory,
    delete_matching,
    find_files,
)
from binderbuild.build.runner import CommandRunner
from binderbuild.core.config import AppConfig


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x")
    return path


def test_find_files_matches_pattern(tmp_path: Path) -> None:
    a = _touch(tmp_path / "lib" / "libfoo.a")
    _touch(tmp_path / "lib" / "libfoo.so")
    _touch(tmp_path / "pkg" / "mod.pyc")
    assert find_files(tmp_path, "*.a") == [a]


def test_find_files_missing_root(tmp_path: Path) -> None:
    assert find_files(tmp_path / "nope", "*.a") == []


def test_find_files_follows_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    _touch(target / "bundle.js.map")
    root = tmp_path / "root"
    root.mkdir()
    os.symlink(target, root / "linked")
    assert find_files(root, "*.js.map") == [root / "linked" / "bundle.js.map"]


def test_find_files_stops_at_symlink_loops(tmp_path: Path) -> None:
    conda = tmp_path / "conda"
    lib = _touch(conda / "lib" / "libfoo.a")
    (conda / "pkgs").mkdir()
    os.symlink("..", conda / "pkgs" / "up1")
    os.symlink("..", conda / "pkgs" / "up2")
    assert find_files(conda, "*.a") == [lib]


def test_delete_matching_with_symlink_loop(tmp_path: Path) -> None:
    conda = tmp_path / "conda"
    lib = _touch(conda / "lib" / "libfoo.a")
    os.symlink(conda, conda / "lib" / "self")
    runner = CommandRunner()
    assert delete_matching(runner, conda, "*.a") == 1
    assert not lib.exists()


def test_delete_matching_with_exclude(tmp_path: Path) -> None:
    keep = _touch(tmp_path / "static" / "bokeh.min.js")
    drop = _touch(tmp_path / "static" / "bokeh.js")
    runner = CommandRunner()
    count = delete_matching(runner, tmp_path / "static", "*.js", exclude="*.min.js")
    assert count == 1
    assert keep.exists()
    assert not drop.exists()
    assert runner.history == [f"find {tmp_path / 'static'} -follow -type f -name '*.js' ! -name '*.min.js' -delete"]


def test_delete_matching_dry_run_keeps_files(tmp_path: Path) -> None:
    lib = _touch(tmp_path / "libfoo.a")
    runner = CommandRunner(dry_run=True)
    delete_matching(runner, tmp_path, "*.a")
    assert lib.exists()
    assert len(runner.history) == 1


def test_clear_directory_keeps_directory(tmp_path: Path) -> None:
    tmp_dir = tmp_path / "tmp"
    _touch(tmp_dir / "a")
    _touch(tmp_dir / "nested" / "b")
    runner = CommandRunner()
    clear_directory(runner, tmp_dir)
    assert tmp_dir.is_dir()
    assert list(tmp_dir.iterdir()) == []


def test_clean_after_conda_install_plan(settings: AppConfig) -> None:
    runner = CommandRunner(dry_run=True)
    clean_after_conda_install(runner, settings)
    conda_dir = settings.environment.conda_dir
    assert runner.history == [
        "mamba clean -yaf",
        f"find {conda_dir} -follow -type f -name '*.a' -delete",
        f"find {conda_dir} -follow -type f -name '*.js.map' -delete",
    ]


def test_clean_after_conda_install_prunes_bokeh_js(settings: AppConfig) -> None:
    static = settings.environment.nb_python_prefix / "lib" / "python3.11" / "site-packages" / "bokeh" / "server" / "static"
    keep = _touch(static / "js" / "bokeh.min.js")
    drop = _touch(static / "js" / "bokeh.js")
    pyc = _touch(settings.environment.nb_python_prefix / "lib" / "python3.11" / "mod.pyc")
    lib = _touch(Path(settings.environment.conda_dir) / "lib" / "libz.a")
    runner = CommandRunner(dry_run=False)
    with patch.object(runner, "run") as run:
        clean_after_conda_install(runner, settings)
    run.assert_called_once_with(["mamba", "clean", "-yaf"])
    assert keep.exists()
    assert not drop.exists()
    assert pyc.exists()
    assert not lib.exists()


def test_clean_after_post_build(settings: AppConfig) -> None:
    home = settings.environment.home_dir
    cache = _touch(home / ".cache" / "pip" / "wheel")
    npm = _touch(home / ".npm" / "x")
    notebook = _touch(home / "analysis.ipynb")
    staging = _touch(settings.environment.nb_python_prefix / "share" / "jupyter" / "lab" / "staging" / "pkg.json")
    tmp_file = _touch(Path(settings.paths.tmp_dir) / "scratch")
    runner = CommandRunner()
    clean_after_post_build(runner, settings)
    assert not cache.exists()
    assert not npm.exists()
    assert not staging.exists()
    assert not tmp_file.exists()
    assert Path(settings.paths.tmp_dir).is_dir()
    assert notebook.exists()
