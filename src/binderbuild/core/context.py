"""Resolve the build context directory of a repository."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

#: Subdirectories checked, in order, for build files.
BUILD_CONTEXT_DIRS = ("binder", ".binder")


def resolve_build_context(repo_root: Path) -> Path:
    """Return ``binder/`` if it exists, else ``.binder/``, else repo_root itself."""
    repo_root = Path(repo_root)
    for name in BUILD_CONTEXT_DIRS:
        candidate = repo_root / name
        if candidate.is_dir():
            return candidate
    return repo_root


def describe_build_context(repo_root: Path, context_dir: Path) -> str:
    """Label for diagnostics: ``'binder/'``, ``'.binder/'`` or ``'./'``."""
    if Path(context_dir) == Path(repo_root):
        return "./"
    return f"{Path(context_dir).name}/"


def find_first(context_dir: Path, names: Iterable[str]) -> Path | None:
    """Return the first existing file among names in context_dir."""
    for name in names:
        candidate = Path(context_dir) / name
        if candidate.is_file():
            return candidate
    return None
