"""Build execution: command runner, build log, and image-size cleanup."""

from binderbuild.build.build_log import build_log_context, get_logger
from binderbuild.build.cleanup import clean_after_conda_install, clean_after_post_build
from binderbuild.build.runner import CommandRunner

__all__ = [
    "CommandRunner",
    "build_log_context",
    "clean_after_conda_install",
    "clean_after_post_build",
    "get_logger",
]
