"""Custom exception hierarchy for binderbuild."""

from __future__ import annotations


class BinderBuildError(Exception):
    """Base exception for binderbuild."""

    pass


class ConfigError(BinderBuildError):
    """Raised when configuration loading or validation fails."""

    pass


class RegistryError(BinderBuildError):
    """Raised when a step or reporter is not found."""

    pass


class PipelineError(BinderBuildError):
    """Raised when a build step fails."""

    pass


class CommandError(BinderBuildError):
    """Raised when an external command exits non-zero, is missing, or times out."""

    def __init__(self, command: str, returncode: int | None, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        if returncode is None:
            detail = "did not complete"
        else:
            detail = f"exited with status {returncode}"
        message = f"Command {detail}: {command}"
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)
