"""Health checks for the external tools a build relies on."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from binderbuild.core.config import ConfigManager


@dataclass
class HealthCheckResult:
    """Result of a single health check."""

    name: str
    ok: bool
    message: str = ""
    suggestion: str = ""


def _run_cmd(cmd: list[str], timeout: int = 10, env: dict[str, str] | None = None) -> tuple[bool, str]:
    """Run command, return (success, output_or_error)."""
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
        if result.returncode == 0:
            return True, (result.stdout or result.stderr or "").strip()
        return False, result.stderr or result.stdout or f"exit code {result.returncode}"
    except FileNotFoundError:
        return False, "command not found"
    except subprocess.TimeoutExpired:
        return False, "timeout"
    except OSError as e:
        return False, str(e)


def _first_line(text: str) -> str:
    return text.strip().splitlines()[0] if text.strip() else ""


class HealthChecker:
    """Check that apt-get, the installer download tool, mamba and conda-lock are usable."""

    def __init__(self, config: ConfigManager | None = None) -> None:
        self._config = config or ConfigManager()

    def _search_path(self) -> str:
        return self._config.config.build_env({"PATH": ""})["PATH"].rstrip(":")

    def _which(self, binary: str) -> str | None:
        """Find binary on PATH, including the conda dirs the build adds."""
        return shutil.which(binary) or shutil.which(binary, path=self._search_path())

    def check_tool(self, name: str, binary: str, suggestion: str) -> HealthCheckResult:
        found = self._which(binary)
        if found is None:
            return HealthCheckResult(
                name=name,
                ok=False,
                message=f"{binary}: command not found",
                suggestion=suggestion,
            )
        ok, out = _run_cmd([found, "--version"])
        if not ok:
            return HealthCheckResult(name=name, ok=False, message=f"{found} --version failed: {out}", suggestion=suggestion)
        return HealthCheckResult(name=name, ok=True, message=f"{_first_line(out) or 'OK'} (binary: {found})")

    def check_apt(self) -> HealthCheckResult:
        return self.check_tool(
            "apt-get",
            self._config.config.install.apt_get_bin,
            "apt.txt support needs a Debian or Ubuntu base image with apt-get.",
        )

    def check_wget(self) -> HealthCheckResult:
        return self.check_tool(
            "wget",
            "wget",
            "Run 'binderbuild base' on a host with wget, or install it first (apt-get install -y wget).",
        )

    def check_mamba(self) -> HealthCheckResult:
        return self.check_tool(
            "mamba",
            self._config.config.install.mamba_bin,
            "Run 'binderbuild base' to install Mambaforge into CONDA_DIR, or set CONDA_DIR to an existing install.",
        )

    def check_conda_lock(self) -> HealthCheckResult:
        return self.check_tool(
            "conda-lock",
            self._config.config.install.conda_lock_bin,
            "Install it into the base environment: mamba install conda-lock -y",
        )

    def check_entrypoint(self) -> HealthCheckResult:
        """Report whether a start script has been installed (never fatal)."""
        start = Path(self._config.config.paths.start_path)
        if start.is_file():
            return HealthCheckResult(name="entrypoint", ok=True, message=f"{start} installed")
        return HealthCheckResult(
            name="entrypoint",
            ok=True,
            message=f"{start} not installed",
            suggestion="Add an executable 'start' file to the build context to define the container entrypoint.",
        )

    def check_all(self, *, skip_apt: bool = False, skip_conda: bool = False) -> list[HealthCheckResult]:
        """Run all enabled checks."""
        results: list[HealthCheckResult] = []
        if not skip_apt:
            results.append(self.check_apt())
            results.append(self.check_wget())
        if not skip_conda:
            results.append(self.check_mamba())
            results.append(self.check_conda_lock())
        results.append(self.check_entrypoint())
        return results
