"""Protocol for build report formats."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from binderbuild.core.schema import BuildResult


class Reporter(Protocol):
    """Protocol for build report formats."""

    format_name: str

    def report_build(self, result: BuildResult, output: Path) -> None:
        """Write the build result to output path."""
        ...
