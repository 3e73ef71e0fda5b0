"""JSON reporter: write the build result (steps and commands) as JSON."""

from __future__ import annotations

import json
from pathlib import Path

from binderbuild.core.schema import BuildResult


class JsonReporter:
    """Reporter that writes a build result as a JSON document."""

    format_name: str = "json"

    def report_build(self, result: BuildResult, output: Path) -> None:
        """Write the build result to the output path."""
        output = Path(output).resolve()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(result.model_dump(mode="json"), indent=2), encoding="utf-8")
