"""Protocol for build steps."""

from __future__ import annotations

from typing import Protocol

from binderbuild.core.schema import BuildContext, StepResult


class BuildStep(Protocol):
    """Protocol for build steps.

    Attributes:
        name: Unique identifier for this step.
        trigger: File name whose presence in the build context enables the
            step, or ``None`` for steps that always run.
    """

    name: str
    trigger: str | None

    def execute(self, context: BuildContext) -> StepResult:
        """Run the step and return a result."""
        ...

    def can_skip(self, context: BuildContext) -> bool:
        """Return True if this step has nothing to do given the context."""
        ...
