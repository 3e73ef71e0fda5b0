"""Central registry for build steps and reporters."""

from __future__ import annotations

import logging

from binderbuild.core.exceptions import RegistryError
from binderbuild.protocols import BuildStep, Reporter

log = logging.getLogger(__name__)


class ComponentRegistry:
    """Central registry for build steps and reporters."""

    def __init__(self) -> None:
        self._steps: dict[str, type[BuildStep]] = {}
        self._reporters: dict[str, type[Reporter]] = {}

    def register_step(self, name: str, cls: type[BuildStep]) -> None:
        """Register a build step class."""
        if name in self._steps:
            log.warning("Overwriting step registration: %s", name)
        self._steps[name] = cls

    def register_reporter(self, fmt: str, cls: type[Reporter]) -> None:
        """Register a reporter class."""
        if fmt in self._reporters:
            log.warning("Overwriting reporter registration: %s", fmt)
        self._reporters[fmt] = cls

    def get_step(self, name: str) -> BuildStep:
        """Get a build step instance by name."""
        if name not in self._steps:
            raise RegistryError(f"Unknown build step: {name}")
        cls = self._steps[name]
        return cls()  # type: ignore[call-arg]

    def get_reporter(self, fmt: str) -> Reporter:
        """Get a reporter instance by format name."""
        if fmt not in self._reporters:
            raise RegistryError(f"Unknown reporter format: {fmt}")
        cls = self._reporters[fmt]
        return cls()  # type: ignore[call-arg]

    def list_available(self) -> dict[str, list[str]]:
        """Return all registered component names by category."""
        return {
            "steps": list(self._steps),
            "reporters": list(self._reporters),
        }
