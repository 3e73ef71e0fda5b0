"""Protocol interfaces for pluggable components."""

from binderbuild.protocols.build_step import BuildStep
from binderbuild.protocols.reporter import Reporter

__all__ = [
    "BuildStep",
    "Reporter",
]
