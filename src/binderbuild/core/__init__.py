"""Framework core: config, schema, registry, pipeline, context resolution, health."""

from binderbuild.core.config import AppConfig, ConfigManager
from binderbuild.core.context import describe_build_context, find_first, resolve_build_context
from binderbuild.core.pipeline import PipelineConfig, PipelineEngine
from binderbuild.core.registry import ComponentRegistry
from binderbuild.core.schema import BuildContext, BuildResult, StepResult

__all__ = [
    "AppConfig",
    "BuildContext",
    "BuildResult",
    "ComponentRegistry",
    "ConfigManager",
    "PipelineConfig",
    "PipelineEngine",
    "StepResult",
    "describe_build_context",
    "find_first",
    "resolve_build_context",
]
