"""Built-in build steps, in pipeline order."""

from binderbuild.steps.apt_step import AptStep
from binderbuild.steps.conda_env_step import CondaEnvStep
from binderbuild.steps.context_step import ContextStep
from binderbuild.steps.jupyter_config_step import JupyterConfigStep
from binderbuild.steps.pip_step import PipStep
from binderbuild.steps.post_build_step import PostBuildStep
from binderbuild.steps.start_step import StartStep


def register_builtin_steps(registry) -> None:
    """Register built-in build steps on the given registry."""
    registry.register_step("context", ContextStep)
    registry.register_step("apt", AptStep)
    registry.register_step("jupyter_config", JupyterConfigStep)
    registry.register_step("conda_env", CondaEnvStep)
    registry.register_step("pip", PipStep)
    registry.register_step("post_build", PostBuildStep)
    registry.register_step("start", StartStep)


__all__ = [
    "AptStep",
    "CondaEnvStep",
    "ContextStep",
    "JupyterConfigStep",
    "PipStep",
    "PostBuildStep",
    "StartStep",
    "register_builtin_steps",
]
