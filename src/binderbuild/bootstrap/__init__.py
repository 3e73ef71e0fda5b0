"""Bootstrap steps: base environment setup run once per base image."""

from binderbuild.bootstrap.base_apt_step import BaseAptStep
from binderbuild.bootstrap.conda_install_step import CondaInstallStep
from binderbuild.bootstrap.profile_step import CondaProfileStep
from binderbuild.bootstrap.user_step import UserStep


def register_bootstrap_steps(registry) -> None:
    """Register base environment setup steps on the given registry."""
    registry.register_step("user", UserStep)
    registry.register_step("conda_profile", CondaProfileStep)
    registry.register_step("base_apt", BaseAptStep)
    registry.register_step("conda_install", CondaInstallStep)


__all__ = [
    "BaseAptStep",
    "CondaInstallStep",
    "CondaProfileStep",
    "UserStep",
    "register_bootstrap_steps",
]
