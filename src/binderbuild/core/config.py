"""Configuration loading from .env and YAML."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError

from binderbuild.core.exceptions import ConfigError

log = logging.getLogger(__name__)

CONFIG_FILENAME = "binderbuild.yaml"

DEFAULT_BUILD_STEPS = ["context", "apt", "jupyter_config", "conda_env", "pip", "post_build", "start"]
DEFAULT_BOOTSTRAP_STEPS = ["user", "conda_profile", "base_apt", "conda_install"]


def _find_project_root(start: Path | None = None) -> Path:
    """Find project root by looking for binderbuild.yaml or pyproject.toml upward."""
    current = Path(start or Path.cwd()).resolve()
    for _ in range(10):
        if (current / CONFIG_FILENAME).exists() or (current / "pyproject.toml").exists():
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent
    return Path.cwd().resolve()


class EnvironmentConfigModel(BaseModel):
    """Names and locations shared by every build command."""

    conda_env: str = "notebook"
    nb_user: str = "jovyan"
    nb_uid: int = 1000
    conda_dir: str = "/srv/conda"
    home: str | None = None
    shell: str = "/bin/bash"
    locale: str = "C.UTF-8"

    @property
    def home_dir(self) -> Path:
        return Path(self.home) if self.home else Path("/home") / self.nb_user

    @property
    def nb_python_prefix(self) -> Path:
        return Path(self.conda_dir) / "envs" / self.conda_env

    @property
    def dask_root_config(self) -> Path:
        return Path(self.conda_dir) / "etc"


class InstallConfigModel(BaseModel):
    """Package manager binaries and package sets."""

    default_packages: list[str] = Field(default_factory=lambda: ["pangeo-notebook"])
    base_apt_packages: list[str] = Field(default_factory=lambda: ["apt-utils", "wget", "zip", "tzdata"])
    conda_installer_url: str = (
        "https://github.com/conda-forge/miniforge/releases/latest/download/Mambaforge-Linux-x86_64.sh"
    )
    apt_get_bin: str = "apt-get"
    mamba_bin: str = "mamba"
    conda_lock_bin: str = "conda-lock"


class PathsConfigModel(BaseModel):
    """Fixed system locations written by the build."""

    start_path: str = "/srv/start"
    srv_dir: str = "/srv"
    jupyter_config_dir: str = "/etc/jupyter"
    profile_script: str = "/etc/profile.d/init_conda.sh"
    apt_lists_dir: str = "/var/lib/apt/lists"
    tmp_dir: str = "/tmp"


class PipelineConfigModel(BaseModel):
    """Pipeline section of config."""

    steps: list[str] = Field(default_factory=lambda: list(DEFAULT_BUILD_STEPS))
    bootstrap_steps: list[str] = Field(default_factory=lambda: list(DEFAULT_BOOTSTRAP_STEPS))
    skip_steps: list[str] = Field(default_factory=list)
    stop_on_failure: bool = True


class AppConfig(BaseModel):
    """Full application configuration."""

    environment: EnvironmentConfigModel = Field(default_factory=EnvironmentConfigModel)
    install: InstallConfigModel = Field(default_factory=InstallConfigModel)
    paths: PathsConfigModel = Field(default_factory=PathsConfigModel)
    pipeline: PipelineConfigModel = Field(default_factory=PipelineConfigModel)
    port: int = 8888
    command_timeout: int = 3600
    dry_run: bool = False

    def build_env(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """Return the environment variables exposed to every build command.

        ``base`` supplies the inherited PATH and any other variables to keep;
        it defaults to an empty mapping so the result is deterministic.
        """
        env_cfg = self.environment
        prefix = env_cfg.nb_python_prefix
        inherited_path = (base or {}).get("PATH", "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin")
        env = dict(base or {})
        env.update(
            {
                "CONDA_ENV": env_cfg.conda_env,
                "DEBIAN_FRONTEND": "noninteractive",
                "NB_USER": env_cfg.nb_user,
                "NB_UID": str(env_cfg.nb_uid),
                "SHELL": env_cfg.shell,
                "LANG": env_cfg.locale,
                "LC_ALL": env_cfg.locale,
                "CONDA_DIR": env_cfg.conda_dir,
                "NB_PYTHON_PREFIX": str(prefix),
                "HOME": str(env_cfg.home_dir),
                "PATH": f"{prefix / 'bin'}:{Path(env_cfg.conda_dir) / 'bin'}:{inherited_path}",
                "DASK_ROOT_CONFIG": str(env_cfg.dask_root_config),
            }
        )
        return env


# Environment variable -> (section, key) overrides applied after YAML.
ENV_MAPPING: dict[str, tuple[str | None, str]] = {
    "CONDA_ENV": ("environment", "conda_env"),
    "NB_USER": ("environment", "nb_user"),
    "NB_UID": ("environment", "nb_uid"),
    "CONDA_DIR": ("environment", "conda_dir"),
    "BINDERBUILD_COMMAND_TIMEOUT": (None, "command_timeout"),
}


class ConfigManager:
    """Load and merge configuration from .env and YAML."""

    def __init__(
        self,
        project_root: Path | None = None,
        env_path: Path | None = None,
        config_path: Path | None = None,
        use_os_environ: bool = False,
    ) -> None:
        self._root = Path(project_root or _find_project_root()).resolve()
        self._env_path = Path(env_path) if env_path else self._root / ".env"
        self._config_path = Path(config_path) if config_path else self._root / CONFIG_FILENAME
        self._use_os_environ = use_os_environ
        self._config: AppConfig | None = None
        self._env: dict[str, str] = {}

    def load_env(self) -> dict[str, str]:
        """Load .env file into a dict (without modifying os.environ).

        When ``use_os_environ`` is set, mapped variables from the process
        environment take precedence over the file.
        """
        env: dict[str, str] = {}
        if self._env_path.exists():
            try:
                env = {k: v for k, v in dotenv_values(self._env_path).items() if v is not None}
            except OSError as e:
                log.warning("Failed to read .env file %s: %s", self._env_path, e)
        if self._use_os_environ:
            for key in ENV_MAPPING:
                if os.environ.get(key):
                    env[key] = os.environ[key]
        self._env = env
        return self._env

    def load_yaml(self) -> dict[str, Any]:
        """Load YAML config file if it exists."""
        if not self._config_path.exists():
            return {}
        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            log.warning("Failed to read config file %s: %s", self._config_path, e)
            return {}
        except yaml.YAMLError as e:
            log.warning("Malformed YAML in %s: %s", self._config_path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring config file %s: top level is not a mapping", self._config_path)
            return {}
        return data

    def load(self) -> AppConfig:
        """Load .env and YAML, merge with defaults, return AppConfig."""
        env = self.load_env()
        yaml_data = self.load_yaml()

        config_dict: dict[str, Any] = {}
        for section in ("environment", "install", "paths", "pipeline"):
            if yaml_data.get(section):
                config_dict[section] = dict(yaml_data[section])
        for key in ("port", "command_timeout", "dry_run"):
            if key in yaml_data:
                config_dict[key] = yaml_data[key]

        # Environment variables override YAML values
        for env_key, (section, key) in ENV_MAPPING.items():
            if not env.get(env_key):
                continue
            if section is None:
                config_dict[key] = env[env_key]
            else:
                config_dict.setdefault(section, {})[key] = env[env_key]

        try:
            self._config = AppConfig(**config_dict)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {self._config_path}: {e}") from e
        return self._config

    @property
    def config(self) -> AppConfig:
        """Return loaded config; load if not yet loaded."""
        if self._config is None:
            self.load()
        if self._config is None:
            raise ConfigError("ConfigManager.load() failed to produce a config")
        return self._config

    @property
    def env(self) -> dict[str, str]:
        """Return loaded env dict."""
        if not self._env and self._env_path.exists():
            self.load_env()
        return self._env

    @property
    def project_root(self) -> Path:
        return self._root
