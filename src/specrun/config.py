"""Read profile configuration from ``.specrun.yaml``.

The file lives in the working directory, so each project carries its own
profiles. It maps profile names to their settings::

    products:
      spec_file: openapi.yaml
      server_url: https://api.example.com
      auth:
        type: bearer
        command: pass show example/token

specrun never writes this file. Environment variables adjust what is read:

* ``SPECRUN_CONFIG`` -- path of the configuration file to read instead.
* ``SPECRUN_SERVER_URL`` -- overrides the selected profile's ``server_url``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from specrun.exceptions import ConfigError
from specrun.models import Config, ProfileConfig

CONFIG_FILENAME = ".specrun.yaml"


def config_path() -> Path:
    """Return the configuration file path, honouring ``SPECRUN_CONFIG``."""
    override = os.environ.get("SPECRUN_CONFIG", "")
    if override:
        return Path(override).expanduser()
    return Path.cwd() / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> Config:
    """Load and validate the configuration file.

    Args:
        path: File to read; defaults to :func:`config_path`.

    Returns:
        The validated :class:`~specrun.models.Config`.

    Raises:
        ConfigError: If the file is missing, empty, not valid YAML, or fails
            validation.
    """
    path = path or config_path()
    if not path.is_file():
        raise ConfigError(
            f"{path} not found. Create it with at least one profile "
            "(name, spec_file, server_url)."
        )

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not text.strip():
        raise ConfigError(f"{path} is empty")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must map profile names to profile settings")

    try:
        return Config.model_validate({"profiles": data})
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def resolve_profile(config: Config, name: str) -> ProfileConfig:
    """Return profile *name* with environment overrides applied.

    Raises:
        ConfigError: If the profile does not exist.
    """
    profile = config.profiles.get(name)
    if profile is None:
        raise ConfigError(f"unknown profile {name}")

    server_url = os.environ.get("SPECRUN_SERVER_URL", "")
    if server_url:
        profile = profile.model_copy(update={"server_url": server_url})
    return profile
