"""Configuration parsing and validation for gh-env-sync.

This module handles the two user-supplied inputs: the ``owner/repo`` target
and the configuration document that maps environment names to the variables
each environment should carry.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, NamedTuple

import yaml
from typing_extensions import TypeAlias

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("github_environments.toml")

EnvironmentVariables: TypeAlias = dict[str, str]
ConfigDocument: TypeAlias = dict[str, EnvironmentVariables]


class RepositoryRef(NamedTuple):
    """A GitHub repository addressed by owner login and name."""

    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


def parse_repository(value: str) -> RepositoryRef:
    """Parse an ``owner/repo`` string.

    Args:
        value: Repository in format 'owner/repo'

    Returns:
        The parsed repository reference

    Raises:
        ConfigurationError: If the value does not contain exactly one slash
            separating two non-empty parts

    Example:
        >>> parse_repository("rust-lang/rust")
        RepositoryRef(owner='rust-lang', name='rust')
    """
    parts = value.split("/")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ConfigurationError(
            f"Repository must be in format 'owner/repo', got '{value}'"
        )
    owner, name = (part.strip() for part in parts)
    return RepositoryRef(owner=owner, name=name)


def load_config(config_path: Path) -> ConfigDocument:
    """Load and validate the environments document from disk.

    ``.toml`` files are read with :mod:`tomllib`, ``.yaml`` and ``.yml`` files
    with PyYAML. The top level maps environment names to tables of string
    variables:

    .. code-block:: toml

        [production]
        API_URL = "https://api.example.com"

        [staging]
        API_URL = "https://staging.example.com"

    Args:
        config_path: Path to the configuration file

    Returns:
        Parsed and validated configuration document

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigurationError: If the file is malformed or its structure is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    suffix = config_path.suffix.lower()
    if suffix == ".toml":
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Failed to parse TOML configuration: {e}") from e
    elif suffix in (".yaml", ".yml"):
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
    else:
        raise ConfigurationError(
            f"Unsupported configuration format '{config_path.suffix}' "
            "(expected .toml, .yaml or .yml)"
        )

    config = validate_config(data)

    total_variables = sum(len(variables) for variables in config.values())
    logger.info(
        f"Successfully loaded configuration with {len(config)} environments "
        f"and {total_variables} variables"
    )
    return config


def validate_config(data: Any) -> ConfigDocument:
    """Validate a parsed configuration document.

    Variable values must already be strings; numbers and booleans are rejected
    rather than coerced. The input is never modified, a new mapping is returned.

    Args:
        data: Raw configuration data to validate

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the configuration structure is invalid
    """
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping of environments")

    validated: ConfigDocument = {}
    for env_name, variables in data.items():
        if not isinstance(env_name, str) or not env_name:
            raise ConfigurationError(
                f"Environment name must be a non-empty string, got {env_name!r}"
            )
        if variables is None:
            variables = {}
        if not isinstance(variables, dict):
            raise ConfigurationError(
                f"Environment '{env_name}' must be a mapping of variables"
            )

        validated_variables: EnvironmentVariables = {}
        for key, value in variables.items():
            if not isinstance(key, str) or not key:
                raise ConfigurationError(
                    f"Environment '{env_name}': variable name must be a non-empty "
                    f"string, got {key!r}"
                )
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"Environment '{env_name}': value of '{key}' must be a string, "
                    f"got {type(value).__name__}"
                )
            validated_variables[key] = value

        validated[env_name] = validated_variables

    return validated
