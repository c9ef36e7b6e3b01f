"""GitHub Environment Sync - declarative GitHub environment variable tool.

This package provides functionality to create GitHub deployment environments
and write their variables based on TOML or YAML configuration files.
"""

from .config import ConfigDocument, RepositoryRef, load_config, parse_repository
from .errors import (
    ConfigurationError,
    GhEnvSyncError,
    GitHubAPIError,
    OperationError,
    RepositoryLookupError,
)
from .github import GitHubEnvClient, RepositoryIdentity, VariableAction
from .sync import EnvironmentSync, SyncResult

__version__ = "1.0.0"

__all__ = [
    "ConfigDocument",
    "RepositoryRef",
    "load_config",
    "parse_repository",
    "ConfigurationError",
    "GhEnvSyncError",
    "GitHubAPIError",
    "OperationError",
    "RepositoryLookupError",
    "GitHubEnvClient",
    "RepositoryIdentity",
    "VariableAction",
    "EnvironmentSync",
    "SyncResult",
]
