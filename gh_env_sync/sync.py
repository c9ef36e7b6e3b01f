"""Environment synchronization logic for gh-env-sync.

This module drives the GitHub client so that each selected environment
exists remotely and carries every variable from the configuration document.
Nothing is deleted: variables present on GitHub but absent from the document
are left alone.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import ConfigDocument, EnvironmentVariables
from .errors import ConfigurationError
from .github import GitHubEnvClient, VariableAction

logger = logging.getLogger(__name__)


class SyncResult:
    """Summary of what a synchronization run changed."""

    def __init__(self):
        """Initialize empty sync result."""
        self.environments: list[str] = []
        self.created: list[tuple[str, str]] = []
        self.updated: list[tuple[str, str]] = []

    def add_environment(self, environment_name: str) -> None:
        self.environments.append(environment_name)

    def add_variable(
        self, environment_name: str, key: str, action: VariableAction
    ) -> None:
        """Record a variable write.

        Args:
            environment_name: Environment the variable belongs to
            key: Variable name
            action: Whether the variable was created or updated
        """
        if action is VariableAction.CREATED:
            self.created.append((environment_name, key))
        else:
            self.updated.append((environment_name, key))

    @property
    def variable_count(self) -> int:
        """Number of variables written."""
        return len(self.created) + len(self.updated)

    def __str__(self) -> str:
        """String representation of sync results."""
        return (
            f"{len(self.environments)} environments synced, "
            f"{len(self.created)} variables created, "
            f"{len(self.updated)} variables updated"
        )


def select_environments(
    config: ConfigDocument, environment: Optional[str] = None
) -> list[str]:
    """Resolve which environments of the document should be synced.

    Args:
        config: Validated configuration document
        environment: Optional single environment to sync

    Returns:
        Environment names in document order

    Raises:
        ConfigurationError: If ``environment`` is not defined in the document
    """
    if environment is None:
        return list(config)

    if environment not in config:
        available = ", ".join(config) or "none"
        raise ConfigurationError(
            f"Environment '{environment}' is not defined in the configuration "
            f"(available: {available})"
        )
    return [environment]


class EnvironmentSync:
    """Main synchronization orchestrator.

    Runs strictly in order and stops at the first failure. Changes applied
    before a failure stay applied; every write is idempotent so re-running
    converges.
    """

    def __init__(self, github_client: GitHubEnvClient):
        self.github_client = github_client

    def sync(
        self,
        config: ConfigDocument,
        environment: Optional[str] = None,
        dry_run: bool = False,
    ) -> SyncResult:
        """Synchronize environments and their variables to GitHub.

        Args:
            config: Configuration specifying the desired environments
            environment: If set, only this environment is synced
            dry_run: If True, only read remote state and report what would change

        Returns:
            Result object describing the writes performed (or planned)

        Raises:
            ConfigurationError: If ``environment`` is not in the document.
                Raised before any request is made.
            GitHubAPIError: On the first rejected API call

        Example:
            >>> sync = EnvironmentSync(client)
            >>> result = sync.sync({"prod": {"A": "1"}, "staging": {"B": "2"}})
            >>> print(result)
            2 environments synced, 2 variables created, 0 variables updated
        """
        selected = select_environments(config, environment)
        result = SyncResult()

        repository = self.github_client.repository
        logger.info(
            f"Starting sync of {len(selected)} environments to "
            f"{repository.owner}/{repository.name}"
        )
        if dry_run:
            logger.info("DRY RUN MODE - No changes will be made")

        for environment_name in selected:
            self._sync_environment(
                environment_name, config[environment_name], result, dry_run
            )

        logger.info(f"Sync completed: {result}")
        return result

    def sync_environment(
        self,
        environment_name: str,
        variables: EnvironmentVariables,
        dry_run: bool = False,
    ) -> SyncResult:
        """Synchronize a single environment.

        The environment is always upserted first, since it has to exist
        before variables can be written to it.
        """
        result = SyncResult()
        self._sync_environment(environment_name, variables, result, dry_run)
        return result

    def _sync_environment(
        self,
        environment_name: str,
        variables: EnvironmentVariables,
        result: SyncResult,
        dry_run: bool,
    ) -> None:
        logger.info(
            f"Processing environment: {environment_name} ({len(variables)} variables)"
        )

        if dry_run:
            logger.info(f"Would upsert environment {environment_name}")
        else:
            self.github_client.upsert_environment(environment_name)

        for key, value in variables.items():
            if dry_run:
                action = self._plan_variable(environment_name, key)
                logger.info(f"Would {action.value[:-1]} {environment_name}:{key}")
            else:
                try:
                    action = self.github_client.upsert_environment_variable(
                        environment_name, key, value
                    )
                except Exception as e:
                    logger.error(f"✗ Failed to sync {environment_name}:{key}: {e}")
                    raise
                logger.info(f"✓ {action.value.capitalize()} {environment_name}:{key}")

            result.add_variable(environment_name, key, action)

        result.add_environment(environment_name)

    def _plan_variable(self, environment_name: str, key: str) -> VariableAction:
        if self.github_client.get_environment_variable(environment_name, key) is None:
            return VariableAction.CREATED
        return VariableAction.UPDATED
