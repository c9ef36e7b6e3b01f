"""GitHub API client for deployment environments and their variables.

This module wraps the REST endpoints used to manage repository environments
and environment variables. Every request is authenticated with a bearer token
and pinned to a dated API version.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, NamedTuple, Optional
from urllib.parse import quote

import requests

from .errors import OperationError, RepositoryLookupError

logger = logging.getLogger(__name__)


class RepositoryIdentity(NamedTuple):
    """A repository as resolved by the GitHub API.

    Environment endpoints address the repository by ``owner/name`` while the
    variable endpoints need the numeric ``id``.
    """

    owner: str
    name: str
    id: int


class VariableAction(str, enum.Enum):
    """What an upsert did to a variable."""

    CREATED = "created"
    UPDATED = "updated"


def _segment(value: str) -> str:
    return quote(value, safe="")


class GitHubEnvClient:
    """Client for GitHub's environment and Actions variable APIs.

    The repository is looked up once when the client is created so that its
    numeric id is available to every later call. Creating the client fails
    with :class:`RepositoryLookupError` if that lookup is rejected.
    """

    API_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"
    MEDIA_TYPE = "application/vnd.github+json"
    PER_PAGE = 100

    def __init__(
        self,
        user_agent: str,
        token: str,
        repository_owner: str,
        repository_name: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client and resolve the repository.

        Args:
            user_agent: Value for the User-Agent header. GitHub asks for the
                username or app name making the requests.
            token: Access token with 'repo' scope
            repository_owner: The owner of the repository
            repository_name: The name of the repository
            timeout: Request timeout in seconds, None for no timeout
            session: Optional pre-configured HTTP session. Its own headers
                are left untouched, authentication is added per request.

        Raises:
            RepositoryLookupError: If GitHub rejects the repository lookup
            requests.RequestException: If the request could not be sent
        """
        logger.debug(
            f"Initializing GitHubEnvClient with user_agent = {user_agent}, "
            f"token = <token>, repository_owner = {repository_owner}, "
            f"repository_name = {repository_name}"
        )

        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self._headers = {
            "Authorization": f"Bearer {token}",
            "User-Agent": user_agent,
            "Accept": self.MEDIA_TYPE,
            "X-GitHub-Api-Version": self.API_VERSION,
        }

        try:
            self.repository = self._get_repository(repository_owner, repository_name)
        except Exception:
            self.close()
            raise

    def _get_repository(self, owner: str, name: str) -> RepositoryIdentity:
        """Fetch the repository details used by every other call."""
        path = f"/repos/{_segment(owner)}/{_segment(name)}"
        response = self._send("GET", path)

        if not self._is_success(response):
            raise RepositoryLookupError(
                f"Getting repository {owner}/{name}",
                response.status_code,
                response.text,
            )

        try:
            data = response.json()
            repository = RepositoryIdentity(
                owner=data["owner"]["login"],
                name=data["name"],
                id=int(data["id"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RepositoryLookupError(
                f"Decoding repository {owner}/{name} ({e!r})",
                response.status_code,
                response.text,
            ) from e
        logger.debug(f"Got repository details: {repository}")
        return repository

    @property
    def _repo_path(self) -> str:
        return f"/repos/{_segment(self.repository.owner)}/{_segment(self.repository.name)}"

    def _variables_path(self, environment_name: str) -> str:
        return (
            f"/repositories/{self.repository.id}"
            f"/environments/{_segment(environment_name)}/variables"
        )

    def _send(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> requests.Response:
        url = f"{self.API_URL}{path}"
        logger.debug(f"{method} {url}")
        return self.session.request(
            method,
            url,
            headers=self._headers,
            json=json,
            params=params,
            timeout=self.timeout,
        )

    @staticmethod
    def _is_success(response: requests.Response) -> bool:
        return 200 <= response.status_code < 300

    def _check(self, response: requests.Response, operation: str) -> None:
        if not self._is_success(response):
            raise OperationError(operation, response.status_code, response.text)

    def list_environments(self) -> list[str]:
        """List all environments for the repository.

        Follows pagination until GitHub returns a short page. See
        https://docs.github.com/en/rest/deployments/environments#list-environments

        Returns:
            Environment names in the order GitHub returns them
        """
        logger.debug(f"Listing environments for {self.repository.name}")

        names: list[str] = []
        page = 1
        while True:
            response = self._send(
                "GET",
                f"{self._repo_path}/environments",
                params={"per_page": self.PER_PAGE, "page": page},
            )
            self._check(
                response, f"Listing environments for repo {self.repository.name}"
            )

            environments = response.json().get("environments", [])
            names.extend(env["name"] for env in environments)

            if len(environments) < self.PER_PAGE:
                break
            page += 1

        logger.debug(f"Got environments: {names}")
        return names

    def upsert_environment(self, environment_name: str) -> None:
        """Create an environment, or leave it as is if it already exists.

        See https://docs.github.com/en/rest/deployments/environments#create-or-update-an-environment
        """
        logger.debug(
            f"Upserting environment {environment_name} for {self.repository.name}"
        )

        response = self._send(
            "PUT", f"{self._repo_path}/environments/{_segment(environment_name)}"
        )
        self._check(
            response,
            f"Upserting environment {environment_name} for repo {self.repository.name}",
        )

        logger.debug(f"Successfully upserted environment {environment_name}")

    def delete_environment(self, environment_name: str) -> None:
        """Delete an environment.

        See https://docs.github.com/en/rest/deployments/environments#delete-an-environment
        """
        logger.debug(
            f"Deleting environment {environment_name} for {self.repository.name}"
        )

        response = self._send(
            "DELETE", f"{self._repo_path}/environments/{_segment(environment_name)}"
        )
        self._check(
            response,
            f"Deleting environment {environment_name} for repo {self.repository.name}",
        )

        logger.debug(f"Successfully deleted environment {environment_name}")

    def get_environment_variable(
        self, environment_name: str, key: str
    ) -> Optional[str]:
        """Get the value of an environment variable.

        A 404 means the variable does not exist and is returned as ``None``;
        any other non-success status raises.

        See https://docs.github.com/en/rest/actions/variables#get-an-environment-variable

        Args:
            environment_name: Environment that owns the variable
            key: Variable name

        Returns:
            The variable's value, or None if it does not exist

        Raises:
            OperationError: If GitHub returns a non-success status other than 404
        """
        logger.debug(
            f"Getting environment variable (key: {key}) for environment {environment_name}"
        )

        response = self._send(
            "GET", f"{self._variables_path(environment_name)}/{_segment(key)}"
        )

        if response.status_code == 404:
            logger.debug(
                f"Environment variable (key: {key}) for environment {environment_name} not found"
            )
            return None

        self._check(
            response,
            f"Getting environment variable (key: {key}) for environment {environment_name}",
        )

        value = response.json()["value"]
        logger.debug(
            f"Successfully got environment variable (key: {key}) for environment "
            f"{environment_name}: {value!r}"
        )
        return value

    def create_environment_variable(
        self, environment_name: str, key: str, value: str
    ) -> None:
        """Create a variable in the given environment.

        See https://docs.github.com/en/rest/actions/variables#create-an-environment-variable
        """
        logger.debug(
            f"Creating environment variable (key: {key}, value: {value}) "
            f"for environment {environment_name}"
        )

        response = self._send(
            "POST",
            self._variables_path(environment_name),
            json={"name": key, "value": value},
        )
        self._check(
            response,
            f"Creating environment variable (key: {key}) for environment {environment_name}",
        )

        logger.debug(
            f"Successfully created environment variable (key: {key}) "
            f"for environment {environment_name}"
        )

    def update_environment_variable(
        self, environment_name: str, key: str, value: str
    ) -> None:
        """Update an existing variable in the given environment.

        The key is addressed by URL, only the value is sent in the body. See
        https://docs.github.com/en/rest/actions/variables#update-an-environment-variable
        """
        logger.debug(
            f"Updating environment variable (key: {key}, value: {value}) "
            f"for environment {environment_name}"
        )

        response = self._send(
            "PATCH",
            f"{self._variables_path(environment_name)}/{_segment(key)}",
            json={"value": value},
        )
        self._check(
            response,
            f"Updating environment variable (key: {key}) for environment {environment_name}",
        )

        logger.debug(
            f"Successfully updated environment variable (key: {key}) "
            f"for environment {environment_name}"
        )

    def upsert_environment_variable(
        self, environment_name: str, key: str, value: str
    ) -> VariableAction:
        """Create or update a variable depending on whether it exists.

        GitHub has no upsert for variables, so this issues a get followed by
        either a create or an update. The two calls are not atomic.

        Returns:
            Which of the two writes was performed
        """
        if self.get_environment_variable(environment_name, key) is None:
            self.create_environment_variable(environment_name, key, value)
            return VariableAction.CREATED

        self.update_environment_variable(environment_name, key, value)
        return VariableAction.UPDATED

    def delete_environment_variable(self, environment_name: str, key: str) -> None:
        """Delete a variable from the given environment.

        See https://docs.github.com/en/rest/actions/variables#delete-an-environment-variable
        """
        logger.debug(
            f"Deleting environment variable (key: {key}) for environment {environment_name}"
        )

        response = self._send(
            "DELETE", f"{self._variables_path(environment_name)}/{_segment(key)}"
        )
        self._check(
            response,
            f"Deleting environment variable (key: {key}) for environment {environment_name}",
        )

        logger.debug(
            f"Successfully deleted environment variable (key: {key}) "
            f"for environment {environment_name}"
        )

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> GitHubEnvClient:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
