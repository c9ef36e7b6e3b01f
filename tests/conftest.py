"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest
import responses

from gh_env_sync.github import GitHubEnvClient

API_URL = "https://api.github.com"
REPO_URL = f"{API_URL}/repos/octo-org/octo-repo"
REPO_ID = 42
VARIABLES_URL = f"{API_URL}/repositories/{REPO_ID}/environments"


def variable_url(environment: str, key: str | None = None) -> str:
    """Return the variables endpoint for an environment, optionally for one key."""
    url = f"{VARIABLES_URL}/{environment}/variables"
    return f"{url}/{key}" if key else url


@pytest.fixture
def repository_payload() -> dict:
    """Return a trimmed GitHub repository payload."""
    return {
        "id": REPO_ID,
        "name": "octo-repo",
        "full_name": "octo-org/octo-repo",
        "owner": {"login": "octo-org", "id": 1},
    }


@pytest.fixture
def mocked_responses() -> Iterator[responses.RequestsMock]:
    """Activate responses for the duration of a test."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def client(
    mocked_responses: responses.RequestsMock, repository_payload: dict
) -> Iterator[GitHubEnvClient]:
    """Return a client whose repository lookup already happened.

    The recorded calls are reset so tests only see their own requests.
    """
    mocked_responses.add(responses.GET, REPO_URL, json=repository_payload, status=200)
    with GitHubEnvClient("octocat", "ghp_test_token", "octo-org", "octo-repo") as gh:
        mocked_responses.calls.reset()
        yield gh


@pytest.fixture
def toml_config_file(tmp_path: Path) -> Path:
    """Write a small two-environment TOML document."""
    config_file = tmp_path / "github_environments.toml"
    config_file.write_text(
        """
[prod]
A = "1"

[staging]
B = "2"
""".lstrip(),
        encoding="utf-8",
    )
    return config_file
