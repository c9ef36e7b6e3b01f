"""Exception types raised by gh-env-sync.

Remote failures keep the HTTP status code and response body as attributes so
callers can tell an authorization problem from a validation error without
parsing the message.
"""

from __future__ import annotations


class GhEnvSyncError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(GhEnvSyncError, ValueError):
    """Invalid user input detected before any request is made."""


class GitHubAPIError(GhEnvSyncError):
    """A GitHub API call returned a non-success status."""

    def __init__(self, operation: str, status_code: int, body: str):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"{operation} failed with HTTP {status_code}: {body}")


class RepositoryLookupError(GitHubAPIError):
    """The repository could not be resolved when creating the client."""


class OperationError(GitHubAPIError):
    """An environment or variable call was rejected by GitHub."""
