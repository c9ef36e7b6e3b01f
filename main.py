"""Main entry point for gh-env-sync when run as a GitHub Action.

Action inputs arrive as ``INPUT_*`` environment variables; they are turned
into command-line arguments before handing over to the CLI. The token is
passed on through ``GITHUB_TOKEN`` so it never shows up in the process list.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, MutableMapping, Sequence

from gh_env_sync.cli import main

_VALUE_INPUTS = {
    "INPUT_ENVIRONMENT": "--environment",
    "INPUT_CONFIG_PATH": "--config-path",
    "INPUT_USERNAME": "--username",
    "INPUT_TIMEOUT": "--timeout",
}

_FLAG_INPUTS = {
    "INPUT_DRY_RUN": "--dry-run",
    "INPUT_VERBOSE": "--verbose",
}

# Options of the CLI that consume the following argument as their value.
_OPTIONS_WITH_VALUE = {
    "-e", "--environment",
    "-c", "--config-path",
    "-t", "--token",
    "-u", "--username",
    "--timeout",
}


def _has_positional(argv: Sequence[str]) -> bool:
    """Return True if argv already names a repository."""
    skip_next = False
    for arg in argv:
        if skip_next:
            skip_next = False
        elif arg == "--":
            return True
        elif arg.startswith("-"):
            skip_next = arg in _OPTIONS_WITH_VALUE
        else:
            return True
    return False


def args_from_env(
    environ: Mapping[str, str], argv: Sequence[str] = ()
) -> list[str]:
    """Build CLI arguments from GitHub Actions inputs.

    The repository is only taken from the environment when ``argv`` does not
    already give one, since GITHUB_REPOSITORY is always set inside a workflow.

    Args:
        environ: Environment variables, usually ``os.environ``
        argv: Arguments already present on the command line

    Returns:
        Argument list to append to ``argv``
    """
    args: list[str] = []

    if not _has_positional(argv):
        repository = environ.get("INPUT_REPOSITORY") or environ.get(
            "GITHUB_REPOSITORY"
        )
        if repository:
            args.append(repository)

    for name, option in _VALUE_INPUTS.items():
        value = environ.get(name, "").strip()
        if value:
            args.extend([option, value])

    for name, flag in _FLAG_INPUTS.items():
        if environ.get(name, "false").strip().lower() == "true":
            args.append(flag)

    return args


def export_token(environ: MutableMapping[str, str]) -> None:
    """Expose the ``token`` input as GITHUB_TOKEN for the CLI to pick up."""
    token = environ.get("INPUT_TOKEN", "").strip()
    if token:
        environ["GITHUB_TOKEN"] = token


def main_with_env_parsing() -> None:
    """Main entry point that handles GitHub Actions environment variables."""
    export_token(os.environ)
    argv = sys.argv[1:]
    main(argv + args_from_env(os.environ, argv))


if __name__ == "__main__":
    main_with_env_parsing()
