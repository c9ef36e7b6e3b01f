"""Command-line interface for gh-env-sync.

This module provides the CLI arguments and entry point for syncing GitHub
environment variables from a configuration file.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import requests

from .config import DEFAULT_CONFIG_PATH, load_config, parse_repository
from .errors import GhEnvSyncError
from .github import GitHubEnvClient
from .sync import EnvironmentSync, select_environments


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration.

    Args:
        verbose: Enable debug logging if True
    """
    level = logging.DEBUG if verbose else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level, format=format_str, handlers=[logging.StreamHandler()]
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="gh-env-sync",
        description="Sync GitHub deployment environments and their variables from a configuration file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync every environment in github_environments.toml
  gh-env-sync octo-org/octo-repo --token "$GITHUB_TOKEN"

  # Sync only the staging environment from a YAML file
  gh-env-sync octo-org/octo-repo -e staging -c environments.yaml

  # Show what would change without writing anything
  gh-env-sync octo-org/octo-repo --dry-run
        """.strip(),
    )

    parser.add_argument(
        "repository",
        help="The repository to sync environment variables for, as an owner/repo pair, e.g. rust-lang/rust",
    )

    parser.add_argument(
        "-e",
        "--environment",
        help="The environment to sync variables for. If not set, all environments in the config file are synced",
    )

    parser.add_argument(
        "-c",
        "--config-path",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the TOML or YAML configuration file (default: {DEFAULT_CONFIG_PATH})",
    )

    parser.add_argument(
        "-t",
        "--token",
        default=os.getenv("GITHUB_TOKEN"),
        help="A 'repo' scoped GitHub access token (default: $GITHUB_TOKEN)",
    )

    parser.add_argument(
        "-u",
        "--username",
        help="The username for the User-Agent header of API requests (default: the repository owner)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: no timeout)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be created or updated without changing anything",
    )

    parser.add_argument(
        "--list-environments",
        action="store_true",
        help="List the repository's environments on GitHub and exit",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    return parser


def list_remote_environments(client: GitHubEnvClient) -> list[str]:
    """Log and return the environments that exist on GitHub."""
    logger = logging.getLogger(__name__)

    names = client.list_environments()
    repository = client.repository
    logger.info(
        f"{len(names)} environments in {repository.owner}/{repository.name}"
    )
    for name in names:
        logger.info(f"  {name}")
    return names


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI application."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.token:
        parser.error("a GitHub token is required (use --token or set GITHUB_TOKEN)")

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        repository = parse_repository(args.repository)
        user_agent = args.username or repository.owner

        if args.list_environments:
            with GitHubEnvClient(
                user_agent,
                args.token,
                repository.owner,
                repository.name,
                timeout=args.timeout,
            ) as client:
                list_remote_environments(client)
            sys.exit(0)

        config = load_config(args.config_path)

        # Reject an unknown --environment before the repository lookup request.
        select_environments(config, args.environment)

        with GitHubEnvClient(
            user_agent,
            args.token,
            repository.owner,
            repository.name,
            timeout=args.timeout,
        ) as client:
            result = EnvironmentSync(client).sync(
                config, environment=args.environment, dry_run=args.dry_run
            )

        logger.info(f"✓ Sync completed successfully: {result}")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Sync interrupted by user")
        sys.exit(130)
    except (GhEnvSyncError, requests.RequestException, OSError) as e:
        logger.error(f"✗ Sync failed: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        sys.exit(1)


if __name__ == "__main__":
    main()
