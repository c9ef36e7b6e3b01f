"""Tests for the GitHub Actions entry point."""

import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from main import args_from_env, export_token, main_with_env_parsing


class TestArgsFromEnv:
    """Test cases for translating action inputs into CLI arguments."""

    def test_all_inputs(self) -> None:
        """Test that every supported input maps to its option."""
        args = args_from_env(
            {
                "INPUT_REPOSITORY": "octo-org/octo-repo",
                "INPUT_ENVIRONMENT": "staging",
                "INPUT_CONFIG_PATH": "envs.yaml",
                "INPUT_TOKEN": "ghp_test",
                "INPUT_USERNAME": "octocat",
                "INPUT_TIMEOUT": "60",
                "INPUT_DRY_RUN": "true",
                "INPUT_VERBOSE": "TRUE",
            }
        )

        assert args == [
            "octo-org/octo-repo",
            "--environment", "staging",
            "--config-path", "envs.yaml",
            "--username", "octocat",
            "--timeout", "60",
            "--dry-run",
            "--verbose",
        ]

    def test_token_is_never_an_argument(self) -> None:
        """Test that the token input stays out of the argument list."""
        args = args_from_env(
            {"INPUT_REPOSITORY": "octo-org/octo-repo", "INPUT_TOKEN": "ghp_secret"}
        )
        assert "ghp_secret" not in args
        assert "--token" not in args

    def test_repository_falls_back_to_workflow_repository(self) -> None:
        """Test that the workflow's own repository is the default target."""
        args = args_from_env({"GITHUB_REPOSITORY": "octo-org/octo-repo"})
        assert args == ["octo-org/octo-repo"]

    def test_command_line_repository_wins(self) -> None:
        """Test that a repository on the command line is not duplicated."""
        args = args_from_env(
            {"GITHUB_REPOSITORY": "octo-org/workflow-repo"},
            ["-c", "envs.toml", "octo-org/octo-repo", "--dry-run"],
        )
        assert args == []

    def test_option_values_are_not_mistaken_for_repository(self) -> None:
        """Test that values of options such as --config-path are skipped."""
        args = args_from_env(
            {"GITHUB_REPOSITORY": "octo-org/octo-repo"},
            ["-t", "ghp_test", "--config-path", "envs.toml", "--dry-run"],
        )
        assert args == ["octo-org/octo-repo"]

    def test_empty_inputs_are_ignored(self) -> None:
        """Test that blank inputs and false flags add nothing."""
        args = args_from_env(
            {
                "INPUT_REPOSITORY": "octo-org/octo-repo",
                "INPUT_ENVIRONMENT": "",
                "INPUT_USERNAME": "  ",
                "INPUT_DRY_RUN": "false",
            }
        )
        assert args == ["octo-org/octo-repo"]


class TestExportToken:
    """Test cases for handing the token over through the environment."""

    def test_token_input_sets_github_token(self) -> None:
        """Test that INPUT_TOKEN overrides GITHUB_TOKEN."""
        environ = {"INPUT_TOKEN": "ghp_input", "GITHUB_TOKEN": "ghp_workflow"}
        export_token(environ)
        assert environ["GITHUB_TOKEN"] == "ghp_input"

    def test_blank_token_input_keeps_github_token(self) -> None:
        """Test that an empty input leaves the existing token alone."""
        environ = {"INPUT_TOKEN": "", "GITHUB_TOKEN": "ghp_workflow"}
        export_token(environ)
        assert environ["GITHUB_TOKEN"] == "ghp_workflow"


@patch("main.main")
def test_main_with_env_parsing(mock_main: Mock) -> None:
    """Test that action inputs are appended and the token is exported."""
    with patch.dict(
        "os.environ",
        {"INPUT_REPOSITORY": "octo-org/octo-repo", "INPUT_TOKEN": "ghp_test"},
        clear=True,
    ), patch("sys.argv", ["main.py"]):
        main_with_env_parsing()
        assert os.environ["GITHUB_TOKEN"] == "ghp_test"

    mock_main.assert_called_once_with(["octo-org/octo-repo"])


@patch("gh_env_sync.cli.EnvironmentSync")
@patch("gh_env_sync.cli.GitHubEnvClient")
def test_main_with_repository_on_command_line_inside_workflow(
    mock_client_class: Mock, mock_sync_class: Mock, toml_config_file: Path
) -> None:
    """Test running with an explicit repository while GITHUB_REPOSITORY is set."""
    with patch.dict(
        "os.environ", {"GITHUB_REPOSITORY": "octo-org/workflow-repo"}, clear=True
    ), patch(
        "sys.argv",
        ["main.py", "octo-org/octo-repo", "-t", "x", "-c", str(toml_config_file), "--dry-run"],
    ):
        with pytest.raises(SystemExit) as exc_info:
            main_with_env_parsing()

    assert exc_info.value.code == 0
    mock_client_class.assert_called_once_with(
        "octo-org", "x", "octo-org", "octo-repo", timeout=None
    )
    assert mock_sync_class.return_value.sync.call_args[1]["dry_run"] is True
