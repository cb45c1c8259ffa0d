"""Test cases for the main CLI app."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from reve.cli import app


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestAppInitialization:
    """Test cases for app initialization."""

    def test_app_initialization(self) -> None:
        assert app.info.name == "reve"
        assert app.info.help is not None
        assert "importable Python modules" in app.info.help

    def test_help_output(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "build" in result.stdout
        assert "watch" in result.stdout

    def test_unknown_command(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["unknown-command"])
        assert result.exit_code == 2


class TestBuildCommand:
    """Test cases for the build command."""

    @patch("reve.cli.run_build")
    def test_build_passes_resources(
        self, mock_run: Mock, runner: CliRunner, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "build",
                "--base",
                str(tmp_path),
                "-r",
                "logo=logo.png",
                "-r",
                "a b=a.bin",
                "--compress",
            ],
        )

        assert result.exit_code == 0, result.output
        kwargs = mock_run.call_args[1]
        assert kwargs["base"] == tmp_path
        config = kwargs["config"]
        assert config.compression is True
        assert config.resources == {"logo": "logo.png", "a b": "a.bin"}

    @patch("reve.cli.run_build")
    def test_build_output_dir_option(
        self, mock_run: Mock, runner: CliRunner, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            app, ["build", "--base", str(tmp_path), "-o", "embedded"]
        )

        assert result.exit_code == 0, result.output
        assert mock_run.call_args[1]["config"].output_dir == "embedded"

    @patch("reve.cli.run_build")
    def test_malformed_resource_option(
        self, mock_run: Mock, runner: CliRunner, tmp_path: Path
    ) -> None:
        result = runner.invoke(app, ["build", "--base", str(tmp_path), "-r", "logo"])

        assert result.exit_code == 2
        mock_run.assert_not_called()

    def test_build_end_to_end(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "logo.png").write_bytes(b"png bytes")

        result = runner.invoke(
            app, ["build", "--base", str(tmp_path), "-r", "logo=logo.png"]
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "reve" / "source" / "logo.py").exists()
        assert (tmp_path / "reve" / "index.py").exists()

    def test_build_invalid_name_exits(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["build", "--base", str(tmp_path), "-r", "bad-name=x.bin"]
        )

        assert result.exit_code == 1
        assert "bad-name" in result.stdout


class TestWatchCommand:
    """Test cases for the watch command."""

    @patch("reve.cli.run_watch")
    def test_watch_calls_run_watch(
        self, mock_run: Mock, runner: CliRunner, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            app, ["watch", "--base", str(tmp_path), "-r", "logo=logo.png"]
        )

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        assert mock_run.call_args[1]["config"].resources == {"logo": "logo.png"}
