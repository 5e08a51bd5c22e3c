"""Tests for the propmap command group."""

from click.testing import CliRunner

from propmap.cli.main import cli


class TestCliGroup:
    """Top-level group behavior."""

    def test_help_lists_inspect(self) -> None:
        """--help shows the available commands."""
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "inspect" in result.output

    def test_version(self) -> None:
        """--version prints the program name and version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "propmap" in result.output
        assert "0.1.0" in result.output
