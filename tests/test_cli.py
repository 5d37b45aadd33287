"""Tests for the root metamint CLI."""

from click.testing import CliRunner

from metamint import __version__
from metamint.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "metamint" in result.output
    for name in ("save", "show", "get", "schema", "token", "account"):
        assert name in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/missing-metamint.toml", "--version"])
    assert result.exit_code == 0


def test_account_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--account", "0xabc", "--version"])
    assert result.exit_code == 0
