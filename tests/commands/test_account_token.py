"""Tests for the account and token commands."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from metamint.cli import cli

ACCOUNT = "0x1111111111111111111111111111111111111111"


@pytest.mark.usefixtures("_isolated_project")
class TestAccount:
    def test_from_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "--account", ACCOUNT, "account"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"] == {"account": ACCOUNT}

    def test_from_env(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("METAMINT_ACCOUNT", ACCOUNT)
        result = cli_runner.invoke(cli, ["--json", "account"])
        assert json.loads(result.stdout)["data"]["account"] == ACCOUNT

    def test_none_configured(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("METAMINT_ACCOUNT", raising=False)
        result = cli_runner.invoke(cli, ["account"])
        assert result.exit_code == 0
        assert "None" in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestTokenInfo:
    def test_ledger_disabled(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "--account", ACCOUNT, "token", "info"])
        assert result.exit_code == 1
        assert '"code": "CONTRACT_UNAVAILABLE"' in result.output

    def test_group_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["token", "--examples"])
        assert result.exit_code == 0
        assert "token info" in result.output
