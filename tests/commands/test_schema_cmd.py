"""Tests for the schema command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from metamint.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestSchemaFields:
    def test_lists_default_fields(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "schema", "fields"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["count"] == 6
        assert [item["name"] for item in data["items"]][0] == "name"


@pytest.mark.usefixtures("_isolated_project")
class TestSchemaLoad:
    def test_replaces_and_caches(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        schema_file = tmp_path / "car.json"
        schema_file.write_text(
            json.dumps(
                {
                    "title": "Car Policy",
                    "type": "object",
                    "properties": {
                        "vin": {"type": "string", "fieldType": "text", "description": "VIN"},
                        "status": {"fieldType": "select", "options": ["Draft", "Published"]},
                    },
                }
            ),
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["--json", "schema", "load", str(schema_file)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["op"] == "publish"

        fields = cli_runner.invoke(cli, ["--json", "schema", "fields"])
        names = [item["name"] for item in json.loads(fields.stdout)["data"]["items"]]
        assert names == ["vin", "status"]

        saved = cli_runner.invoke(cli, ["--json", "save", "-s", "vin=WVW1"])
        assert saved.exit_code == 0

    def test_invalid_json(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{", encoding="utf-8")
        result = cli_runner.invoke(cli, ["schema", "load", str(bad)])
        assert result.exit_code == 2

    def test_invalid_shape(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "shape.json"
        bad.write_text(json.dumps({"properties": []}), encoding="utf-8")
        result = cli_runner.invoke(cli, ["--json", "schema", "load", str(bad)])
        assert result.exit_code == 1
        assert '"code": "INVALID_SCHEMA"' in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["schema", "load", str(tmp_path / "nope.json")])
        assert result.exit_code == 2
