# MIT License
#
# Copyright (c) 2024 SQL Report Integrator Contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Tests for the CLI module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sql_report_integrator.cli import (
    _get_risk_color,
    _get_severity_color,
    _get_status_color,
    _load_analysis_results,
    cli,
)
from sql_report_integrator.exceptions import MalformedResultError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def results_file(tmp_path: Path, sample_analysis_results: dict[str, Any]) -> Path:
    path = tmp_path / "results.json"
    path.write_text(json.dumps(sample_analysis_results), encoding="utf-8")
    return path


class TestCLIUtils:
    """Test utility functions in CLI module."""

    def test_load_bare_mapping(self, results_file: Path) -> None:
        results = _load_analysis_results(str(results_file))
        assert list(results) == ["performance", "security", "standards"]

    def test_load_wrapped_document(
        self, tmp_path: Path, index_scenario_results: dict[str, Any]
    ) -> None:
        path = tmp_path / "wrapped.json"
        path.write_text(
            json.dumps({"requestId": "abc", "analysisResults": index_scenario_results}),
            encoding="utf-8",
        )

        results = _load_analysis_results(str(path))

        assert list(results) == ["performance", "security"]

    def test_load_rejects_array(self, tmp_path: Path) -> None:
        path = tmp_path / "results.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(MalformedResultError) as exc_info:
            _load_analysis_results(str(path))

        assert exc_info.value.suggestions

    def test_load_rejects_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "results.json"
        path.write_text("{oops", encoding="utf-8")

        with pytest.raises(MalformedResultError):
            _load_analysis_results(str(path))

    def test_colors(self) -> None:
        assert _get_risk_color("critical") == "bright_red"
        assert _get_risk_color("unknown") == "white"
        assert _get_status_color("failed") == "bright_red"
        assert _get_severity_color("HIGH") == "red"


class TestCLICommands:
    """Test CLI commands."""

    def test_integrate_json(self, runner: CliRunner, results_file: Path) -> None:
        result = runner.invoke(cli, ["integrate", str(results_file), "--json"])

        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["overallScore"] == 68
        assert report["riskLevel"] == "medium"
        assert len(report["recommendations"]) == 4

    def test_integrate_display(self, runner: CliRunner, results_file: Path) -> None:
        result = runner.invoke(cli, ["integrate", str(results_file)])

        assert result.exit_code == 0
        assert "Integrated Report" in result.output
        assert "MEDIUM" in result.output
        assert "Implementation Plan" in result.output
        assert "Use parameterized queries" in result.output

    def test_integrate_verbose_shows_descriptions(
        self, runner: CliRunner, results_file: Path
    ) -> None:
        result = runner.invoke(cli, ["--verbose", "integrate", str(results_file)])

        assert result.exit_code == 0
        assert "bound parameters" in result.output

    def test_integrate_database_type_and_sql(
        self, runner: CliRunner, results_file: Path, tmp_path: Path
    ) -> None:
        sql_file = tmp_path / "query.sql"
        sql_file.write_text(
            "SELECT * FROM orders o JOIN users u ON u.id = o.user_id", encoding="utf-8"
        )

        result = runner.invoke(
            cli,
            [
                "integrate",
                str(results_file),
                "--database-type",
                "postgresql",
                "--sql-file",
                str(sql_file),
                "--json",
            ],
        )

        assert result.exit_code == 0
        metadata = json.loads(result.output)["metadata"]
        assert metadata["databaseType"] == "postgresql"
        assert metadata["sqlComplexity"] == "simple"

    def test_integrate_with_config(
        self, runner: CliRunner, results_file: Path, tmp_path: Path
    ) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"weights": {"performance": 0, "security": 1, "standards": 0}}),
            encoding="utf-8",
        )

        result = runner.invoke(
            cli, ["integrate", str(results_file), "--config", str(config_file), "--json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["overallScore"] == 55

    def test_fuzzy_dedup_keeps_config_file_settings(
        self, runner: CliRunner, results_file: Path, tmp_path: Path
    ) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"weights": {"performance": 0, "security": 1, "standards": 0}}),
            encoding="utf-8",
        )

        result = runner.invoke(
            cli,
            [
                "integrate",
                str(results_file),
                "--config",
                str(config_file),
                "--fuzzy-dedup",
                "--json",
            ],
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["overallScore"] == 55

    def test_integrate_fuzzy_dedup(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "results.json"
        path.write_text(
            json.dumps(
                {
                    "performance": {
                        "success": True,
                        "data": {
                            "score": 80,
                            "recommendations": [{"title": "Add index orders user_id"}],
                        },
                    },
                    "standards": {
                        "success": True,
                        "data": {
                            "score": 80,
                            "recommendations": [{"title": "Add index orders user_id now"}],
                        },
                    },
                }
            ),
            encoding="utf-8",
        )

        exact = runner.invoke(cli, ["integrate", str(path), "--json"])
        fuzzy = runner.invoke(cli, ["integrate", str(path), "--fuzzy-dedup", "--json"])

        assert len(json.loads(exact.output)["recommendations"]) == 2
        assert len(json.loads(fuzzy.output)["recommendations"]) == 1

    def test_integrate_output_file(
        self, runner: CliRunner, results_file: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "out" / "report.json"

        result = runner.invoke(cli, ["integrate", str(results_file), "--output", str(output)])

        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["riskLevel"] == "medium"

    def test_integrate_empty_results(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "results.json"
        path.write_text("{}", encoding="utf-8")

        result = runner.invoke(cli, ["integrate", str(path)])

        assert result.exit_code == 0
        assert "UNKNOWN" in result.output

    def test_integrate_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["integrate", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_integrate_bad_config(
        self, runner: CliRunner, results_file: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli, ["integrate", str(results_file), "--config", str(tmp_path / "nope.json")]
        )
        assert result.exit_code == 1

    def test_signature(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["signature", "Avoid SELECT *"])

        assert result.exit_code == 0
        assert result.output.strip() == "avoid|select"

    def test_signature_with_description(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["signature", "Add index", "for the orders table"])

        assert result.exit_code == 0
        assert result.output.strip() == "add|index|orders|table"
