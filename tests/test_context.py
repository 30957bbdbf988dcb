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
Tests for the per-request analysis context.
"""

from __future__ import annotations

import uuid

import pytest

from sql_report_integrator.context import (
    DIMENSIONS,
    AnalysisContext,
    extract_sql_metadata,
    normalize_sql,
)
from sql_report_integrator.exceptions import UnknownDimensionError


class TestSqlMetadata:
    """Tests for SQL normalization and metadata extraction."""

    def test_normalize_sql(self) -> None:
        assert normalize_sql("  select *\n  from   users ;  ") == "SELECT * FROM USERS"

    @pytest.mark.parametrize("sql", [None, "", 42])
    def test_normalize_non_sql(self, sql: object) -> None:
        assert normalize_sql(sql) == ""  # type: ignore[arg-type]

    def test_simple_query(self) -> None:
        metadata = extract_sql_metadata("SELECT id FROM users WHERE id = 1")

        assert metadata["tables"] == ["USERS"]
        assert metadata["operations"] == ["SELECT"]
        assert metadata["has_join"] is False
        assert metadata["complexity"] == "simple"

    def test_medium_query(self) -> None:
        metadata = extract_sql_metadata(
            "SELECT u.id, COUNT(*) FROM users u JOIN orders o ON o.user_id = u.id GROUP BY u.id"
        )

        assert metadata["tables"] == ["USERS", "ORDERS"]
        assert metadata["has_join"] is True
        assert metadata["has_aggregate"] is True
        assert metadata["complexity"] == "medium"

    def test_complex_query(self) -> None:
        sql = """
            SELECT u.id, SUM(o.total) OVER (PARTITION BY u.id)
            FROM users u
            JOIN orders o ON o.user_id = u.id
            JOIN items i ON i.order_id = o.id
            WHERE u.id IN (SELECT user_id FROM banned)
        """
        metadata = extract_sql_metadata(sql)

        assert metadata["has_subquery"] is True
        assert metadata["has_window"] is True
        assert len(metadata["tables"]) > 2
        assert metadata["complexity"] == "complex"

    def test_transaction_detection(self) -> None:
        metadata = extract_sql_metadata("BEGIN; UPDATE accounts SET balance = 0; COMMIT;")
        assert metadata["has_transaction"] is True
        assert metadata["operations"] == ["UPDATE"]


class TestAnalysisContext:
    """Tests for AnalysisContext."""

    def test_defaults(self) -> None:
        context = AnalysisContext(sql="select 1", database_type="mysql")

        assert context.normalized_sql == "SELECT 1"
        assert context.database_type == "mysql"
        assert uuid.UUID(context.request_id).version == 4
        assert context.enabled_dimensions() == list(DIMENSIONS)
        assert context.options["learning"] is False
        assert context.get_analysis_results() == dict.fromkeys(DIMENSIONS)
        assert context.integrated_report is None

    def test_options_disable_dimension(self) -> None:
        context = AnalysisContext(options={"standards": False})
        assert context.enabled_dimensions() == ["performance", "security"]

    def test_unique_request_ids(self) -> None:
        assert AnalysisContext().request_id != AnalysisContext().request_id

    def test_set_analysis_result(self) -> None:
        context = AnalysisContext()
        result = {"success": True, "data": {"score": 80}}

        context.set_analysis_result("security", result)

        assert context.get_analysis_results()["security"] == result

    def test_set_unknown_dimension(self) -> None:
        context = AnalysisContext()

        with pytest.raises(UnknownDimensionError) as exc_info:
            context.set_analysis_result("learning", {"success": True})

        assert exc_info.value.dimension == "learning"

    def test_from_results_keeps_extra_dimensions(self) -> None:
        context = AnalysisContext.from_results(
            {"learning": {"success": True, "data": {}}}, database_type="sqlite"
        )

        assert list(context.get_analysis_results()) == ["learning"]
        assert context.database_type == "sqlite"
        assert context.complexity == "simple"

    def test_record_stage(self) -> None:
        context = AnalysisContext()

        context.record_stage("performance", 0.5, llm_calls=1)
        context.record_stage("security", 0.25, llm_calls=2)

        assert context.metrics["stages"] == {"performance": 0.5, "security": 0.25}
        assert context.metrics["total_duration"] == 0.75
        assert context.metrics["llm_calls"] == 3

    def test_disabled_dimension_without_result_is_omitted(self) -> None:
        context = AnalysisContext(options={"security": False, "standards": False})
        context.set_analysis_result("standards", {"success": True, "data": {"score": 70}})

        results = context.get_analysis_results()

        assert list(results) == ["performance", "standards"]
        assert results["performance"] is None
