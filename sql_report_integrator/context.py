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

"""Per-request analysis context.

An AnalysisContext carries the SQL under analysis, the dimension results
collected from the analyzers, and the request metrics that end up in the
report metadata. A new context is created for every request.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .exceptions import UnknownDimensionError
from .recommendations.base import AnalysisResult

logger = logging.getLogger(__name__)

DIMENSIONS = ("performance", "security", "standards")

SQL_OPERATIONS = ["SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "ALTER", "DROP", "TRUNCATE"]

_TABLE_PATTERN = re.compile(
    r"FROM\s+([A-Z_][A-Z0-9_]*)|JOIN\s+([A-Z_][A-Z0-9_]*)|INTO\s+([A-Z_][A-Z0-9_]*)",
    re.IGNORECASE,
)
_JOIN_PATTERN = re.compile(r"\bJOIN\b", re.IGNORECASE)
_SUBQUERY_PATTERNS = [
    re.compile(r"\bSELECT\b.*\bFROM\b.*\bWHERE\b.*\bSELECT\b", re.IGNORECASE),
    re.compile(r"\bIN\s*\(", re.IGNORECASE),
    re.compile(r"\bEXISTS\s*\(", re.IGNORECASE),
]
_AGGREGATE_PATTERN = re.compile(r"\b(COUNT|SUM|AVG|MIN|MAX)\s*\(", re.IGNORECASE)
_WINDOW_PATTERN = re.compile(r"\bOVER\s*\(", re.IGNORECASE)
_TRANSACTION_PATTERN = re.compile(
    r"\b(BEGIN|COMMIT|ROLLBACK|START\s+TRANSACTION)\b", re.IGNORECASE
)


def normalize_sql(sql: str | None) -> str:
    """Collapse whitespace, drop a trailing semicolon and upper-case the SQL."""
    if not sql or not isinstance(sql, str):
        return ""
    collapsed = re.sub(r"\s+", " ", sql.strip())
    collapsed = re.sub(r"\s*;\s*$", "", collapsed)
    return collapsed.upper()


def extract_sql_metadata(sql: str | None) -> dict[str, Any]:
    """Extract lightweight structural metadata from a SQL statement.

    This is keyword matching only; it does not parse or validate the SQL.

    Args:
        sql: SQL statement text

    Returns:
        Dictionary with tables, operations, feature flags and complexity
    """
    normalized = normalize_sql(sql)

    tables: list[str] = []
    for match in _TABLE_PATTERN.finditer(normalized):
        table = next(group for group in match.groups() if group)
        if table not in tables:
            tables.append(table)

    operations = [op for op in SQL_OPERATIONS if op in normalized]

    metadata: dict[str, Any] = {
        "tables": tables,
        "operations": operations,
        "has_join": bool(_JOIN_PATTERN.search(normalized)),
        "has_subquery": any(p.search(normalized) for p in _SUBQUERY_PATTERNS),
        "has_aggregate": bool(_AGGREGATE_PATTERN.search(normalized)),
        "has_window": bool(_WINDOW_PATTERN.search(normalized)),
        "has_transaction": bool(_TRANSACTION_PATTERN.search(normalized)),
    }

    complexity_factors = [
        metadata["has_join"],
        metadata["has_subquery"],
        metadata["has_aggregate"],
        metadata["has_window"],
        len(tables) > 2,
        len(operations) > 1,
    ]
    complex_count = sum(1 for factor in complexity_factors if factor)
    if complex_count >= 4:
        metadata["complexity"] = "complex"
    elif complex_count >= 2:
        metadata["complexity"] = "medium"
    else:
        metadata["complexity"] = "simple"

    return metadata


class AnalysisContext:
    """Shared state for one report request."""

    def __init__(
        self,
        sql: str | None = None,
        database_type: str | None = None,
        options: Mapping[str, Any] | None = None,
        request_id: str | None = None,
    ):
        """Create a context for a single analysis request.

        Args:
            sql: SQL statement being analyzed (optional)
            database_type: Database dialect, e.g. "mysql" (optional)
            options: Enabled dimensions and extra request options
            request_id: Request identifier; a UUID4 is generated if omitted
        """
        self.sql = sql or ""
        self.normalized_sql = normalize_sql(sql)
        self.database_type = database_type
        self.options: dict[str, Any] = {
            "performance": True,
            "security": True,
            "standards": True,
            "learning": False,
        }
        if options:
            self.options.update(options)

        self.sql_metadata = extract_sql_metadata(sql)
        self.analysis_results: dict[str, AnalysisResult | Mapping[str, Any] | None] = dict.fromkeys(
            DIMENSIONS
        )
        self.integrated_report: dict[str, Any] | None = None

        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.request_id = request_id or str(uuid.uuid4())
        self.metrics: dict[str, Any] = {
            "total_duration": 0.0,
            "llm_calls": 0,
            "stages": {},
            "cache_hits": 0,
        }

    @classmethod
    def from_results(
        cls,
        analysis_results: Mapping[str, Any],
        database_type: str | None = None,
        request_id: str | None = None,
    ) -> AnalysisContext:
        """Wrap a bare results mapping in a context without SQL.

        Dimensions outside the standard set are kept as-is.
        """
        context = cls(database_type=database_type, request_id=request_id)
        context.analysis_results = dict(analysis_results)
        return context

    @property
    def complexity(self) -> str:
        return self.sql_metadata["complexity"]

    def set_analysis_result(
        self, dimension: str, result: AnalysisResult | Mapping[str, Any]
    ) -> None:
        """Store the result of one dimension analyzer.

        Raises:
            UnknownDimensionError: If the dimension is not a known one
        """
        if dimension not in DIMENSIONS:
            raise UnknownDimensionError(dimension, list(DIMENSIONS))
        self.analysis_results[dimension] = result

    def get_analysis_results(self) -> dict[str, Any]:
        """Return the results keyed by dimension.

        Enabled dimensions that never reported keep a ``None`` entry and
        are summarized as failed. Disabled dimensions without a result are
        left out.
        """
        return {
            dimension: result
            for dimension, result in self.analysis_results.items()
            if result is not None or self.options.get(dimension, True)
        }

    def record_stage(self, stage: str, duration: float, llm_calls: int = 0) -> None:
        """Record the duration of an upstream analysis stage."""
        self.metrics["stages"][stage] = duration
        self.metrics["total_duration"] += duration
        self.metrics["llm_calls"] += llm_calls
        logger.debug(f"Stage {stage} took {duration:.3f}s ({llm_calls} LLM calls)")

    def enabled_dimensions(self) -> list[str]:
        return [dim for dim in DIMENSIONS if self.options.get(dim)]
