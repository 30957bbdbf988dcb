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

"""Report assembly for multi-dimensional SQL analysis.

This module provides the main orchestration that turns per-dimension
analysis results into one integrated report: recommendations are
extracted, deduplicated, prioritized and phased, while the dimension
scores are aggregated into an overall score and risk level.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import IntegratorConfig
from ..context import AnalysisContext
from ..recommendations import (
    AnalysisResult,
    Deduplicator,
    ImplementationPlanner,
    PriorityScorer,
    RecommendationExtractor,
    parse_analysis_results,
)
from .risk_aggregator import RISK_CRITICAL, RISK_UNKNOWN, RiskAggregator

logger = logging.getLogger(__name__)

# Defaults applied to every successful dimension summary, on top of its data.
SUMMARY_LIST_FIELDS = (
    "issues",
    "recommendations",
    "optimizations",
    "vulnerabilities",
    "violations",
    "bestPractices",
)
SUMMARY_MAPPING_FIELDS = (
    "executionPlan",
    "metrics",
    "attackSurface",
    "securityMetrics",
    "complianceAssessment",
    "fixSummary",
    "standardsCompliance",
    "complexityMetrics",
    "qualityMetrics",
)

NO_VALID_RESULTS_ERROR = "no valid analysis results"
FAILED_DIMENSION_ERROR = "analysis failed"


def determine_status(score: float) -> str:
    """Map a dimension score to its summary status."""
    if score >= 90:
        return "excellent"
    elif score >= 75:
        return "good"
    elif score >= 50:
        return "warning"
    else:
        return "critical"


def _empty_plan() -> dict[str, list[Any]]:
    return {"immediate": [], "shortTerm": [], "longTerm": []}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ReportAssembler:
    """Builds the integrated report for one analysis request.

    The assembler is stateless apart from the configuration captured at
    construction, so one instance can serve concurrent requests.
    ``integrate_report`` never raises: failures come back as report data.
    """

    def __init__(self, config: IntegratorConfig | Mapping[str, Any] | None = None):
        """Initialize the assembler and its pipeline stages.

        Args:
            config: IntegratorConfig, or a raw mapping passed to
                ``IntegratorConfig.from_dict``
        """
        if isinstance(config, IntegratorConfig):
            self.config = config
        else:
            self.config = IntegratorConfig.from_dict(config)

        self.extractor = RecommendationExtractor()
        self.deduplicator = Deduplicator(
            similarity_threshold=self.config.similarity_threshold,
            fuzzy=self.config.fuzzy_dedup,
        )
        self.scorer = PriorityScorer(self.config.priority_factors)
        self.planner = ImplementationPlanner()
        self.risk_aggregator = RiskAggregator(self.config.weights)

        logger.debug(f"ReportAssembler configured with {self.config.to_dict()}")

    def integrate_report(
        self,
        source: AnalysisContext | Mapping[str, Any] | None,
        database_type: str | None = None,
    ) -> dict[str, Any]:
        """Integrate dimension results into a single report.

        Args:
            source: AnalysisContext, or a bare mapping of dimension name to
                analysis result
            database_type: Database type for bare mappings (ignored for contexts)

        Returns:
            Integrated report dictionary; an empty report when no dimension
            produced usable data, an error report if anything failed
        """
        context: AnalysisContext | None = None
        try:
            context = self._resolve_context(source, database_type)
            results = parse_analysis_results(context.get_analysis_results())

            if not self.has_valid_results(results):
                logger.warning("No valid analysis results to integrate")
                return self.create_empty_report(context)

            recommendations = self.extractor.extract(results)
            deduplicated = self.deduplicator.deduplicate(recommendations)
            prioritized = self.scorer.prioritize(deduplicated)
            plan = self.planner.plan(prioritized)

            assessment = self.risk_aggregator.assess(results)

            report = {
                "overallScore": assessment.overall_score,
                "riskLevel": assessment.risk_level,
                "securityVeto": assessment.security_veto,
                "summary": self.build_summary(results),
                "recommendations": [rec.to_dict() for rec in prioritized],
                "implementationPlan": plan.to_dict(),
                "metadata": {
                    "requestId": context.request_id,
                    "timestamp": _timestamp(),
                    "databaseType": context.database_type,
                    "sqlComplexity": context.complexity,
                    "analysisDuration": context.metrics["total_duration"],
                    "llmCalls": context.metrics["llm_calls"],
                    "enabledDimensions": dict(context.options),
                    "dimensionsUsed": [d for d, r in results.items() if r.is_usable],
                    "dimensionsFailed": [d for d, r in results.items() if not r.is_usable],
                    "lowestScore": assessment.lowest_score,
                    "scoreStatistics": assessment.metadata["score_statistics"],
                    "dimensionScores": dict(assessment.dimensional_scores),
                    "weightedContributions": dict(assessment.weighted_contributions),
                    "weightedDimensions": assessment.metadata["dimensions_used"],
                },
            }

            logger.info(
                f"Integrated report {context.request_id}: {len(recommendations)} "
                f"recommendations, {len(prioritized)} after deduplication, "
                f"risk level {assessment.risk_level}"
            )

            context.integrated_report = report
            return report
        except Exception as e:
            logger.exception(f"Report integration failed: {e}")
            return self.create_error_report(context, e)

    def _resolve_context(
        self, source: AnalysisContext | Mapping[str, Any] | None, database_type: str | None
    ) -> AnalysisContext:
        if isinstance(source, AnalysisContext):
            return source
        if isinstance(source, Mapping):
            return AnalysisContext.from_results(source, database_type=database_type)
        if source is not None:
            logger.warning(f"Unsupported analysis results type: {type(source).__name__}")
        return AnalysisContext.from_results({}, database_type=database_type)

    @staticmethod
    def has_valid_results(results: Mapping[str, AnalysisResult]) -> bool:
        """True when at least one dimension succeeded with data."""
        return any(result.is_usable for result in results.values())

    def build_summary(self, results: Mapping[str, AnalysisResult]) -> dict[str, Any]:
        """Build the per-dimension summary.

        Every dimension present in the input appears in the summary; failed
        dimensions get a fixed placeholder.

        Args:
            results: Parsed analysis results

        Returns:
            Dictionary mapping dimension names to their summaries
        """
        summary: dict[str, Any] = {}

        for dimension, result in results.items():
            if not result.is_usable or result.data is None:
                summary[dimension] = self.create_failed_dimension_summary()
                continue

            dimension_summary = copy.deepcopy(dict(result.data))
            dimension_summary["score"] = result.score
            dimension_summary["status"] = determine_status(result.score)

            for name in SUMMARY_LIST_FIELDS:
                if not dimension_summary.get(name):
                    dimension_summary[name] = []
            for name in SUMMARY_MAPPING_FIELDS:
                if not dimension_summary.get(name):
                    dimension_summary[name] = {}
            dimension_summary["threatLevel"] = result.data.get("threatLevel")
            if not dimension_summary.get("fixed_sql"):
                dimension_summary["fixed_sql"] = ""

            summary[dimension] = dimension_summary

        return summary

    @staticmethod
    def create_failed_dimension_summary() -> dict[str, Any]:
        return {
            "score": 0,
            "status": "failed",
            "issues": 0,
            "recommendations": 0,
            "confidence": 0,
            "error": FAILED_DIMENSION_ERROR,
        }

    def create_empty_report(self, context: AnalysisContext | None) -> dict[str, Any]:
        """Report returned when no dimension produced usable data."""
        return self._base_report(
            context, risk_level=RISK_UNKNOWN, error=NO_VALID_RESULTS_ERROR
        )

    def create_error_report(
        self, context: AnalysisContext | None, error: Exception
    ) -> dict[str, Any]:
        """Report returned when integration failed unexpectedly."""
        return self._base_report(context, risk_level=RISK_CRITICAL, error=str(error))

    def _base_report(
        self, context: AnalysisContext | None, risk_level: str, error: str
    ) -> dict[str, Any]:
        return {
            "overallScore": 0,
            "riskLevel": risk_level,
            "securityVeto": False,
            "summary": {},
            "recommendations": [],
            "implementationPlan": _empty_plan(),
            "metadata": {
                "requestId": context.request_id if context else None,
                "timestamp": _timestamp(),
                "databaseType": context.database_type if context else None,
                "error": error,
            },
        }

    def save_report(self, report: dict[str, Any], output_file: str) -> str:
        """Save an integrated report as JSON.

        Args:
            report: Report returned by ``integrate_report``
            output_file: Output file path (relative or absolute)

        Returns:
            Path where the report was saved
        """
        output_path = Path(output_file)

        if output_path.parent != Path("."):
            output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Integrated report saved to {output_path}")
        return str(output_path)
