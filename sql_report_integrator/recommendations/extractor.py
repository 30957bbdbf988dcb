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

"""Recommendation extraction from per-dimension analysis results."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .base import (
    AnalysisResult,
    Level,
    NormalizedRecommendation,
    Recommendation,
    Severity,
    parse_analysis_results,
)

logger = logging.getLogger(__name__)


def infer_severity(impact: Level, effort: Level) -> Severity:
    """Infer a severity for a recommendation that did not declare one.

    Cheap high-impact fixes escalate to ``high``; expensive low-impact ones
    drop to ``low``. Everything else is ``medium``.
    """
    if impact is Level.HIGH and effort in (Level.LOW, Level.MEDIUM):
        return Severity.HIGH
    if impact is Level.LOW and effort is Level.HIGH:
        return Severity.LOW
    return Severity.MEDIUM


class RecommendationExtractor:
    """Flattens per-dimension recommendation arrays into one ordered list.

    Iteration order is dimension order, then each dimension's array order.
    Dimensions without a successful result or without data are skipped.
    """

    def extract(
        self, analysis_results: Mapping[str, AnalysisResult | Mapping[str, Any]]
    ) -> list[NormalizedRecommendation]:
        """Extract every recommendation from the usable dimensions.

        Args:
            analysis_results: Mapping of dimension name to analysis result

        Returns:
            List of normalized recommendations, one per raw recommendation
        """
        results = parse_analysis_results(analysis_results)
        recommendations: list[NormalizedRecommendation] = []

        for dimension, result in results.items():
            if not result.is_usable:
                logger.debug(f"Skipping dimension without usable result: {dimension}")
                continue

            for index, raw in enumerate(result.raw_recommendations()):
                if not isinstance(raw, Mapping):
                    logger.debug(f"Skipping malformed recommendation {dimension}[{index}]")
                    continue
                recommendations.append(
                    self._normalize(dimension, index, Recommendation.from_dict(raw))
                )

        logger.debug(f"Extracted {len(recommendations)} recommendations")
        return recommendations

    def _normalize(
        self, dimension: str, index: int, rec: Recommendation
    ) -> NormalizedRecommendation:
        severity = rec.severity or infer_severity(rec.impact, rec.effort)
        return NormalizedRecommendation(
            id=f"{dimension}_rec_{index}",
            type=dimension,
            title=rec.title,
            description=rec.description,
            impact=rec.impact,
            effort=rec.effort,
            category=rec.category,
            severity=severity,
            sources=(dimension,),
            original_index=index,
        )
