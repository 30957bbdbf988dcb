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

"""Risk aggregation across analysis dimensions.

This module combines the per-dimension scores into a weighted overall score
and derives the risk level. It reads the raw analysis results directly and
does not depend on the recommendation pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..recommendations.base import AnalysisResult, parse_analysis_results, round_half_up

logger = logging.getLogger(__name__)

SECURITY_DIMENSION = "security"

RISK_CRITICAL = "critical"
RISK_HIGH = "high"
RISK_MEDIUM = "medium"
RISK_LOW = "low"
RISK_UNKNOWN = "unknown"

RISK_LEVELS = (RISK_LOW, RISK_MEDIUM, RISK_HIGH, RISK_CRITICAL, RISK_UNKNOWN)


@dataclass
class RiskAssessment:
    """Overall metrics derived from the dimension scores."""

    overall_score: int
    lowest_score: float
    risk_level: str
    security_veto: bool
    dimensional_scores: dict[str, float] = field(default_factory=dict)
    weighted_contributions: dict[str, float] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


class RiskAggregator:
    """Computes the weighted overall score, lowest score and risk level.

    Dimensions without a configured weight still count toward the lowest
    score but not toward the overall score.
    """

    def __init__(self, weights: Mapping[str, float]):
        """Initialize the aggregator.

        Args:
            weights: Dimension name to weight; unknown dimensions weigh 0
        """
        self.weights = dict(weights)

    def assess(
        self, analysis_results: Mapping[str, AnalysisResult | Mapping[str, Any]]
    ) -> RiskAssessment:
        """Aggregate dimension scores into overall risk metrics.

        Args:
            analysis_results: Mapping of dimension name to analysis result

        Returns:
            RiskAssessment with overall score, lowest score and risk level
        """
        results = parse_analysis_results(analysis_results)

        scores: dict[str, float] = {}
        security_veto = False
        for dimension, result in results.items():
            if not result.is_usable:
                continue
            scores[dimension] = result.score
            if dimension == SECURITY_DIMENSION and result.veto:
                security_veto = True

        weighted = {dim: score for dim, score in scores.items() if self.weights.get(dim, 0) > 0}
        total_weight = sum(self.weights[dim] for dim in weighted)
        contributions = {dim: score * self.weights[dim] for dim, score in weighted.items()}

        if total_weight > 0:
            overall_score = round_half_up(sum(contributions.values()) / total_weight)
        else:
            overall_score = 0
        overall_score = max(0, min(100, overall_score))

        # Matches a starting value of 100 when no dimension succeeded.
        lowest_score = min(scores.values()) if scores else 100.0

        risk_level = self.determine_risk_level(overall_score, lowest_score, security_veto)

        logger.info(
            f"Overall score {overall_score} (lowest {lowest_score:g}), "
            f"risk level {risk_level}, security veto {security_veto}"
        )

        return RiskAssessment(
            overall_score=overall_score,
            lowest_score=lowest_score,
            risk_level=risk_level,
            security_veto=security_veto,
            dimensional_scores=scores,
            weighted_contributions=contributions,
            metadata={
                "dimensions_used": list(weighted),
                "dimensions_unweighted": [dim for dim in scores if dim not in weighted],
                "score_statistics": self._calculate_score_statistics(scores),
            },
        )

    @staticmethod
    def determine_risk_level(
        overall_score: float, lowest_score: float, security_veto: bool
    ) -> str:
        """Map scores to a risk level; a security veto always wins."""
        if security_veto:
            return RISK_CRITICAL
        if overall_score < 50 or lowest_score < 30:
            return RISK_HIGH
        if overall_score < 75 or lowest_score < 60:
            return RISK_MEDIUM
        return RISK_LOW

    def _calculate_score_statistics(self, scores: dict[str, float]) -> dict[str, float]:
        """Calculate basic statistics for the scores."""
        if not scores:
            return {}

        score_values = list(scores.values())
        return {
            "mean": float(np.mean(score_values, dtype=np.float64)),
            "median": float(np.median(score_values)),
            "std": float(np.std(score_values, dtype=np.float64)),
            "min": float(np.min(score_values)),
            "max": float(np.max(score_values)),
        }
