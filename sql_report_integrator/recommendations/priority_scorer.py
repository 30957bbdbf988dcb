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

"""Weighted priority scoring and ordering of recommendations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from .base import (
    Level,
    NormalizedRecommendation,
    PrioritizedRecommendation,
    Severity,
    round_half_up,
)

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY_FACTORS = {"severity": 0.5, "impact": 0.3, "effort": 0.2}

SEVERITY_SCORES = {
    Severity.LOW: 25,
    Severity.MEDIUM: 50,
    Severity.HIGH: 75,
    Severity.CRITICAL: 100,
}
IMPACT_SCORES = {Level.LOW: 25, Level.MEDIUM: 50, Level.HIGH: 100}
# Inverted: cheaper fixes score higher.
EFFORT_SCORES = {Level.LOW: 100, Level.MEDIUM: 50, Level.HIGH: 25}


class PriorityScorer:
    """Computes a 0-100 priority per recommendation and orders the list.

    The priority is a weighted sum of the severity, impact and (inverted)
    effort scores. Ordering uses the severity bucket, not the continuous
    priority, and is stable within a bucket.
    """

    def __init__(self, priority_factors: Mapping[str, float] | None = None):
        factors = dict(DEFAULT_PRIORITY_FACTORS)
        if priority_factors:
            factors.update(
                {k: v for k, v in priority_factors.items() if k in DEFAULT_PRIORITY_FACTORS}
            )
        self.priority_factors = factors

    def calculate_priority(self, rec: NormalizedRecommendation) -> int:
        """Return the weighted priority of a single recommendation."""
        score = (
            SEVERITY_SCORES[rec.severity] * self.priority_factors["severity"]
            + IMPACT_SCORES[rec.impact] * self.priority_factors["impact"]
            + EFFORT_SCORES[rec.effort] * self.priority_factors["effort"]
        )
        return max(0, min(100, round_half_up(score)))

    def prioritize(
        self, recommendations: Iterable[NormalizedRecommendation]
    ) -> list[PrioritizedRecommendation]:
        """Score and order recommendations.

        Args:
            recommendations: Deduplicated recommendations

        Returns:
            Prioritized recommendations, most severe first
        """
        prioritized = [
            PrioritizedRecommendation(recommendation=rec, priority=self.calculate_priority(rec))
            for rec in recommendations
        ]
        prioritized.sort(key=self._sort_key)
        return prioritized

    @staticmethod
    def _sort_key(rec: PrioritizedRecommendation) -> int:
        return -rec.severity.rank
