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

"""Implementation plan generation.

Splits the ordered recommendations into immediate, short-term and long-term
phases. Every recommendation lands in exactly one phase; the first matching
rule wins and phases are never rebalanced.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .base import ImplementationPlan, Level, PrioritizedRecommendation, Severity

logger = logging.getLogger(__name__)

SECURITY_CATEGORY = "security"


class ImplementationPlanner:
    """Partitions prioritized recommendations into implementation phases."""

    def plan(self, recommendations: Iterable[PrioritizedRecommendation]) -> ImplementationPlan:
        """Build the phased implementation plan.

        Args:
            recommendations: Prioritized recommendations in final order

        Returns:
            ImplementationPlan preserving the input order inside each phase
        """
        plan = ImplementationPlan()

        for rec in recommendations:
            if self._is_immediate(rec):
                plan.immediate.append(rec)
            elif self._is_short_term(rec):
                plan.short_term.append(rec)
            else:
                plan.long_term.append(rec)

        logger.debug(
            f"Implementation plan: {len(plan.immediate)} immediate, "
            f"{len(plan.short_term)} short-term, {len(plan.long_term)} long-term"
        )
        return plan

    @staticmethod
    def _is_immediate(rec: PrioritizedRecommendation) -> bool:
        # High-severity security issues skip the impact/effort weighting.
        if rec.severity is Severity.CRITICAL:
            return True
        return rec.category == SECURITY_CATEGORY and rec.severity is Severity.HIGH

    @staticmethod
    def _is_short_term(rec: PrioritizedRecommendation) -> bool:
        if rec.impact is Level.HIGH and rec.effort in (Level.LOW, Level.MEDIUM):
            return True
        return rec.severity is Severity.HIGH
