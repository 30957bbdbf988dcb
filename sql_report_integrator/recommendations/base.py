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

"""Common data structures for the recommendation pipeline.

This module defines the validated input shapes consumed from the external
dimension analyzers and the recommendation types that flow between the
extraction, deduplication, scoring and planning stages.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "untitled recommendation"
DEFAULT_CATEGORY = "general"


class Level(str, Enum):
    """Impact and effort levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]

    @classmethod
    def coerce(cls, value: Any, default: Level | None = None) -> Level:
        """Clamp an arbitrary value onto the level set.

        Args:
            value: Raw value from analyzer output
            default: Level to use when the value is absent or unrecognized

        Returns:
            Matching level, or the default (``MEDIUM`` if not given)
        """
        fallback = default if default is not None else cls.MEDIUM
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


class Severity(str, Enum):
    """Severity levels for recommendations."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

    @classmethod
    def coerce(cls, value: Any, default: Severity | None = None) -> Severity:
        """Clamp an arbitrary value onto the severity set."""
        fallback = default if default is not None else cls.MEDIUM
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


_LEVEL_RANKS = {Level.LOW: 1, Level.MEDIUM: 2, Level.HIGH: 3}
_SEVERITY_RANKS = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def _clean_text(value: Any, default: str) -> str:
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class Recommendation:
    """A raw recommendation as produced by one dimension analyzer.

    Values are trimmed and clamped once here. ``severity`` stays ``None``
    when the analyzer did not provide a usable one so that it can be
    inferred from impact and effort downstream.
    """

    title: str
    description: str
    impact: Level
    effort: Level
    category: str
    severity: Severity | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Recommendation:
        raw_severity = raw.get("severity")
        severity = (
            Severity.coerce(raw_severity)
            if isinstance(raw_severity, str) and raw_severity.strip()
            else None
        )
        return cls(
            title=_clean_text(raw.get("title"), DEFAULT_TITLE),
            description=_clean_text(raw.get("description"), ""),
            impact=Level.coerce(raw.get("impact")),
            effort=Level.coerce(raw.get("effort")),
            category=_clean_text(raw.get("category"), DEFAULT_CATEGORY),
            severity=severity,
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Result of one dimension analyzer (performance, security, standards)."""

    success: bool
    data: Mapping[str, Any] | None = None
    error: str | None = None

    @property
    def is_usable(self) -> bool:
        """True when the dimension succeeded and produced data."""
        return self.success and self.data is not None

    @property
    def score(self) -> float:
        """Dimension score, 0 when absent, not numeric or not finite."""
        if self.data is None:
            return 0
        value = self.data.get("score")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        if not math.isfinite(value):
            return 0
        return value

    @property
    def veto(self) -> bool:
        """Explicit veto flag; only the boolean ``True`` counts."""
        return self.data is not None and self.data.get("veto") is True

    def raw_recommendations(self) -> list[Any]:
        """Return the raw recommendation entries carried in ``data``."""
        if self.data is None:
            return []
        recommendations = self.data.get("recommendations")
        if not isinstance(recommendations, list):
            if recommendations is not None:
                logger.debug(
                    f"Ignoring non-list recommendations field: {type(recommendations).__name__}"
                )
            return []
        return list(recommendations)

    @classmethod
    def from_dict(cls, raw: Any) -> AnalysisResult:
        if isinstance(raw, AnalysisResult):
            return raw
        if not isinstance(raw, Mapping):
            return cls(success=False, error="malformed analysis result")

        data = raw.get("data")
        error = raw.get("error")
        return cls(
            success=raw.get("success") is True,
            data=dict(data) if isinstance(data, Mapping) else None,
            error=str(error) if error is not None else None,
        )


def parse_analysis_results(raw: Any) -> dict[str, AnalysisResult]:
    """Parse a dimension mapping into validated analysis results.

    Args:
        raw: Mapping of dimension name to raw result (or AnalysisResult)

    Returns:
        Dictionary preserving the input's dimension order
    """
    if not isinstance(raw, Mapping):
        return {}
    return {
        str(dimension): AnalysisResult.from_dict(result)
        for dimension, result in raw.items()
    }


@dataclass
class NormalizedRecommendation:
    """Canonical recommendation tagged with its originating dimension(s).

    The anchor's fields are updated in place while duplicates are merged,
    so instances are only shared within a single pipeline run.
    """

    id: str
    type: str
    title: str
    description: str
    impact: Level
    effort: Level
    category: str
    severity: Severity
    sources: tuple[str, ...]
    original_index: int

    @property
    def source(self) -> str:
        return ",".join(self.sources)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "impact": self.impact.value,
            "effort": self.effort.value,
            "category": self.category,
            "severity": self.severity.value,
            "source": self.source,
            "sources": list(self.sources),
            "originalIndex": self.original_index,
        }


@dataclass(frozen=True)
class PrioritizedRecommendation:
    """A deduplicated recommendation with its computed priority (0-100)."""

    recommendation: NormalizedRecommendation
    priority: int

    @property
    def severity(self) -> Severity:
        return self.recommendation.severity

    @property
    def impact(self) -> Level:
        return self.recommendation.impact

    @property
    def effort(self) -> Level:
        return self.recommendation.effort

    @property
    def category(self) -> str:
        return self.recommendation.category

    def to_dict(self) -> dict[str, Any]:
        result = self.recommendation.to_dict()
        result["priority"] = self.priority
        return result


@dataclass
class ImplementationPlan:
    """Disjoint partition of the prioritized recommendations into phases."""

    immediate: list[PrioritizedRecommendation] = field(default_factory=list)
    short_term: list[PrioritizedRecommendation] = field(default_factory=list)
    long_term: list[PrioritizedRecommendation] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.immediate) + len(self.short_term) + len(self.long_term)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "immediate": [rec.to_dict() for rec in self.immediate],
            "shortTerm": [rec.to_dict() for rec in self.short_term],
            "longTerm": [rec.to_dict() for rec in self.long_term],
        }
