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

"""Recommendation pipeline: extraction, deduplication, scoring and planning.

Each stage is a small class operating on the data structures from
``base``; stages hold only read-only configuration and can be shared
between concurrent report requests.
"""

from .base import (
    AnalysisResult,
    ImplementationPlan,
    Level,
    NormalizedRecommendation,
    PrioritizedRecommendation,
    Recommendation,
    Severity,
    parse_analysis_results,
)
from .deduplicator import Deduplicator, generate_signature, signature_similarity
from .extractor import RecommendationExtractor, infer_severity
from .planner import ImplementationPlanner
from .priority_scorer import PriorityScorer

__all__ = [
    "AnalysisResult",
    "Deduplicator",
    "ImplementationPlan",
    "ImplementationPlanner",
    "Level",
    "NormalizedRecommendation",
    "PrioritizedRecommendation",
    "PriorityScorer",
    "Recommendation",
    "RecommendationExtractor",
    "Severity",
    "generate_signature",
    "infer_severity",
    "parse_analysis_results",
    "signature_similarity",
]
