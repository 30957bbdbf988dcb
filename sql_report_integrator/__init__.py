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
SQL Report Integrator - merges multi-dimensional SQL analysis into one action plan.

This package provides tools to:
- Flatten recommendations from the performance, security and standards analyzers
- Merge duplicate recommendations by keyword signature
- Score and order recommendations, then split them into implementation phases
- Aggregate dimension scores into an overall score and risk level

Main Components:
- RecommendationExtractor: Normalizes raw analyzer recommendations
- Deduplicator: Signature-based merging of duplicates
- PriorityScorer: Weighted priority and severity ordering
- ImplementationPlanner: Immediate / short-term / long-term phases
- RiskAggregator: Weighted overall score, lowest score and risk level
- ReportAssembler: Main orchestration class; always returns a report

Example Usage:
    from sql_report_integrator import ReportAssembler

    assembler = ReportAssembler()
    report = assembler.integrate_report(analysis_results)
    print(f"Risk level: {report['riskLevel']} (score {report['overallScore']})")
"""

__version__ = "0.1.0"
__author__ = "SQL Report Integrator Team"

from .config import IntegratorConfig
from .context import AnalysisContext
from .recommendations import (
    Deduplicator,
    ImplementationPlanner,
    PriorityScorer,
    RecommendationExtractor,
    generate_signature,
)
from .scorers import ReportAssembler, RiskAggregator

__all__ = [
    "AnalysisContext",
    "Deduplicator",
    "ImplementationPlanner",
    "IntegratorConfig",
    "PriorityScorer",
    "RecommendationExtractor",
    "ReportAssembler",
    "RiskAggregator",
    "generate_signature",
]
