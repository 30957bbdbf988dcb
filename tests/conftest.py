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
Pytest configuration and shared fixtures for the test suite.
"""

from __future__ import annotations

from typing import Any

import pytest

from sql_report_integrator import IntegratorConfig, ReportAssembler


@pytest.fixture
def index_scenario_results() -> dict[str, Any]:
    """Performance result with one index recommendation and a weak security score."""
    return {
        "performance": {
            "success": True,
            "data": {
                "score": 80,
                "recommendations": [
                    {
                        "title": "Add index on orders.user_id",
                        "impact": "high",
                        "effort": "low",
                    }
                ],
            },
        },
        "security": {
            "success": True,
            "data": {"score": 40, "recommendations": [], "veto": False},
        },
    }


@pytest.fixture
def sample_analysis_results() -> dict[str, Any]:
    """Results from all three dimensions with overlapping recommendations."""
    return {
        "performance": {
            "success": True,
            "data": {
                "score": 70,
                "recommendations": [
                    {
                        "title": "Avoid SELECT *",
                        "description": "List only the columns the query needs",
                        "impact": "medium",
                        "effort": "low",
                        "category": "performance",
                    },
                    {
                        "title": "Add composite index on orders",
                        "description": "Index (user_id, created_at) to support the filter",
                        "impact": "high",
                        "effort": "medium",
                        "category": "indexing",
                    },
                ],
                "executionPlan": {"type": "full_scan"},
            },
        },
        "security": {
            "success": True,
            "data": {
                "score": 55,
                "veto": False,
                "recommendations": [
                    {
                        "title": "Use parameterized queries",
                        "description": "Replace string concatenation with bound parameters",
                        "impact": "high",
                        "effort": "low",
                        "category": "security",
                        "severity": "high",
                    }
                ],
                "vulnerabilities": [{"type": "sql_injection"}],
            },
        },
        "standards": {
            "success": True,
            "data": {
                "score": 92,
                "recommendations": [
                    {
                        "title": "Avoid SELECT *",
                        "description": "List only the columns the query needs",
                        "impact": "low",
                        "effort": "low",
                        "category": "style",
                        "severity": "low",
                    },
                    {
                        "title": "Uppercase SQL keywords",
                        "description": "Write keywords such as select and from in uppercase",
                        "impact": "low",
                        "effort": "high",
                        "category": "style",
                    },
                ],
            },
        },
    }


@pytest.fixture
def integrator_config() -> IntegratorConfig:
    """Default integrator configuration."""
    return IntegratorConfig()


@pytest.fixture
def assembler(integrator_config: IntegratorConfig) -> ReportAssembler:
    """Report assembler with the default configuration."""
    return ReportAssembler(integrator_config)
