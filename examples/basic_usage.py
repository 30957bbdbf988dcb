#!/usr/bin/env python3
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
Basic usage examples for the SQL Report Integrator.

This script demonstrates how to merge the results of the performance,
security and standards analyzers into one prioritized report.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console

from sql_report_integrator import AnalysisContext, IntegratorConfig, ReportAssembler

SAMPLE_RESULTS: dict[str, Any] = {
    "performance": {
        "success": True,
        "data": {
            "score": 72,
            "recommendations": [
                {
                    "title": "Add index on orders.user_id",
                    "description": "The filter on user_id scans the whole table",
                    "impact": "high",
                    "effort": "low",
                    "category": "indexing",
                },
                {
                    "title": "Avoid SELECT *",
                    "description": "List only the columns the query needs",
                    "impact": "medium",
                    "effort": "low",
                },
            ],
        },
    },
    "security": {
        "success": True,
        "data": {
            "score": 48,
            "veto": False,
            "recommendations": [
                {
                    "title": "Use parameterized queries",
                    "description": "User input is concatenated into the WHERE clause",
                    "impact": "high",
                    "effort": "low",
                    "category": "security",
                    "severity": "critical",
                }
            ],
        },
    },
    "standards": {
        "success": True,
        "data": {
            "score": 85,
            "recommendations": [
                {
                    "title": "Avoid SELECT *",
                    "description": "Explicit column lists survive schema changes",
                    "impact": "low",
                    "effort": "low",
                }
            ],
        },
    },
}


def example_basic_integration() -> None:
    """Integrate a bare results mapping with the default configuration."""
    console = Console()
    console.print("🔍 Basic Report Integration Example")
    console.print("=" * 50)

    assembler = ReportAssembler()
    report = assembler.integrate_report(SAMPLE_RESULTS, database_type="mysql")

    console.print(f"   Overall score: {report['overallScore']}")
    console.print(f"   Risk level: {report['riskLevel']}")
    console.print(f"   Security veto: {report['securityVeto']}")

    console.print("\n💡 Recommendations:")
    for i, rec in enumerate(report["recommendations"], 1):
        console.print(
            f"   {i}. [{rec['severity'].upper()}] {rec['title']} "
            f"(priority {rec['priority']}, from {rec['source']})"
        )

    plan = report["implementationPlan"]
    console.print("\n📋 Implementation plan:")
    for phase in ("immediate", "shortTerm", "longTerm"):
        titles = ", ".join(rec["title"] for rec in plan[phase]) or "-"
        console.print(f"   {phase:10}: {titles}")


def example_custom_weights() -> None:
    """Example with security-focused dimension weights."""
    console = Console()
    console.print("\n\n⚖️  Custom Weights Example")
    console.print("=" * 50)

    config = IntegratorConfig.from_dict(
        {"weights": {"performance": 0.2, "security": 0.7, "standards": 0.1}}
    )
    for dimension, weight in config.weights.items():
        console.print(f"   {dimension:12}: {weight}")

    report = ReportAssembler(config).integrate_report(SAMPLE_RESULTS)
    console.print(f"\n   Overall score: {report['overallScore']} ({report['riskLevel']})")


def example_request_context() -> None:
    """Example collecting results on a request context."""
    console = Console()
    console.print("\n\n📁 Request Context Example")
    console.print("=" * 50)

    context = AnalysisContext(
        sql="SELECT * FROM orders o JOIN users u ON u.id = o.user_id WHERE u.name = 'x'",
        database_type="postgresql",
    )
    for dimension, result in SAMPLE_RESULTS.items():
        context.set_analysis_result(dimension, result)
        context.record_stage(dimension, 0.8, llm_calls=1)

    report = ReportAssembler().integrate_report(context)
    metadata = report["metadata"]

    console.print(f"   Request: {metadata['requestId']}")
    console.print(f"   SQL complexity: {metadata['sqlComplexity']}")
    console.print(f"   Duration: {metadata['analysisDuration']:.1f}s, LLM calls: {metadata['llmCalls']}")


if __name__ == "__main__":
    example_basic_integration()
    example_custom_weights()
    example_request_context()
