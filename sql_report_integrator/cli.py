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

"""CLI for integrating multi-dimensional SQL analysis results.

This module provides a command-line interface that reads the per-dimension
results produced by the SQL analyzers and renders the integrated report.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import IntegratorConfig
from .context import AnalysisContext
from .exceptions import ConfigurationError, MalformedResultError
from .recommendations import generate_signature
from .scorers import ReportAssembler

console = Console()
logger = logging.getLogger(__name__)


def _load_analysis_results(results_file: str) -> dict[str, Any]:
    """Load analysis results from a JSON file.

    Accepts either a bare dimension mapping or a document wrapping it under
    ``analysisResults``.

    Raises:
        MalformedResultError: If the file cannot be read or has the wrong shape
    """
    path = Path(results_file)
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MalformedResultError(f"Failed to read analysis results from {path}: {e}") from e

    if isinstance(document, dict) and isinstance(document.get("analysisResults"), dict):
        document = document["analysisResults"]

    if not isinstance(document, dict):
        raise MalformedResultError(
            f"Analysis results in {path} must be a JSON object keyed by dimension",
            suggestions=['Expected shape: {"performance": {"success": true, "data": {...}}}'],
        )
    return document


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """SQL Report Integrator for merging multi-dimensional analysis results."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("results_file", type=click.Path(dir_okay=False))
@click.option("--config", "-c", "config_file", help="JSON configuration file")
@click.option("--database-type", "-d", help="Database type (mysql, postgresql, ...)")
@click.option("--sql-file", "-s", help="SQL file the results were produced for")
@click.option("--output", "-o", help="Output file for the report (JSON format)")
@click.option(
    "--fuzzy-dedup",
    is_flag=True,
    help="Merge recommendations with overlapping keywords, not only identical ones",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def integrate(
    ctx: click.Context,
    results_file: str,
    config_file: str | None,
    database_type: str | None,
    sql_file: str | None,
    output: str | None,
    fuzzy_dedup: bool,
    as_json: bool,
) -> None:
    """Integrate per-dimension analysis results into one report."""
    logger.info(f"Integrating analysis results from {results_file}")

    try:
        analysis_results = _load_analysis_results(results_file)
        config = (
            IntegratorConfig.from_file(config_file) if config_file else IntegratorConfig()
        )
        sql = Path(sql_file).read_text(encoding="utf-8") if sql_file else None
    except (MalformedResultError, ConfigurationError) as e:
        console.print(f"[red]Error: {e.get_user_friendly_message()}[/red]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Error reading SQL file: {e}[/red]")
        sys.exit(1)

    if fuzzy_dedup:
        config = dataclasses.replace(config, fuzzy_dedup=True)

    context = AnalysisContext(sql=sql, database_type=database_type)
    context.analysis_results = dict(analysis_results)

    assembler = ReportAssembler(config)
    report = assembler.integrate_report(context)

    if as_json:
        click.echo(json.dumps(report, indent=2, ensure_ascii=False, default=str))
    else:
        _display_report(report, ctx.obj["verbose"])

    if output:
        saved_path = assembler.save_report(report, output)
        console.print(f"[green]Report saved to {saved_path}[/green]")


@cli.command()
@click.argument("title")
@click.argument("description", default="")
def signature(title: str, description: str) -> None:
    """Print the deduplication signature of a recommendation."""
    click.echo(generate_signature(title, description))


def _display_report(report: dict[str, Any], verbose: bool = False) -> None:
    """Display an integrated report in a formatted way."""
    overall_score = report.get("overallScore", 0)
    risk_level = report.get("riskLevel", "unknown")
    risk_color = _get_risk_color(risk_level)

    score_text = (
        f"[{risk_color}]Overall Score: {overall_score}  "
        f"Risk Level: {risk_level.upper()}[/{risk_color}]"
    )
    if report.get("securityVeto"):
        score_text += "\n[bright_red]Security veto raised[/bright_red]"

    error = report.get("metadata", {}).get("error")
    if error:
        score_text += f"\n[dim]{error}[/dim]"

    console.print(Panel(score_text, title="Integrated Report", border_style=risk_color))

    summary = report.get("summary", {})
    if summary:
        table = Table(title="Dimension Summary")
        table.add_column("Dimension", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Status")

        for dimension, dimension_summary in summary.items():
            status = dimension_summary.get("status", "failed")
            color = _get_status_color(status)
            table.add_row(
                dimension.title(),
                str(dimension_summary.get("score", 0)),
                f"[{color}]{status}[/{color}]",
            )

        console.print(table)

    plan = report.get("implementationPlan", {})
    phases = [
        ("immediate", "Immediate"),
        ("shortTerm", "Short Term"),
        ("longTerm", "Long Term"),
    ]
    if any(plan.get(key) for key, _ in phases):
        console.print("\n[bold]Implementation Plan:[/bold]")
        for key, label in phases:
            items = plan.get(key, [])
            if not items:
                continue
            console.print(f"\n[bold]{label}[/bold] ({len(items)})")
            for i, rec in enumerate(items, 1):
                severity_color = _get_severity_color(rec["severity"])
                console.print(
                    f"  {i}. [{severity_color}]{rec['severity'].upper()}[/{severity_color}]"
                    f" {rec['title']} [dim](priority {rec['priority']}, {rec['source']})[/dim]"
                )
                if verbose and rec.get("description"):
                    console.print(f"     [dim]{rec['description']}[/dim]")


def _get_risk_color(risk_level: str) -> str:
    """Get color for risk level display."""
    risk_colors = {
        "critical": "bright_red",
        "high": "red",
        "medium": "yellow",
        "low": "green",
    }
    return risk_colors.get(risk_level, "white")


def _get_status_color(status: str) -> str:
    """Get color for dimension status display."""
    status_colors = {
        "excellent": "green",
        "good": "green",
        "warning": "yellow",
        "critical": "red",
        "failed": "bright_red",
    }
    return status_colors.get(status, "white")


def _get_severity_color(severity: str) -> str:
    """Get color for severity display."""
    severity_colors = {
        "critical": "bright_red",
        "high": "red",
        "medium": "yellow",
        "low": "blue",
    }
    return severity_colors.get(severity.lower(), "white")


if __name__ == "__main__":
    cli()
