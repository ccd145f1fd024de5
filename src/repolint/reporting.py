"""Deterministic audit report writers."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from repolint.runner import RepositoryReport

ERROR_MARKER = "❌"
WARNING_MARKER = "⚠️"


def report_to_dict(report: RepositoryReport) -> dict[str, Any]:
    """Convert one repository report to a JSON-ready payload."""
    results: list[dict[str, Any]] = []
    for outcome in report.results:
        entry: dict[str, Any] = {"rule": outcome.rule, "level": outcome.level.value}
        if outcome.failures:
            entry["errors"] = list(outcome.failures)
        if outcome.warnings:
            entry["warnings"] = list(outcome.warnings)
        results.append(entry)
    return {
        "repository": report.repository.full_name,
        "results": results,
    }


def reports_to_dict(reports: Sequence[RepositoryReport]) -> dict[str, Any]:
    return {
        "has_errors": has_errors(reports),
        "repositories": [report_to_dict(report) for report in reports],
    }


def has_errors(reports: Sequence[RepositoryReport]) -> bool:
    """True if any repository has a violation at error level."""
    return any(report.has_errors for report in reports)


def render_console(reports: Sequence[RepositoryReport], console: Console) -> None:
    """Print a heading per repository followed by its violations."""
    for report in reports:
        name = report.repository.full_name
        console.print()
        console.print(f"[bold]{escape(name)}[/bold]")
        console.print("=" * len(name))
        for outcome in report.results:
            for error in outcome.failures:
                console.print(f"  {ERROR_MARKER} {escape(outcome.rule)}: {escape(error)}")
            for warning in outcome.warnings:
                console.print(f"  {WARNING_MARKER} {escape(outcome.rule)}: {escape(warning)}")


def write_json_report(reports: Sequence[RepositoryReport], path: Path) -> Path:
    """Write the full audit result as JSON and return the written path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(reports_to_dict(reports), indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return path
