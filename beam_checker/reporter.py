"""
Diagnostics aggregation and report generation.

aggregate() is a pure function: the same diagnostics in the same order always
produce the same Report, and the renderers are deterministic on a Report.
"""

import json
from dataclasses import dataclass
from enum import Enum
from itertools import groupby
from typing import Any, Dict, Iterable, List, Tuple

from .issue import Diagnostic, Severity


class RunStatus(Enum):
    CLEAN = "clean"
    WARNINGS = "warnings"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Report:
    status: RunStatus
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]


def aggregate(diagnostics: Iterable[Diagnostic]) -> Report:
    """Deduplicate by (rule id, primary location, message), sort, and compute status."""
    unique: Dict[Tuple, Diagnostic] = {}
    for diagnostic in diagnostics:
        unique.setdefault(diagnostic.key, diagnostic)
    ordered = tuple(sorted(unique.values(), key=lambda d: d.sort_key))

    if not ordered:
        status = RunStatus.CLEAN
    elif any(d.severity is Severity.ERROR for d in ordered):
        status = RunStatus.FAILED
    else:
        status = RunStatus.WARNINGS
    return Report(status, ordered)


def cancelled_report() -> Report:
    """A cancelled run reports nothing rather than a partial result."""
    return Report(RunStatus.CANCELLED, ())


def exit_code(report: Report, strict: bool = False) -> int:
    if report.status is RunStatus.CANCELLED:
        return 2
    if report.status is RunStatus.FAILED:
        return 1
    if report.status is RunStatus.WARNINGS:
        return 1 if strict else 0
    return 0


class ReportGenerator:
    """Generate reports from an aggregated Report."""

    @staticmethod
    def generate_text_report(report: Report) -> str:
        """Generate a text report grouped by file."""
        if report.status is RunStatus.CANCELLED:
            return "\nRun cancelled; no diagnostics reported.\n"
        if not report.diagnostics:
            return "\n✓ No BEAM convention issues found\n"

        lines = [f"\n{'=' * 80}", "BEAM Conformance Report", f"{'=' * 80}"]
        for file, group in groupby(report.diagnostics, key=lambda d: d.primary.file):
            lines.append(f"\n{file}")
            lines.append("-" * 80)
            for diagnostic in group:
                loc = diagnostic.primary
                lines.append(
                    f"  {loc.line}:{loc.column}  {diagnostic.severity.value.upper():<7}  "
                    f"{diagnostic.rule_id}  {diagnostic.message}"
                )
                for extra in diagnostic.locations[1:]:
                    lines.append(f"      see {extra}")
                if diagnostic.suggestion:
                    lines.append(f"      Fix: {diagnostic.suggestion}")

        lines.append(
            f"\nSummary: {len(report.errors)} errors, {len(report.warnings)} warnings "
            f"({report.status.value})"
        )
        lines.append("=" * 80)
        return "\n".join(lines)

    @staticmethod
    def generate_summary(report: Report) -> Dict[str, int]:
        """Count diagnostics by rule id."""
        summary: Dict[str, int] = {}
        for diagnostic in report.diagnostics:
            summary[diagnostic.rule_id] = summary.get(diagnostic.rule_id, 0) + 1
        return dict(sorted(summary.items()))

    @staticmethod
    def to_dict(report: Report) -> Dict[str, Any]:
        return {
            "status": report.status.value,
            "diagnostics": [diagnostic_to_dict(d) for d in report.diagnostics],
        }

    @staticmethod
    def generate_json_report(report: Report) -> str:
        return json.dumps(ReportGenerator.to_dict(report), indent=2, sort_keys=True)


def diagnostic_to_dict(diagnostic: Diagnostic) -> Dict[str, Any]:
    return {
        "rule_id": diagnostic.rule_id,
        "severity": diagnostic.severity.value,
        "message": diagnostic.message,
        "locations": [
            {"file": loc.file, "line": loc.line, "column": loc.column}
            for loc in diagnostic.locations
        ],
        "suggestion": diagnostic.suggestion,
    }
