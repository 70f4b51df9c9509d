"""Format check results as human-readable Markdown."""

from datetime import datetime
from itertools import groupby
from typing import List, Optional

from beam_checker.issue import Diagnostic
from beam_checker.reporter import Report, RunStatus


def _title_case(s: str) -> str:
    """e.g. error -> Error, rule:flat-nesting -> Flat Nesting."""
    if not s:
        return s
    return s.replace("rule:", "").replace("-", " ").replace("_", " ").strip().lower().title()


def _diagnostic_block_md(d: Diagnostic) -> List[str]:
    """One diagnostic as Markdown: Line N · Rule · Severity, then message and fix."""
    loc = d.primary
    lines = [f"**Line {loc.line}:{loc.column} · {_title_case(d.rule_id)} · {_title_case(d.severity.value)}**", ""]
    lines.append(d.message)
    lines.append("")
    if len(d.locations) > 1:
        lines.append("- **Related:** " + ", ".join(f"`{extra}`" for extra in d.locations[1:]))
    if d.suggestion:
        lines.append(f"- **Fix:** {d.suggestion}")
    lines.append("")
    return lines


def format_markdown_report(report: Report, generated_at: Optional[datetime] = None) -> str:
    """Format a report as Markdown grouped by file. Without generated_at the output is deterministic."""
    lines = ["# BEAM Conformance Results", ""]
    if generated_at is not None:
        lines.append(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("")

    if report.status is RunStatus.CANCELLED:
        lines.append("Run cancelled; no diagnostics reported.")
        lines.append("")
        return "\n".join(lines)

    lines.append(
        f"**Status: {report.status.value}** · {len(report.errors)} error(s), "
        f"{len(report.warnings)} warning(s)."
    )
    lines.append("")
    if not report.diagnostics:
        lines.append("No convention issues found.")
        lines.append("")
        return "\n".join(lines)

    for file, group in groupby(report.diagnostics, key=lambda d: d.primary.file):
        lines.append(f"## {file}")
        lines.append("")
        for d in group:
            lines.extend(_diagnostic_block_md(d))
    return "\n".join(lines)
