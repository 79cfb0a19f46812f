"""Plain-text formatting helpers for match reports."""
from __future__ import annotations
from datetime import datetime
from typing import Any, List, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .aggregator import MatchReport

SUMMARY_COLUMNS: List[str] = ["Scope", "Items", "Matches", "Same Ent.", "Cross Ent.", "Avg Score"]


def format_percent(score: float | None) -> str:
    """Format a 0-1 score as a whole percentage ("83%")."""
    if score is None:
        return ""
    return f"{score * 100:.0f}%"


def format_timestamp(ts: datetime | None) -> str:
    if ts is None:
        return ""
    return ts.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def format_report_summary(report: MatchReport) -> str:
    """Multi-line human readable summary of a report."""
    lines = [
        f"Match Report for {report.scope_name or report.scope_id}",
        f"Generated: {format_timestamp(report.generated_at)}",
        f"Items Analyzed: {report.items_analyzed}",
        f"Total Matches Found: {report.matches_found}",
        f"  - Same Enterprise: {report.same_enterprise_matches}",
        f"  - Cross Enterprise: {report.cross_enterprise_matches}",
        f"Items with Matches: {report.items_with_matches}",
        f"Items without Matches: {report.items_without_matches}",
        f"Average Match Score: {format_percent(report.average_score)}",
    ]
    if report.truncated:
        lines.append("(partial: deadline reached before every item was analyzed)")
    return "\n".join(lines)


def summary_row(report: MatchReport) -> List[Any]:
    """Row matching SUMMARY_COLUMNS, for tabular dashboards."""
    return [
        report.scope_name or report.scope_id,
        report.items_analyzed,
        report.matches_found,
        report.same_enterprise_matches,
        report.cross_enterprise_matches,
        format_percent(report.average_score),
    ]


__all__ = [
    "SUMMARY_COLUMNS",
    "format_percent",
    "format_timestamp",
    "format_report_summary",
    "summary_row",
]
