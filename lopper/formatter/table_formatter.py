"""Plain-text table output for terminals."""

from __future__ import annotations

from lopper.formatter.base import BaseFormatter
from lopper.models import DependencyReport, Report

_HEADERS = ["NAME", "LANG", "USED", "TOTAL", "USED%", "RISKS", "TOP SYMBOLS"]


def _row(dep: DependencyReport, with_score: bool) -> list[str]:
    used_percent = f"{dep.used_percent:.1f}" if dep.has_imports else "-"
    risks = ",".join(cue.code for cue in dep.risk_cues) or "-"
    top = ", ".join(f"{symbol.name}({symbol.count})" for symbol in dep.top_used_symbols) or "-"
    row = [
        dep.name,
        dep.language or "-",
        str(dep.used_symbol_count),
        str(dep.total_symbol_count),
        used_percent,
        risks,
        top,
    ]
    if with_score:
        candidate = dep.removal_candidate
        row.insert(5, f"{candidate.score:.1f}" if candidate else "-")
    return row


class TableFormatter(BaseFormatter):
    name = "table"

    def format(self, report: Report) -> str:
        lines: list[str] = []
        summary = report.summary
        if summary is not None:
            lines.append(
                f"{summary.dependency_count} dependencies, "
                f"{summary.used_symbol_count}/{summary.total_symbol_count} imported symbols used "
                f"({summary.used_percent:.1f}%)"
            )
        else:
            lines.append("No dependencies to report.")

        if report.dependencies:
            with_score = any(dep.removal_candidate for dep in report.dependencies)
            headers = list(_HEADERS)
            if with_score:
                headers.insert(5, "SCORE")
            rows = [headers] + [_row(dep, with_score) for dep in report.dependencies]
            widths = [max(len(row[i]) for row in rows) for i in range(len(headers))]
            lines.append("")
            for row in rows:
                cells = [cell.ljust(width) for cell, width in zip(row, widths)]
                lines.append("  ".join(cells).rstrip())

        if report.warnings:
            lines.append("")
            lines.append("Warnings:")
            lines.extend(f"  - {warning}" for warning in report.warnings)
        return "\n".join(lines) + "\n"
