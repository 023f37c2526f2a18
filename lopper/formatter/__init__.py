"""Formatter registry."""

from __future__ import annotations

from lopper.formatter.base import BaseFormatter
from lopper.formatter.json_formatter import JsonFormatter, report_to_dict
from lopper.formatter.table_formatter import TableFormatter
from lopper.models import Report

_FORMATTERS: dict[str, type[BaseFormatter]] = {
    "table": TableFormatter,
    "json": JsonFormatter,
}

FORMAT_CHOICES = list(_FORMATTERS)


def get_formatter(fmt: str) -> BaseFormatter:
    try:
        return _FORMATTERS[fmt.strip().lower()]()
    except KeyError:
        raise ValueError(f"unknown format {fmt!r} (expected one of: {', '.join(FORMAT_CHOICES)})") from None


def format_report(report: Report, fmt: str = "table") -> str:
    return get_formatter(fmt).format(report)


__all__ = [
    "BaseFormatter",
    "FORMAT_CHOICES",
    "JsonFormatter",
    "TableFormatter",
    "format_report",
    "get_formatter",
    "report_to_dict",
]
