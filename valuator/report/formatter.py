"""Render a CashFlowReport as CSV or as a fixed-width ASCII table."""

from __future__ import annotations

import csv
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from valuator.report.cashflow import CashFlowReport


def format_cell(value: object) -> str:
    match value:
        case None:
            return ""
        case Decimal():
            return format(value, "f")
        case date():
            return value.isoformat()
        case Enum():
            return str(value.value)
        case _:
            return str(value)


def write_csv(report: CashFlowReport, sink: TextIO) -> None:
    """Header line then one line per row, RFC 4180 quoting."""
    writer = csv.writer(sink, lineterminator="\n")
    writer.writerow(report.column_headers)
    for row in report.data:
        writer.writerow(format_cell(cell) for cell in row)


def _is_numeric(value: object) -> bool:
    return isinstance(value, Decimal | int) and not isinstance(value, bool)


def write_ascii_table(report: CashFlowReport, sink: TextIO) -> None:
    """Boxed table; numeric cells right-aligned, everything else left-aligned."""
    cells = [[format_cell(c) for c in row] for row in report.data]
    widths = [len(h) for h in report.column_headers]
    for row in cells:
        for i, text in enumerate(row):
            widths[i] = max(widths[i], len(text))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+\n"
    sink.write(border)
    sink.write("|" + "|".join(f" {h:<{w}} " for h, w in zip(report.column_headers, widths, strict=True)) + "|\n")
    sink.write(border)
    for raw, row in zip(report.data, cells, strict=True):
        parts = []
        for value, text, w in zip(raw, row, widths, strict=True):
            parts.append(f" {text:>{w}} " if _is_numeric(value) else f" {text:<{w}} ")
        sink.write("|" + "|".join(parts) + "|\n")
    sink.write(border)
