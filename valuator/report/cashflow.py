"""CashFlowReport: column-keyed trace of a pricing calculation.

One row per priced event in chronological order; sub-events of one payment
period (several resets) sit in adjacent rows. Keys and headers always have
the same length as every row.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import TextIO, final

from valuator.core.types import UtcDatetime
from valuator.report import formatter
from valuator.report.explain import ExplainKey, ExplainRow


@final
@dataclass(frozen=True, slots=True)
class CashFlowReport:
    """Immutable report. Sequences passed in are copied into tuples."""

    valuation_date: date
    run_instant: UtcDatetime
    column_keys: tuple[ExplainKey, ...]
    column_headers: tuple[str, ...]
    data: tuple[tuple[object, ...], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "column_keys", tuple(self.column_keys))
        object.__setattr__(self, "column_headers", tuple(self.column_headers))
        object.__setattr__(self, "data", tuple(tuple(row) for row in self.data))
        if not isinstance(self.run_instant, UtcDatetime):
            raise TypeError(f"CashFlowReport.run_instant must be UtcDatetime, got {self.run_instant!r}")
        width = len(self.column_headers)
        if len(self.column_keys) != width:
            raise TypeError(
                f"CashFlowReport: {len(self.column_keys)} column keys but {width} column headers"
            )
        for i, row in enumerate(self.data):
            if len(row) != width:
                raise TypeError(f"CashFlowReport: row {i} has {len(row)} cells, expected {width}")

    @staticmethod
    def from_rows(
        valuation_date: date,
        run_instant: UtcDatetime,
        columns: Sequence[ExplainKey],
        rows: Iterable[ExplainRow],
    ) -> CashFlowReport:
        """Build from keyed rows. Headers come from the same keys, cells absent from a row are None."""
        keys = tuple(columns)
        data: list[tuple[object, ...]] = []
        for row in rows:
            unknown = [k.name for k in row if k not in keys]
            if unknown:
                raise TypeError(f"CashFlowReport: row has keys outside the declared columns: {unknown}")
            data.append(tuple(row.get(k) for k in keys))
        return CashFlowReport(
            valuation_date=valuation_date,
            run_instant=run_instant,
            column_keys=keys,
            column_headers=tuple(k.header for k in keys),
            data=tuple(data),
        )

    @property
    def row_count(self) -> int:
        return len(self.data)

    @property
    def column_count(self) -> int:
        return len(self.column_headers)

    def column(self, key: ExplainKey) -> tuple[object, ...]:
        """All cells of one column, top to bottom. KeyError if absent."""
        try:
            i = self.column_keys.index(key)
        except ValueError:
            raise KeyError(key) from None
        return tuple(row[i] for row in self.data)

    def write_csv(self, sink: TextIO) -> None:
        formatter.write_csv(self, sink)

    def write_ascii_table(self, sink: TextIO) -> None:
        formatter.write_ascii_table(self, sink)
