"""Pricing output types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from valuator.core.money import Money
from valuator.report.cashflow import CashFlowReport


@final
@dataclass(frozen=True, slots=True)
class ValuationResult:
    """Present value, future value and explain report from one pricing run."""

    present_value: Money
    future_value: Money
    report: CashFlowReport

    def __post_init__(self) -> None:
        if self.present_value.currency != self.future_value.currency:
            raise TypeError(
                f"ValuationResult: present value in {self.present_value.currency} "
                f"but future value in {self.future_value.currency}"
            )
