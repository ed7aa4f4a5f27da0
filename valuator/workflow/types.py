"""Workflow data types for portfolio valuation.

All types: @final @dataclass(frozen=True, slots=True). Everything here
crosses the Temporal boundary through VALUATOR_DATA_CONVERTER.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import final

from valuator.core.money import Money, NonEmptyStr
from valuator.core.result import Err, Ok
from valuator.infra.config import ValuationConfig
from valuator.product.types import Product

# ---------------------------------------------------------------------------
# Activity input / output
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ValuationRequest:
    """One trade to value: an identifier plus the unresolved product."""

    trade_id: NonEmptyStr
    product: Product


@final
@dataclass(frozen=True, slots=True)
class TradeValuationInput:
    request: ValuationRequest
    valuation_date: date


@final
@dataclass(frozen=True, slots=True)
class TradeValuation:
    """Result of one value_trade activity.

    Either both values are set and error is None, or error explains why
    the trade could not be valued. The explain report travels as CSV text.
    """

    trade_id: NonEmptyStr
    present_value: Money | None = None
    future_value: Money | None = None
    row_count: int = 0
    report_csv: str = ""
    error: str | None = None

    def __post_init__(self) -> None:
        if self.error is None and (self.present_value is None or self.future_value is None):
            raise TypeError("TradeValuation without error requires present_value and future_value")
        if self.row_count < 0:
            raise TypeError(f"TradeValuation.row_count must be >= 0, got {self.row_count}")

    @property
    def succeeded(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Workflow input / output
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class PortfolioValuationInput:
    """Workflow entry point. portfolio_id doubles as the Temporal workflow ID."""

    portfolio_id: NonEmptyStr
    valuation_date: date
    requests: tuple[ValuationRequest, ...]
    activity_timeout_s: int = 60
    max_activity_attempts: int = 3

    def __post_init__(self) -> None:
        if self.activity_timeout_s <= 0:
            raise TypeError(
                f"PortfolioValuationInput.activity_timeout_s must be > 0, got {self.activity_timeout_s}"
            )
        if self.max_activity_attempts <= 0:
            raise TypeError(
                f"PortfolioValuationInput.max_activity_attempts must be > 0, got {self.max_activity_attempts}"
            )
        ids = [r.trade_id.value for r in self.requests]
        if len(ids) != len(set(ids)):
            raise TypeError("PortfolioValuationInput.requests contains duplicate trade_id")

    @staticmethod
    def create(
        portfolio_id: str,
        valuation_date: date,
        requests: Iterable[ValuationRequest],
        config: ValuationConfig | None = None,
    ) -> Ok[PortfolioValuationInput] | Err[str]:
        """Build the workflow input, taking timeouts and attempts from config."""
        config = config or ValuationConfig()
        match NonEmptyStr.parse(portfolio_id):
            case Err(e):
                return Err(f"PortfolioValuationInput.portfolio_id: {e}")
            case Ok(pid):
                pass
        try:
            return Ok(PortfolioValuationInput(
                portfolio_id=pid,
                valuation_date=valuation_date,
                requests=tuple(requests),
                activity_timeout_s=config.activity_timeout_s,
                max_activity_attempts=config.max_activity_attempts,
            ))
        except TypeError as exc:
            return Err(str(exc))


@final
@dataclass(frozen=True, slots=True)
class PortfolioValuationResult:
    portfolio_id: NonEmptyStr
    valuations: tuple[TradeValuation, ...]

    @property
    def failed(self) -> tuple[TradeValuation, ...]:
        return tuple(v for v in self.valuations if not v.succeeded)
