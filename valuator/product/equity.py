"""Equity future: exchange-traded future on a single equity or equity index."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import final

from valuator.core.money import Currency, Money
from valuator.core.result import Err, Ok


@final
@dataclass(frozen=True, slots=True)
class EquityFuture:
    """Futures contract on an equity underlying.

    The contract needs no calendar or index lookups, so it is already in
    calculation-ready form: resolution returns the instance unchanged.

    unit_amount is the value of one point of price movement per contract;
    its currency is the contract currency.
    """

    expiration_date: date
    settlement_date: date
    strike_price: Decimal
    unit_amount: Money
    underlying_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.expiration_date, date) or not isinstance(self.settlement_date, date):
            raise TypeError("EquityFuture: expiration_date and settlement_date must be dates")
        if self.expiration_date > self.settlement_date:
            raise TypeError(
                f"EquityFuture: expiration_date ({self.expiration_date}) "
                f"must be <= settlement_date ({self.settlement_date})"
            )
        if not isinstance(self.strike_price, Decimal) or not self.strike_price.is_finite():
            raise TypeError(f"EquityFuture.strike_price must be finite Decimal, got {self.strike_price!r}")
        if not isinstance(self.unit_amount, Money):
            raise TypeError(f"EquityFuture.unit_amount must be Money, got {type(self.unit_amount).__name__}")
        if not self.underlying_id:
            raise TypeError("EquityFuture.underlying_id must be non-empty")

    @property
    def currency(self) -> Currency:
        return self.unit_amount.currency

    @staticmethod
    def create(
        expiration_date: date,
        settlement_date: date,
        strike_price: Decimal,
        unit_amount: Decimal,
        currency: str,
        underlying_id: str,
    ) -> Ok[EquityFuture] | Err[str]:
        """Validate every field and build the contract, or explain why not."""
        if not isinstance(expiration_date, date) or not isinstance(settlement_date, date):
            return Err("EquityFuture: expiration_date and settlement_date must be dates")
        if expiration_date > settlement_date:
            return Err(
                f"EquityFuture: expiration_date ({expiration_date}) "
                f"must be <= settlement_date ({settlement_date})"
            )
        if not isinstance(strike_price, Decimal) or not strike_price.is_finite():
            return Err(f"EquityFuture.strike_price must be finite Decimal, got {strike_price!r}")
        if not underlying_id:
            return Err("EquityFuture.underlying_id must be non-empty")
        match Money.create(unit_amount, currency):
            case Err(e):
                return Err(f"EquityFuture.unit_amount: {e}")
            case Ok(unit):
                pass
        return Ok(EquityFuture(
            expiration_date=expiration_date,
            settlement_date=settlement_date,
            strike_price=strike_price,
            unit_amount=unit,
            underlying_id=underlying_id,
        ))
