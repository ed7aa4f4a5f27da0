"""Capabilities the pricers consume and the shape every pricer has.

PricingEnvironment is supplied by the caller (curves, fixings, vols as of a
valuation date). ProductPricer and PaymentPeriodPricer are implemented by
stateless pricer objects that the dispatchers share across calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Protocol

from valuator.core.money import Currency, Money
from valuator.refdata.types import IborIndex
from valuator.report.explain import ExplainKey, ExplainRow


class PricingEnvironment(Protocol):
    """Market state as of valuation_date."""

    @property
    def valuation_date(self) -> date: ...

    def discount_factor(self, currency: Currency, on: date) -> Decimal: ...

    def forward_rate(self, index: IborIndex, fixing_date: date) -> Decimal: ...

    def fixing(self, index: IborIndex, fixing_date: date) -> Decimal | None:
        """Published fixing, or None if the index has not fixed for that date."""
        ...

    def forward_price(self, underlying_id: str, on: date) -> Decimal: ...

    def normal_volatility(self, index: IborIndex, expiry: date, tenor_years: Decimal) -> Decimal: ...


class ProductPricer[T](Protocol):
    """Prices one resolved product variant.

    columns is the fixed, ordered set of explain keys this pricer fills.
    """

    @property
    def columns(self) -> tuple[ExplainKey, ...]: ...

    def present_value(self, env: PricingEnvironment, product: T) -> Money: ...

    def future_value(self, env: PricingEnvironment, product: T) -> Money: ...

    def explain_rows(self, env: PricingEnvironment, product: T) -> Sequence[ExplainRow]: ...


class PaymentPeriodPricer[T](Protocol):
    """Prices one payment period of a swap leg."""

    def present_value(self, env: PricingEnvironment, period: T) -> Money: ...

    def future_value(self, env: PricingEnvironment, period: T) -> Money: ...

    def explain_rows(self, env: PricingEnvironment, period: T) -> Sequence[ExplainRow]: ...
