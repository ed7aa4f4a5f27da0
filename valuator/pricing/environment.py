"""In-memory PricingEnvironment built from flat market quotes.

Curves are flat: one continuously compounded zero rate per currency
(ACT/365F from the valuation date), one forward rate per index, one forward
price per underlying and one normal volatility per index. Enough to run the
pricers end to end; curve construction lives elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from typing import final

from valuator.core.calendar import year_fraction_act_365
from valuator.core.decimal_math import exp_d
from valuator.core.money import VALUATION_DECIMAL_CONTEXT, Currency
from valuator.core.result import Err, Ok
from valuator.core.types import FrozenMap
from valuator.refdata.types import IborIndex


def _check_quotes(name: str, quotes: dict[str, Decimal]) -> str | None:
    for key, value in quotes.items():
        if not isinstance(value, Decimal) or not value.is_finite():
            return f"MarketEnvironment.{name}[{key}] must be finite Decimal, got {value!r}"
    return None


@final
@dataclass(frozen=True, slots=True)
class MarketEnvironment:
    """Immutable market snapshot. Missing data raises KeyError naming what is missing."""

    valuation_date: date
    zero_rates: FrozenMap[str, Decimal] = FrozenMap.EMPTY
    forward_rates: FrozenMap[str, Decimal] = FrozenMap.EMPTY
    fixings: FrozenMap[tuple[str, date], Decimal] = FrozenMap.EMPTY
    forward_prices: FrozenMap[str, Decimal] = FrozenMap.EMPTY
    normal_vols: FrozenMap[str, Decimal] = FrozenMap.EMPTY

    @staticmethod
    def create(
        valuation_date: date,
        zero_rates: dict[str, Decimal] | None = None,
        forward_rates: dict[str, Decimal] | None = None,
        fixings: dict[tuple[str, date], Decimal] | None = None,
        forward_prices: dict[str, Decimal] | None = None,
        normal_vols: dict[str, Decimal] | None = None,
    ) -> Ok[MarketEnvironment] | Err[str]:
        zero_rates = zero_rates or {}
        for code in zero_rates:
            match Currency.parse(code):
                case Err(e):
                    return Err(f"MarketEnvironment.zero_rates: {e}")
                case Ok():
                    pass
        named = {
            "zero_rates": zero_rates,
            "forward_rates": forward_rates or {},
            "forward_prices": forward_prices or {},
            "normal_vols": normal_vols or {},
        }
        for name, quotes in named.items():
            problem = _check_quotes(name, quotes)
            if problem is not None:
                return Err(problem)
        for (index_name, fixing_date), value in (fixings or {}).items():
            if not isinstance(value, Decimal) or not value.is_finite():
                return Err(f"MarketEnvironment.fixings[{index_name}, {fixing_date}] must be finite Decimal")
        for name, vol in (normal_vols or {}).items():
            if vol < 0:
                return Err(f"MarketEnvironment.normal_vols[{name}] must be >= 0, got {vol}")

        maps: dict[str, FrozenMap[object, Decimal]] = {}
        for name, quotes in {**named, "fixings": fixings or {}}.items():
            match FrozenMap.create(quotes):
                case Err(e):
                    return Err(f"MarketEnvironment.{name}: {e}")
                case Ok(fm):
                    maps[name] = fm
        return Ok(MarketEnvironment(valuation_date=valuation_date, **maps))

    def discount_factor(self, currency: Currency, on: date) -> Decimal:
        """exp(-r * t), t signed ACT/365F from the valuation date.

        A date before the valuation date gives a factor above one; no clamping.
        """
        rate = self.zero_rates.get(currency.code)
        if rate is None:
            raise KeyError(f"No discount curve for {currency.code}")
        t = year_fraction_act_365(self.valuation_date, on)
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            return exp_d(-rate * t)

    def forward_rate(self, index: IborIndex, fixing_date: date) -> Decimal:  # noqa: ARG002
        rate = self.forward_rates.get(index.name)
        if rate is None:
            raise KeyError(f"No forward curve for {index.name}")
        return rate

    def fixing(self, index: IborIndex, fixing_date: date) -> Decimal | None:
        return self.fixings.get((index.name, fixing_date))

    def forward_price(self, underlying_id: str, on: date) -> Decimal:  # noqa: ARG002
        price = self.forward_prices.get(underlying_id)
        if price is None:
            raise KeyError(f"No forward price for {underlying_id}")
        return price

    def normal_volatility(
        self, index: IborIndex, expiry: date, tenor_years: Decimal,  # noqa: ARG002
    ) -> Decimal:
        vol = self.normal_vols.get(index.name)
        if vol is None:
            raise KeyError(f"No normal volatility for {index.name}")
        return vol
