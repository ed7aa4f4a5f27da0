"""Tests for valuator.pricing.equity -- DiscountingEquityFuturePricer."""

from __future__ import annotations

import math
from datetime import date
from decimal import Decimal

from hypothesis import given
from hypothesis import strategies as st

from builders import market, spx_future, usd
from valuator.core.money import Currency
from valuator.pricing.equity import DiscountingEquityFuturePricer
from valuator.report.explain import ExplainKey

_PRICER = DiscountingEquityFuturePricer()


class TestEquityFuturePricer:
    def test_future_value(self) -> None:
        # (5100 - 5000) * 50
        assert _PRICER.future_value(market(), spx_future()) == usd("5000")

    def test_present_value_discounted_to_settlement(self) -> None:
        pv = _PRICER.present_value(market(), spx_future())
        # 2024-03-01 to 2024-06-24 is 115 days
        expected = 5000 * math.exp(-0.04 * 115 / 365)
        assert abs(float(pv.amount) - expected) < 1e-8
        assert pv.currency == Currency("USD")

    def test_strike_above_forward_negative(self) -> None:
        assert _PRICER.future_value(market(), spx_future("5200")).amount == Decimal("-5000")

    def test_at_the_money_zero(self) -> None:
        assert _PRICER.present_value(market(), spx_future("5100")).amount == 0

    @given(st.integers(min_value=4000, max_value=6000), st.integers(min_value=1, max_value=500))
    def test_lower_strike_worth_more(self, low: int, gap: int) -> None:
        env = market()
        assert _PRICER.present_value(env, spx_future(str(low))).amount > (
            _PRICER.present_value(env, spx_future(str(low + gap))).amount
        )

    def test_past_settlement_does_not_raise(self) -> None:
        pv = _PRICER.present_value(market(date(2024, 7, 1)), spx_future())
        assert pv.amount > Decimal("5000")

    def test_explain_single_row(self) -> None:
        (row,) = _PRICER.explain_rows(market(), spx_future())
        assert set(row) <= set(_PRICER.columns)
        assert row[ExplainKey.FORWARD_PRICE] == Decimal("5100")
        assert row[ExplainKey.STRIKE] == Decimal("5000")
        assert row[ExplainKey.FORECAST_VALUE] == Decimal("5000")
        assert row[ExplainKey.PRESENT_VALUE] == _PRICER.present_value(market(), spx_future()).amount
