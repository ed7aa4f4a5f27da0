"""Tests for valuator.product.swaption -- construction and resolved accessors."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest
from dateutil import tz

from builders import (
    GBLO,
    GBP_LIBOR_3M,
    REFERENCE_DATA,
    USD_LIBOR_3M_INDEX,
    USNY,
    usd,
    vanilla_swap,
    vanilla_swaption,
)
from valuator.core.money import Currency, Money
from valuator.core.result import unwrap
from valuator.core.types import DayCountConvention, LongShort, PaymentFrequency, PayReceive
from valuator.product.resolve import resolve_swap, resolve_swaption
from valuator.product.swap import FixedRateSwapLeg, IborRateSwapLeg, LegSchedule, Swap
from valuator.product.swaption import (
    CashSettlement,
    CashSettlementMethod,
    PhysicalSettlement,
    ResolvedSwaption,
    Swaption,
)


def _cross_currency_swap() -> Swap:
    start, end = date(2024, 6, 3), date(2025, 6, 3)
    return Swap(legs=(
        FixedRateSwapLeg(
            pay_receive=PayReceive.PAY,
            schedule=LegSchedule(start, end, PaymentFrequency.ANNUAL, USNY),
            notional=usd("1000000"),
            fixed_rate=Decimal("0.04"),
            day_count=DayCountConvention.ACT_360,
        ),
        IborRateSwapLeg(
            pay_receive=PayReceive.RECEIVE,
            schedule=LegSchedule(start, end, PaymentFrequency.QUARTERLY, GBLO),
            notional=unwrap(Money.create(Decimal("800000"), "GBP")),
            index=GBP_LIBOR_3M,
        ),
    ))


def _resolved(settlement: object = None, swap: Swap | None = None) -> ResolvedSwaption:
    underlying = unwrap(resolve_swap(swap or vanilla_swap(), REFERENCE_DATA))
    return ResolvedSwaption(
        long_short=LongShort.LONG,
        settlement=settlement or PhysicalSettlement(),  # type: ignore[arg-type]
        expiry=datetime(2024, 5, 30, 11, 0, tzinfo=tz.gettz("America/New_York")),
        underlying=underlying,
    )


class TestSwaptionConstruction:
    def test_unknown_zone_raises(self) -> None:
        with pytest.raises(TypeError, match="time zone"):
            Swaption(
                long_short=LongShort.LONG,
                settlement=PhysicalSettlement(),
                expiry_date=date(2024, 5, 30),
                expiry_time=time(11, 0),
                expiry_zone="Mars/Olympus_Mons",
                expiry_calendar=USNY,
                underlying=vanilla_swap(),
            )

    def test_expiry_after_underlying_start_raises(self) -> None:
        with pytest.raises(TypeError, match="underlying start"):
            vanilla_swaption(expiry=date(2024, 6, 4))

    def test_expiry_on_underlying_start_ok(self) -> None:
        assert vanilla_swaption(expiry=date(2024, 6, 3)).expiry_date == date(2024, 6, 3)

    def test_bad_settlement_raises(self) -> None:
        with pytest.raises(TypeError, match="settlement"):
            vanilla_swaption(settlement="CASH")  # type: ignore[arg-type]

    def test_bad_cash_method_raises(self) -> None:
        with pytest.raises(TypeError):
            CashSettlement(method="PAR_YIELD", settlement_date=date(2024, 6, 3))  # type: ignore[arg-type]

    def test_naive_resolved_expiry_raises(self) -> None:
        with pytest.raises(TypeError, match="zone-aware"):
            ResolvedSwaption(
                long_short=LongShort.LONG,
                settlement=PhysicalSettlement(),
                expiry=datetime(2024, 5, 30, 11, 0),
                underlying=unwrap(resolve_swap(vanilla_swap(), REFERENCE_DATA)),
            )


class TestResolvedSwaptionAccessors:
    def test_currency_single(self) -> None:
        assert _resolved().currency == Currency("USD")

    def test_currency_cross_currency_raises(self) -> None:
        swaption = _resolved(swap=_cross_currency_swap())
        with pytest.raises(TypeError, match="single-currency"):
            _ = swaption.currency

    def test_index_is_first_floating(self) -> None:
        assert _resolved().index == USD_LIBOR_3M_INDEX

    def test_index_missing_raises(self) -> None:
        fixed_only = Swap(legs=(vanilla_swap().legs[0],))
        with pytest.raises(TypeError, match="no floating rate index"):
            _ = _resolved(swap=fixed_only).index

    def test_physical_settlement_date_is_underlying_start(self) -> None:
        assert _resolved().settlement_date == date(2024, 6, 3)

    def test_cash_settlement_date(self) -> None:
        settlement = CashSettlement(CashSettlementMethod.PAR_YIELD, date(2024, 6, 4))
        assert _resolved(settlement).settlement_date == date(2024, 6, 4)

    def test_resolved_from_product_matches(self) -> None:
        resolved = unwrap(resolve_swaption(vanilla_swaption(), REFERENCE_DATA))
        assert resolved == _resolved()
