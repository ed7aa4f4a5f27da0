"""Swap legs and swaps, before and after resolution.

Before resolution a leg is a schedule description that names its calendar
and index by identifier. After resolution every date is adjusted, every
year fraction computed and every index looked up, so pricers never touch
reference data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import final

from valuator.core.money import Currency, Money
from valuator.core.types import (
    BusinessDayConvention,
    DayCountConvention,
    PaymentFrequency,
    PayReceive,
)
from valuator.refdata.types import HolidayCalendarId, IborIndex, IborIndexId

# ---------------------------------------------------------------------------
# Product form
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class LegSchedule:
    """Periodic schedule from start_date to end_date.

    Periods roll forward from start_date; a final short stub absorbs any
    remainder. Boundaries are adjusted on ``calendar`` with ``convention``
    and payments made payment_lag_days business days after each period end.
    """

    start_date: date
    end_date: date
    frequency: PaymentFrequency
    calendar: HolidayCalendarId
    convention: BusinessDayConvention = "MOD_FOLLOWING"
    payment_lag_days: int = 0

    def __post_init__(self) -> None:
        if self.start_date >= self.end_date:
            raise TypeError(
                f"LegSchedule: start_date ({self.start_date}) must be before end_date ({self.end_date})"
            )
        if self.payment_lag_days < 0:
            raise TypeError(f"LegSchedule.payment_lag_days must be >= 0, got {self.payment_lag_days}")


def _check_positive(owner: str, money: Money) -> None:
    if not isinstance(money, Money) or money.amount <= 0:
        raise TypeError(f"{owner} must be positive Money, got {money!r}")


@final
@dataclass(frozen=True, slots=True)
class FixedRateSwapLeg:
    pay_receive: PayReceive
    schedule: LegSchedule
    notional: Money
    fixed_rate: Decimal
    day_count: DayCountConvention

    def __post_init__(self) -> None:
        _check_positive("FixedRateSwapLeg.notional", self.notional)
        if not isinstance(self.fixed_rate, Decimal) or not self.fixed_rate.is_finite():
            raise TypeError(f"FixedRateSwapLeg.fixed_rate must be finite Decimal, got {self.fixed_rate!r}")


@final
@dataclass(frozen=True, slots=True)
class IborRateSwapLeg:
    """Floating leg on a term rate index.

    With reset_frequency shorter than the schedule frequency each payment
    period holds several accrual periods, each fixing separately.
    """

    pay_receive: PayReceive
    schedule: LegSchedule
    notional: Money
    index: IborIndexId
    spread: Decimal = Decimal(0)
    reset_frequency: PaymentFrequency | None = None

    def __post_init__(self) -> None:
        _check_positive("IborRateSwapLeg.notional", self.notional)
        if not isinstance(self.index, IborIndexId):
            raise TypeError(f"IborRateSwapLeg.index must be IborIndexId, got {type(self.index).__name__}")
        if (
            self.reset_frequency is not None
            and self.reset_frequency.months > self.schedule.frequency.months
        ):
            raise TypeError(
                f"IborRateSwapLeg: reset_frequency {self.reset_frequency.value} is longer "
                f"than payment frequency {self.schedule.frequency.value}"
            )


@final
@dataclass(frozen=True, slots=True)
class KnownAmountSwapLeg:
    """Leg paying the same fixed amount every period."""

    pay_receive: PayReceive
    schedule: LegSchedule
    amount: Money

    def __post_init__(self) -> None:
        _check_positive("KnownAmountSwapLeg.amount", self.amount)


type SwapLeg = FixedRateSwapLeg | IborRateSwapLeg | KnownAmountSwapLeg


@final
@dataclass(frozen=True, slots=True)
class Swap:
    legs: tuple[SwapLeg, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "legs", tuple(self.legs))
        if not self.legs:
            raise TypeError("Swap must have at least one leg")

    @property
    def start_date(self) -> date:
        return min(leg.schedule.start_date for leg in self.legs)


# ---------------------------------------------------------------------------
# Resolved form
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class FixedRateComputation:
    rate: Decimal


@final
@dataclass(frozen=True, slots=True)
class IborRateComputation:
    """Observation of ``index`` on fixing_date, already shifted on its fixing calendar."""

    index: IborIndex
    fixing_date: date


type RateComputation = FixedRateComputation | IborRateComputation


@final
@dataclass(frozen=True, slots=True)
class RateAccrualPeriod:
    start_date: date
    end_date: date
    year_fraction: Decimal
    rate_computation: RateComputation
    spread: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise TypeError(
                f"RateAccrualPeriod: start_date ({self.start_date}) must be <= end_date ({self.end_date})"
            )


@final
@dataclass(frozen=True, slots=True)
class RatePaymentPeriod:
    """One payment made up of one or more contiguous accrual periods.

    notional is signed: negative when the holder pays.
    """

    payment_date: date
    accrual_periods: tuple[RateAccrualPeriod, ...]
    notional: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "accrual_periods", tuple(self.accrual_periods))
        if not self.accrual_periods:
            raise TypeError("RatePaymentPeriod must have at least one accrual period")
        for prev, nxt in zip(self.accrual_periods, self.accrual_periods[1:], strict=False):
            if prev.end_date != nxt.start_date:
                raise TypeError(
                    f"RatePaymentPeriod: accrual periods not contiguous at {prev.end_date} / {nxt.start_date}"
                )

    @property
    def start_date(self) -> date:
        return self.accrual_periods[0].start_date

    @property
    def end_date(self) -> date:
        return self.accrual_periods[-1].end_date


@final
@dataclass(frozen=True, slots=True)
class KnownAmountPaymentPeriod:
    """Fixed signed amount paid on payment_date."""

    payment_date: date
    start_date: date
    end_date: date
    amount: Money

    @property
    def currency(self) -> Currency:
        return self.amount.currency


type PaymentPeriod = RatePaymentPeriod | KnownAmountPaymentPeriod


class SwapLegType(Enum):
    FIXED = "FIXED"
    IBOR = "IBOR"
    OTHER = "OTHER"


@final
@dataclass(frozen=True, slots=True)
class ResolvedSwapLeg:
    leg_type: SwapLegType
    pay_receive: PayReceive
    payment_periods: tuple[PaymentPeriod, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "payment_periods", tuple(self.payment_periods))
        if not self.payment_periods:
            raise TypeError("ResolvedSwapLeg must have at least one payment period")
        currencies = {p.currency for p in self.payment_periods}
        if len(currencies) != 1:
            raise TypeError(f"ResolvedSwapLeg must have a single currency, got {sorted(currencies)}")

    @property
    def currency(self) -> Currency:
        return self.payment_periods[0].currency

    @property
    def start_date(self) -> date:
        return self.payment_periods[0].start_date

    @property
    def end_date(self) -> date:
        return self.payment_periods[-1].end_date

    def indices(self) -> tuple[IborIndex, ...]:
        """Floating indices observed by this leg, first-seen order."""
        seen: dict[IborIndex, None] = {}
        for period in self.payment_periods:
            if isinstance(period, RatePaymentPeriod):
                for accrual in period.accrual_periods:
                    if isinstance(accrual.rate_computation, IborRateComputation):
                        seen.setdefault(accrual.rate_computation.index, None)
        return tuple(seen)


@final
@dataclass(frozen=True, slots=True)
class ResolvedSwap:
    legs: tuple[ResolvedSwapLeg, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "legs", tuple(self.legs))
        if not self.legs:
            raise TypeError("ResolvedSwap must have at least one leg")

    @property
    def start_date(self) -> date:
        return min(leg.start_date for leg in self.legs)

    @property
    def end_date(self) -> date:
        return max(leg.end_date for leg in self.legs)

    def all_currencies(self) -> frozenset[Currency]:
        return frozenset(leg.currency for leg in self.legs)

    def all_indices(self) -> tuple[IborIndex, ...]:
        """Every floating index across all legs, first-seen order, no repeats."""
        seen: dict[IborIndex, None] = {}
        for leg in self.legs:
            for index in leg.indices():
                seen.setdefault(index, None)
        return tuple(seen)

    def legs_of_type(self, leg_type: SwapLegType) -> tuple[ResolvedSwapLeg, ...]:
        return tuple(leg for leg in self.legs if leg.leg_type is leg_type)
