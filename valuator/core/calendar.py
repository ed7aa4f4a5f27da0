"""Holiday calendars, business day adjustment and day count fractions.

HolidayCalendar is a plain value: resolution looks one up from reference
data and passes it in explicitly. There is no process-wide calendar.
"""

from __future__ import annotations

import calendar as _cal
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, localcontext
from typing import assert_never, final

from valuator.core.money import VALUATION_DECIMAL_CONTEXT
from valuator.core.types import BusinessDayConvention, DayCountConvention

_ONE_DAY = timedelta(days=1)

# ---------------------------------------------------------------------------
# Holiday calendar
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class HolidayCalendar:
    """Named set of non-business days.

    weekend_days uses date.weekday() numbering (Mon=0 .. Sun=6).
    """

    name: str
    holidays: frozenset[date] = frozenset()
    weekend_days: frozenset[int] = field(default=frozenset({5, 6}))

    def __post_init__(self) -> None:
        if not self.name:
            raise TypeError("HolidayCalendar.name must be non-empty")
        if not isinstance(self.holidays, frozenset):
            object.__setattr__(self, "holidays", frozenset(self.holidays))
        if not isinstance(self.weekend_days, frozenset):
            object.__setattr__(self, "weekend_days", frozenset(self.weekend_days))
        if any(not 0 <= d <= 6 for d in self.weekend_days):
            raise TypeError(f"HolidayCalendar.weekend_days must be 0..6, got {sorted(self.weekend_days)}")
        if len(self.weekend_days) == 7:
            raise TypeError("HolidayCalendar must have at least one business weekday")

    @staticmethod
    def weekends_only(name: str = "WEEKENDS") -> HolidayCalendar:
        return HolidayCalendar(name=name)

    @staticmethod
    def of(name: str, holidays: Iterable[date]) -> HolidayCalendar:
        return HolidayCalendar(name=name, holidays=frozenset(holidays))

    def is_business_day(self, d: date) -> bool:
        return d.weekday() not in self.weekend_days and d not in self.holidays

    def next_business_day(self, d: date) -> date:
        """First business day strictly after d."""
        result = d + _ONE_DAY
        while not self.is_business_day(result):
            result += _ONE_DAY
        return result

    def previous_business_day(self, d: date) -> date:
        """Last business day strictly before d."""
        result = d - _ONE_DAY
        while not self.is_business_day(result):
            result -= _ONE_DAY
        return result

    def adjust(self, d: date, convention: BusinessDayConvention) -> date:
        """Adjust a date according to a business day convention.

        MOD_FOLLOWING: move to next business day, unless that crosses a month
                       boundary, in which case move to previous business day.
        FOLLOWING: move to next business day.
        PRECEDING: move to previous business day.
        NONE: no adjustment.
        """
        if convention == "NONE" or self.is_business_day(d):
            return d
        match convention:
            case "FOLLOWING":
                return self.next_business_day(d)
            case "PRECEDING":
                return self.previous_business_day(d)
            case "MOD_FOLLOWING":
                result = self.next_business_day(d)
                if result.month != d.month:
                    return self.previous_business_day(d)
                return result
            case _never:
                assert_never(_never)

    def add_business_days(self, start: date, days: int) -> date:
        """Move ``days`` business days from start; negative moves backwards.

        Zero returns start unchanged even if it is a holiday.
        """
        current = start
        step = self.next_business_day if days >= 0 else self.previous_business_day
        for _ in range(abs(days)):
            current = step(current)
        return current


# ---------------------------------------------------------------------------
# Day count fraction computation
# ---------------------------------------------------------------------------


def _days_in_year(y: int) -> int:
    return 366 if _cal.isleap(y) else 365


def _act_act_isda(start: date, end: date) -> Decimal:
    """ACT/ACT.ISDA: actual days / actual days in year, split across year boundaries."""
    total = Decimal(0)
    current = start
    while current.year < end.year:
        year_end = date(current.year + 1, 1, 1)
        total += Decimal((year_end - current).days) / Decimal(_days_in_year(current.year))
        current = year_end
    remaining = (end - current).days
    if remaining > 0:
        total += Decimal(remaining) / Decimal(_days_in_year(current.year))
    return total


def day_count_fraction(
    start: date, end: date, convention: DayCountConvention,
) -> Decimal:
    """Compute year fraction for the accrual period [start, end).

    Precondition: start <= end. Raises TypeError otherwise.
    """
    if start > end:
        raise TypeError(
            f"day_count_fraction: start ({start}) must be <= end ({end})"
        )
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        match convention:
            case DayCountConvention.ACT_360:
                return Decimal((end - start).days) / Decimal(360)
            case DayCountConvention.ACT_365F:
                return Decimal((end - start).days) / Decimal(365)
            case DayCountConvention.THIRTY_360:
                # ISDA 2006 4.16(f) bond basis
                d1 = min(start.day, 30)
                d2 = 30 if (end.day == 31 and d1 >= 30) else end.day
                days = 360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)
                return Decimal(days) / Decimal(360)
            case DayCountConvention.ACT_ACT_ISDA:
                return _act_act_isda(start, end)
            case _never:
                assert_never(_never)


def year_fraction_act_365(start: date, end: date) -> Decimal:
    """Signed ACT/365F time between two dates, used for discounting and option expiry."""
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        return Decimal((end - start).days) / Decimal(365)
