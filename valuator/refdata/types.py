"""Reference data identifiers and the values they resolve to.

Identifiers are small hashable values; each knows the type of the value it
names so that reference data can be checked once, on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from valuator.core.calendar import HolidayCalendar
from valuator.core.money import Currency
from valuator.core.result import Err, Ok
from valuator.core.types import DayCountConvention


@final
@dataclass(frozen=True, slots=True, order=True)
class HolidayCalendarId:
    """Names a HolidayCalendar, e.g. ``HolidayCalendarId("USNY")``."""

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError("HolidayCalendarId.name must be a non-empty string")

    @property
    def value_type(self) -> type[HolidayCalendar]:
        return HolidayCalendar

    def __str__(self) -> str:
        return self.name


@final
@dataclass(frozen=True, slots=True, order=True)
class IborIndexId:
    """Names an IborIndex, e.g. ``IborIndexId("USD-LIBOR-3M")``."""

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise TypeError("IborIndexId.name must be a non-empty string")

    @property
    def value_type(self) -> type[IborIndex]:
        return IborIndex

    def __str__(self) -> str:
        return self.name


type ReferenceDataId = HolidayCalendarId | IborIndexId


@final
@dataclass(frozen=True, slots=True)
class IborIndex:
    """Term deposit rate index.

    fixing_offset_days is signed: -2 means the rate fixes two business days
    before the accrual start on fixing_calendar.
    """

    name: str
    currency: Currency
    day_count: DayCountConvention
    fixing_calendar: HolidayCalendarId
    fixing_offset_days: int
    tenor_months: int

    def __post_init__(self) -> None:
        if not self.name:
            raise TypeError("IborIndex.name must be non-empty")
        if not isinstance(self.currency, Currency):
            raise TypeError(f"IborIndex.currency must be Currency, got {type(self.currency).__name__}")
        if self.tenor_months <= 0:
            raise TypeError(f"IborIndex.tenor_months must be > 0, got {self.tenor_months}")

    @property
    def id(self) -> IborIndexId:
        return IborIndexId(self.name)

    @staticmethod
    def create(
        name: str,
        currency: str,
        day_count: DayCountConvention,
        fixing_calendar: str,
        fixing_offset_days: int = -2,
        tenor_months: int = 3,
    ) -> Ok[IborIndex] | Err[str]:
        if not name:
            return Err("IborIndex.name must be non-empty")
        if tenor_months <= 0:
            return Err(f"IborIndex.tenor_months must be > 0, got {tenor_months}")
        match Currency.parse(currency):
            case Err(e):
                return Err(f"IborIndex.currency: {e}")
            case Ok(ccy):
                pass
        if not fixing_calendar:
            return Err("IborIndex.fixing_calendar must be non-empty")
        return Ok(IborIndex(
            name=name,
            currency=ccy,
            day_count=day_count,
            fixing_calendar=HolidayCalendarId(fixing_calendar),
            fixing_offset_days=fixing_offset_days,
            tenor_months=tenor_months,
        ))

    def __str__(self) -> str:
        return self.name
