"""Swaptions: option to enter an underlying swap at expiry.

Settlement is a tagged variant: physical delivery of the swap, or a cash
amount computed by one of the market cash settlement methods.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import final

from dateutil import tz

from valuator.core.money import Currency
from valuator.core.types import BusinessDayConvention, LongShort
from valuator.product.swap import ResolvedSwap, Swap
from valuator.refdata.types import HolidayCalendarId, IborIndex

# ---------------------------------------------------------------------------
# Settlement
# ---------------------------------------------------------------------------


class CashSettlementMethod(Enum):
    PAR_YIELD = "PAR_YIELD"
    ZERO_COUPON_YIELD = "ZERO_COUPON_YIELD"
    COLLATERALIZED_CASH_PRICE = "COLLATERALIZED_CASH_PRICE"


@final
@dataclass(frozen=True, slots=True)
class PhysicalSettlement:
    """Exercise delivers the underlying swap."""


@final
@dataclass(frozen=True, slots=True)
class CashSettlement:
    """Exercise pays the swap's value in cash on settlement_date."""

    method: CashSettlementMethod
    settlement_date: date

    def __post_init__(self) -> None:
        if not isinstance(self.method, CashSettlementMethod):
            raise TypeError(f"CashSettlement.method must be CashSettlementMethod, got {self.method!r}")


type SwaptionSettlement = PhysicalSettlement | CashSettlement


def _check_settlement(owner: str, settlement: object) -> None:
    if not isinstance(settlement, PhysicalSettlement | CashSettlement):
        raise TypeError(f"{owner}.settlement must be PhysicalSettlement or CashSettlement, got {settlement!r}")


# ---------------------------------------------------------------------------
# Product form
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class Swaption:
    """Swaption before resolution.

    The expiry is given as a local date, time and IANA zone; the date is
    adjusted on expiry_calendar during resolution.
    """

    long_short: LongShort
    settlement: SwaptionSettlement
    expiry_date: date
    expiry_time: time
    expiry_zone: str
    expiry_calendar: HolidayCalendarId
    underlying: Swap
    expiry_convention: BusinessDayConvention = "MOD_FOLLOWING"

    def __post_init__(self) -> None:
        if not isinstance(self.long_short, LongShort):
            raise TypeError(f"Swaption.long_short must be LongShort, got {self.long_short!r}")
        _check_settlement("Swaption", self.settlement)
        if not isinstance(self.underlying, Swap):
            raise TypeError(f"Swaption.underlying must be Swap, got {type(self.underlying).__name__}")
        if tz.gettz(self.expiry_zone) is None:
            raise TypeError(f"Swaption.expiry_zone is not a known time zone: {self.expiry_zone!r}")
        if self.expiry_date > self.underlying.start_date:
            raise TypeError(
                f"Swaption: expiry_date ({self.expiry_date}) must not be after "
                f"underlying start ({self.underlying.start_date})"
            )


# ---------------------------------------------------------------------------
# Resolved form
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ResolvedSwaption:
    """Calculation-ready swaption.

    A snapshot: it keeps no link to the reference data it was built from,
    so later calendar changes do not reach an existing instance.
    """

    long_short: LongShort
    settlement: SwaptionSettlement
    expiry: datetime
    underlying: ResolvedSwap

    def __post_init__(self) -> None:
        if not isinstance(self.long_short, LongShort):
            raise TypeError(f"ResolvedSwaption.long_short must be LongShort, got {self.long_short!r}")
        _check_settlement("ResolvedSwaption", self.settlement)
        if not isinstance(self.expiry, datetime) or self.expiry.tzinfo is None:
            raise TypeError(f"ResolvedSwaption.expiry must be a zone-aware datetime, got {self.expiry!r}")
        if not isinstance(self.underlying, ResolvedSwap):
            raise TypeError(
                f"ResolvedSwaption.underlying must be ResolvedSwap, got {type(self.underlying).__name__}"
            )

    @property
    def expiry_date(self) -> date:
        return self.expiry.date()

    @property
    def currency(self) -> Currency:
        """The underlying's only currency. TypeError for a cross-currency underlying."""
        currencies = self.underlying.all_currencies()
        if len(currencies) != 1:
            raise TypeError(
                f"ResolvedSwaption requires a single-currency underlying, got {sorted(c.code for c in currencies)}"
            )
        (currency,) = currencies
        return currency

    @property
    def index(self) -> IborIndex:
        """First floating index of the underlying."""
        indices = self.underlying.all_indices()
        if not indices:
            raise TypeError("ResolvedSwaption underlying has no floating rate index")
        return indices[0]

    @property
    def settlement_date(self) -> date:
        """Cash settlement date, or the underlying's start for physical delivery."""
        match self.settlement:
            case CashSettlement(settlement_date=d):
                return d
            case PhysicalSettlement():
                return self.underlying.start_date
