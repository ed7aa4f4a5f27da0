"""Resolution: Product + ReferenceData -> ResolvedProduct.

All calendar and index lookups happen here, exactly once. The functions are
pure: the result depends only on the product and the reference data passed
in, so resolving twice gives equal values.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

from dateutil import tz
from dateutil.relativedelta import relativedelta

from valuator.core.calendar import HolidayCalendar, day_count_fraction
from valuator.core.errors import UnsupportedProductError, ValuationError
from valuator.core.result import Err, Ok, sequence
from valuator.product.equity import EquityFuture
from valuator.product.swap import (
    FixedRateComputation,
    FixedRateSwapLeg,
    IborRateComputation,
    IborRateSwapLeg,
    KnownAmountPaymentPeriod,
    KnownAmountSwapLeg,
    LegSchedule,
    PaymentPeriod,
    RateAccrualPeriod,
    RatePaymentPeriod,
    ResolvedSwap,
    ResolvedSwapLeg,
    Swap,
    SwapLeg,
    SwapLegType,
)
from valuator.product.swaption import ResolvedSwaption, Swaption
from valuator.product.types import Product, ResolvedProduct
from valuator.refdata.reference_data import ReferenceData
from valuator.refdata.types import HolidayCalendarId

logger = logging.getLogger(__name__)

type ResolveResult[T] = Ok[T] | Err[ValuationError]


def resolve(product: Product, reference_data: ReferenceData) -> ResolveResult[ResolvedProduct]:
    """Resolve any product variant.

    Err carries the first missing identifier (ReferenceDataNotFoundError),
    or a leg whose schedule adjusts to no period at all. An unknown variant
    is a programming error and raises UnsupportedProductError.
    """
    match product:
        case EquityFuture():
            return Ok(product)
        case Swap():
            return resolve_swap(product, reference_data)
        case Swaption():
            return resolve_swaption(product, reference_data)
        case _:
            raise UnsupportedProductError(type(product), handler="resolver")


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------


def _unadjusted_boundaries(start: date, end: date, months: int) -> list[date]:
    """Period boundaries rolled from start, each step measured from start.

    A month-end start stays at month end: Jan 31, Feb 28, Mar 31.
    """
    boundaries = [start]
    step = 1
    while True:
        nxt = start + relativedelta(months=months * step)
        if nxt >= end:
            break
        boundaries.append(nxt)
        step += 1
    boundaries.append(end)
    return boundaries


def _adjusted_periods(
    boundaries: list[date], schedule: LegSchedule, calendar: HolidayCalendar,
) -> list[tuple[date, date]]:
    adjusted = [calendar.adjust(d, schedule.convention) for d in boundaries]
    # Adjustment can fold two boundaries onto one business day; drop the empty period.
    return [(s, e) for s, e in zip(adjusted, adjusted[1:], strict=False) if s < e]


def _leg(
    leg_type: SwapLegType, leg: SwapLeg, periods: tuple[PaymentPeriod, ...],
) -> ResolveResult[ResolvedSwapLeg]:
    if not periods:
        schedule = leg.schedule
        return Err(ValuationError(
            message=(
                f"{type(leg).__name__} from {schedule.start_date} to {schedule.end_date} "
                f"has no payment period after {schedule.convention} adjustment"
            ),
            code="EMPTY_SCHEDULE",
            source="valuator.product.resolve.resolve_leg",
        ))
    return Ok(ResolvedSwapLeg(leg_type=leg_type, pay_receive=leg.pay_receive, payment_periods=periods))


def _lookup_calendar(
    reference_data: ReferenceData, calendar_id: HolidayCalendarId,
) -> ResolveResult[HolidayCalendar]:
    return reference_data.lookup(calendar_id)


# ---------------------------------------------------------------------------
# Legs
# ---------------------------------------------------------------------------


def _resolve_fixed_leg(
    leg: FixedRateSwapLeg, reference_data: ReferenceData,
) -> ResolveResult[ResolvedSwapLeg]:
    match _lookup_calendar(reference_data, leg.schedule.calendar):
        case Err() as err:
            return err
        case Ok(calendar):
            pass
    schedule = leg.schedule
    boundaries = _unadjusted_boundaries(schedule.start_date, schedule.end_date, schedule.frequency.months)
    notional = leg.notional.amount * leg.pay_receive.sign
    periods: list[PaymentPeriod] = []
    for start, end in _adjusted_periods(boundaries, schedule, calendar):
        accrual = RateAccrualPeriod(
            start_date=start,
            end_date=end,
            year_fraction=day_count_fraction(start, end, leg.day_count),
            rate_computation=FixedRateComputation(rate=leg.fixed_rate),
        )
        periods.append(RatePaymentPeriod(
            payment_date=calendar.add_business_days(end, schedule.payment_lag_days),
            accrual_periods=(accrual,),
            notional=notional,
            currency=leg.notional.currency,
        ))
    return _leg(SwapLegType.FIXED, leg, tuple(periods))


def _resolve_ibor_leg(
    leg: IborRateSwapLeg, reference_data: ReferenceData,
) -> ResolveResult[ResolvedSwapLeg]:
    match _lookup_calendar(reference_data, leg.schedule.calendar):
        case Err() as err:
            return err
        case Ok(calendar):
            pass
    match reference_data.lookup(leg.index):
        case Err() as err:
            return err
        case Ok(index):
            pass
    match _lookup_calendar(reference_data, index.fixing_calendar):
        case Err() as err:
            return err
        case Ok(fixing_calendar):
            pass

    schedule = leg.schedule
    reset_months = (leg.reset_frequency or schedule.frequency).months
    notional = leg.notional.amount * leg.pay_receive.sign
    payment_boundaries = _unadjusted_boundaries(
        schedule.start_date, schedule.end_date, schedule.frequency.months,
    )
    periods: list[PaymentPeriod] = []
    for raw_start, raw_end in zip(payment_boundaries, payment_boundaries[1:], strict=False):
        reset_boundaries = _unadjusted_boundaries(raw_start, raw_end, reset_months)
        accruals = tuple(
            RateAccrualPeriod(
                start_date=start,
                end_date=end,
                year_fraction=day_count_fraction(start, end, index.day_count),
                rate_computation=IborRateComputation(
                    index=index,
                    fixing_date=fixing_calendar.add_business_days(start, index.fixing_offset_days),
                ),
                spread=leg.spread,
            )
            for start, end in _adjusted_periods(reset_boundaries, schedule, calendar)
        )
        if not accruals:
            continue
        periods.append(RatePaymentPeriod(
            payment_date=calendar.add_business_days(accruals[-1].end_date, schedule.payment_lag_days),
            accrual_periods=accruals,
            notional=notional,
            currency=leg.notional.currency,
        ))
    return _leg(SwapLegType.IBOR, leg, tuple(periods))


def _resolve_known_amount_leg(
    leg: KnownAmountSwapLeg, reference_data: ReferenceData,
) -> ResolveResult[ResolvedSwapLeg]:
    match _lookup_calendar(reference_data, leg.schedule.calendar):
        case Err() as err:
            return err
        case Ok(calendar):
            pass
    schedule = leg.schedule
    boundaries = _unadjusted_boundaries(schedule.start_date, schedule.end_date, schedule.frequency.months)
    signed = leg.amount.mul(Decimal(leg.pay_receive.sign))
    periods = tuple(
        KnownAmountPaymentPeriod(
            payment_date=calendar.add_business_days(end, schedule.payment_lag_days),
            start_date=start,
            end_date=end,
            amount=signed,
        )
        for start, end in _adjusted_periods(boundaries, schedule, calendar)
    )
    return _leg(SwapLegType.OTHER, leg, periods)


def resolve_leg(leg: SwapLeg, reference_data: ReferenceData) -> ResolveResult[ResolvedSwapLeg]:
    match leg:
        case FixedRateSwapLeg():
            return _resolve_fixed_leg(leg, reference_data)
        case IborRateSwapLeg():
            return _resolve_ibor_leg(leg, reference_data)
        case KnownAmountSwapLeg():
            return _resolve_known_amount_leg(leg, reference_data)
        case _:
            raise UnsupportedProductError(type(leg), handler="resolver")


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def resolve_swap(swap: Swap, reference_data: ReferenceData) -> ResolveResult[ResolvedSwap]:
    match sequence(resolve_leg(leg, reference_data) for leg in swap.legs):
        case Err() as err:
            logger.debug("Swap resolution failed: %s", err.error.message)
            return err
        case Ok(legs):
            logger.debug("Resolved swap with %d legs", len(legs))
            return Ok(ResolvedSwap(legs=legs))


def resolve_swaption(
    swaption: Swaption, reference_data: ReferenceData,
) -> ResolveResult[ResolvedSwaption]:
    match _lookup_calendar(reference_data, swaption.expiry_calendar):
        case Err() as err:
            return err
        case Ok(expiry_calendar):
            pass
    underlying_result = resolve_swap(swaption.underlying, reference_data).map_err(
        lambda e: e.with_context("Swaption underlying"),
    )
    match underlying_result:
        case Err() as err:
            return err
        case Ok(underlying):
            pass
    expiry_date = expiry_calendar.adjust(swaption.expiry_date, swaption.expiry_convention)
    expiry = datetime.combine(expiry_date, swaption.expiry_time, tzinfo=tz.gettz(swaption.expiry_zone))
    return Ok(ResolvedSwaption(
        long_short=swaption.long_short,
        settlement=swaption.settlement,
        expiry=expiry,
        underlying=underlying,
    ))
