"""Discounting pricers for swap payment periods and the period dispatcher."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from types import MappingProxyType
from typing import Any, final

from valuator.core.errors import UnsupportedProductError
from valuator.core.money import VALUATION_DECIMAL_CONTEXT, Money
from valuator.pricing.protocols import PaymentPeriodPricer, PricingEnvironment
from valuator.product.swap import (
    FixedRateComputation,
    IborRateComputation,
    KnownAmountPaymentPeriod,
    PaymentPeriod,
    RateAccrualPeriod,
    RateComputation,
    RatePaymentPeriod,
)
from valuator.report.explain import ExplainKey, ExplainRow


def observed_rate(env: PricingEnvironment, computation: RateComputation) -> Decimal:
    """Rate for one accrual, before spread.

    Ibor: the published fixing once the fixing date has been reached and a
    fixing exists, the forward rate otherwise.
    """
    match computation:
        case FixedRateComputation(rate=rate):
            return rate
        case IborRateComputation(index=index, fixing_date=fixing_date):
            if fixing_date <= env.valuation_date:
                fixed = env.fixing(index, fixing_date)
                if fixed is not None:
                    return fixed
            return env.forward_rate(index, fixing_date)
        case _:
            raise UnsupportedProductError(type(computation), handler="rate observation")


def _accrual_forecast(notional: Decimal, rate: Decimal, accrual: RateAccrualPeriod) -> Decimal:
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        return notional * (rate + accrual.spread) * accrual.year_fraction


@final
class DiscountingRatePaymentPeriodPricer:
    """Forecast = sum over accruals of notional * (rate + spread) * year fraction."""

    def forecast_value(self, env: PricingEnvironment, period: RatePaymentPeriod) -> Money:
        total = Decimal(0)
        for accrual in period.accrual_periods:
            rate = observed_rate(env, accrual.rate_computation)
            with localcontext(VALUATION_DECIMAL_CONTEXT):
                total += _accrual_forecast(period.notional, rate, accrual)
        return Money(amount=total, currency=period.currency)

    def future_value(self, env: PricingEnvironment, period: RatePaymentPeriod) -> Money:
        return self.forecast_value(env, period)

    def present_value(self, env: PricingEnvironment, period: RatePaymentPeriod) -> Money:
        df = env.discount_factor(period.currency, period.payment_date)
        return self.forecast_value(env, period).mul(df)

    def explain_rows(self, env: PricingEnvironment, period: RatePaymentPeriod) -> list[ExplainRow]:
        """One row per accrual (reset); rows of one period stay together."""
        df = env.discount_factor(period.currency, period.payment_date)
        rows: list[ExplainRow] = []
        for accrual in period.accrual_periods:
            computation = accrual.rate_computation
            rate = observed_rate(env, computation)
            forecast = _accrual_forecast(period.notional, rate, accrual)
            with localcontext(VALUATION_DECIMAL_CONTEXT):
                pv = forecast * df
            row: dict[ExplainKey, object] = {
                ExplainKey.ENTRY_TYPE: "RateAccrualPeriod",
                ExplainKey.PAYMENT_DATE: period.payment_date,
                ExplainKey.START_DATE: accrual.start_date,
                ExplainKey.END_DATE: accrual.end_date,
                ExplainKey.CURRENCY: period.currency.code,
                ExplainKey.NOTIONAL: period.notional,
                ExplainKey.ACCRUAL_YEAR_FRACTION: accrual.year_fraction,
                ExplainKey.FORECAST_VALUE: forecast,
                ExplainKey.DISCOUNT_FACTOR: df,
                ExplainKey.PRESENT_VALUE: pv,
            }
            match computation:
                case FixedRateComputation():
                    row[ExplainKey.FIXED_RATE] = rate
                case IborRateComputation(index=index, fixing_date=fixing_date):
                    row[ExplainKey.INDEX] = index.name
                    row[ExplainKey.FIXING_DATE] = fixing_date
                    row[ExplainKey.FORWARD_RATE] = rate
                    row[ExplainKey.SPREAD] = accrual.spread
            rows.append(row)
        return rows


@final
class DiscountingKnownAmountPaymentPeriodPricer:
    def future_value(self, env: PricingEnvironment, period: KnownAmountPaymentPeriod) -> Money:  # noqa: ARG002
        return period.amount

    def present_value(self, env: PricingEnvironment, period: KnownAmountPaymentPeriod) -> Money:
        return period.amount.mul(env.discount_factor(period.currency, period.payment_date))

    def explain_rows(self, env: PricingEnvironment, period: KnownAmountPaymentPeriod) -> list[ExplainRow]:
        df = env.discount_factor(period.currency, period.payment_date)
        return [{
            ExplainKey.ENTRY_TYPE: "KnownAmountPaymentPeriod",
            ExplainKey.PAYMENT_DATE: period.payment_date,
            ExplainKey.START_DATE: period.start_date,
            ExplainKey.END_DATE: period.end_date,
            ExplainKey.CURRENCY: period.currency.code,
            ExplainKey.FORECAST_VALUE: period.amount.amount,
            ExplainKey.DISCOUNT_FACTOR: df,
            ExplainKey.PRESENT_VALUE: period.amount.mul(df).amount,
        }]


def _default_period_pricers() -> dict[type, PaymentPeriodPricer[Any]]:
    return {
        RatePaymentPeriod: DiscountingRatePaymentPeriodPricer(),
        KnownAmountPaymentPeriod: DiscountingKnownAmountPaymentPeriodPricer(),
    }


@final
@dataclass(frozen=True, slots=True, eq=False)
class DispatchingPaymentPeriodPricer:
    """Routes each payment period to the pricer registered for its exact type."""

    pricers: Mapping[type, PaymentPeriodPricer[Any]] = field(default_factory=_default_period_pricers)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pricers", MappingProxyType(dict(self.pricers)))

    def _pricer_for(self, period: PaymentPeriod) -> PaymentPeriodPricer[Any]:
        pricer = self.pricers.get(type(period))
        if pricer is None:
            raise UnsupportedProductError(type(period), handler="payment period pricer")
        return pricer

    def present_value(self, env: PricingEnvironment, period: PaymentPeriod) -> Money:
        return self._pricer_for(period).present_value(env, period)

    def future_value(self, env: PricingEnvironment, period: PaymentPeriod) -> Money:
        return self._pricer_for(period).future_value(env, period)

    def explain_rows(self, env: PricingEnvironment, period: PaymentPeriod) -> list[ExplainRow]:
        return list(self._pricer_for(period).explain_rows(env, period))


DEFAULT_PERIOD_PRICER = DispatchingPaymentPeriodPricer()
