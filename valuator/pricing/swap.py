"""Discounting pricer for resolved swaps."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar, final

from valuator.core.money import Currency, Money, sum_money
from valuator.pricing.period import DEFAULT_PERIOD_PRICER, DispatchingPaymentPeriodPricer
from valuator.pricing.protocols import PricingEnvironment
from valuator.product.swap import ResolvedSwap, ResolvedSwapLeg
from valuator.report.explain import ExplainKey, ExplainRow


def swap_currency(swap: ResolvedSwap) -> Currency:
    """Single currency of the swap. TypeError for a cross-currency swap."""
    currencies = swap.all_currencies()
    if len(currencies) != 1:
        raise TypeError(
            f"Swap pricing requires a single currency, got {sorted(c.code for c in currencies)}"
        )
    (currency,) = currencies
    return currency


@final
@dataclass(frozen=True, slots=True, eq=False)
class DiscountingSwapPricer:
    """Sum of every leg's payment periods, each priced by the period dispatcher."""

    period_pricer: DispatchingPaymentPeriodPricer = field(default=DEFAULT_PERIOD_PRICER)

    columns: ClassVar[tuple[ExplainKey, ...]] = (
        ExplainKey.ENTRY_TYPE,
        ExplainKey.LEG,
        ExplainKey.PAYMENT_DATE,
        ExplainKey.START_DATE,
        ExplainKey.END_DATE,
        ExplainKey.FIXING_DATE,
        ExplainKey.INDEX,
        ExplainKey.CURRENCY,
        ExplainKey.NOTIONAL,
        ExplainKey.ACCRUAL_YEAR_FRACTION,
        ExplainKey.FIXED_RATE,
        ExplainKey.FORWARD_RATE,
        ExplainKey.SPREAD,
        ExplainKey.FORECAST_VALUE,
        ExplainKey.DISCOUNT_FACTOR,
        ExplainKey.PRESENT_VALUE,
    )

    def leg_present_value(self, env: PricingEnvironment, leg: ResolvedSwapLeg) -> Money:
        return sum_money(
            leg.currency, [self.period_pricer.present_value(env, p) for p in leg.payment_periods],
        )

    def leg_future_value(self, env: PricingEnvironment, leg: ResolvedSwapLeg) -> Money:
        return sum_money(
            leg.currency, [self.period_pricer.future_value(env, p) for p in leg.payment_periods],
        )

    def present_value(self, env: PricingEnvironment, product: ResolvedSwap) -> Money:
        currency = swap_currency(product)
        return sum_money(currency, [self.leg_present_value(env, leg) for leg in product.legs])

    def future_value(self, env: PricingEnvironment, product: ResolvedSwap) -> Money:
        """Undiscounted sum of every payment, each as of its own payment date."""
        currency = swap_currency(product)
        return sum_money(currency, [self.leg_future_value(env, leg) for leg in product.legs])

    def explain_rows(self, env: PricingEnvironment, product: ResolvedSwap) -> list[ExplainRow]:
        """Payment periods across all legs in payment-date order.

        Sorting moves whole periods, so the accrual rows of one period stay
        adjacent. The sort is stable: ties keep leg order.
        """
        swap_currency(product)
        blocks: list[tuple[tuple[date, date], list[ExplainRow]]] = []
        for leg in product.legs:
            for period in leg.payment_periods:
                rows = [
                    {**row, ExplainKey.LEG: leg.pay_receive.value}
                    for row in self.period_pricer.explain_rows(env, period)
                ]
                blocks.append(((period.payment_date, period.start_date), rows))
        blocks.sort(key=lambda block: block[0])
        return [row for _, rows in blocks for row in rows]
