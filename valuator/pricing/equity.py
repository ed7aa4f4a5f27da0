"""Discounting pricer for equity futures."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import localcontext
from typing import ClassVar, final

from valuator.core.money import VALUATION_DECIMAL_CONTEXT, Money
from valuator.pricing.protocols import PricingEnvironment
from valuator.product.equity import EquityFuture
from valuator.report.explain import ExplainKey, ExplainRow


@final
class DiscountingEquityFuturePricer:
    """Value of a long position of one contract.

    future value = (forward price at expiration - strike) * unit amount
    present value = future value * discount factor to settlement
    """

    columns: ClassVar[tuple[ExplainKey, ...]] = (
        ExplainKey.ENTRY_TYPE,
        ExplainKey.UNDERLYING,
        ExplainKey.EXPIRY_DATE,
        ExplainKey.SETTLEMENT_DATE,
        ExplainKey.CURRENCY,
        ExplainKey.UNIT_AMOUNT,
        ExplainKey.STRIKE,
        ExplainKey.FORWARD_PRICE,
        ExplainKey.FORECAST_VALUE,
        ExplainKey.DISCOUNT_FACTOR,
        ExplainKey.PRESENT_VALUE,
    )

    def future_value(self, env: PricingEnvironment, product: EquityFuture) -> Money:
        forward = env.forward_price(product.underlying_id, product.expiration_date)
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            return product.unit_amount.mul(forward - product.strike_price)

    def present_value(self, env: PricingEnvironment, product: EquityFuture) -> Money:
        df = env.discount_factor(product.currency, product.settlement_date)
        return self.future_value(env, product).mul(df)

    def explain_rows(self, env: PricingEnvironment, product: EquityFuture) -> Sequence[ExplainRow]:
        forward = env.forward_price(product.underlying_id, product.expiration_date)
        df = env.discount_factor(product.currency, product.settlement_date)
        fv = self.future_value(env, product)
        return [{
            ExplainKey.ENTRY_TYPE: "EquityFuture",
            ExplainKey.UNDERLYING: product.underlying_id,
            ExplainKey.EXPIRY_DATE: product.expiration_date,
            ExplainKey.SETTLEMENT_DATE: product.settlement_date,
            ExplainKey.CURRENCY: product.currency.code,
            ExplainKey.UNIT_AMOUNT: product.unit_amount.amount,
            ExplainKey.STRIKE: product.strike_price,
            ExplainKey.FORWARD_PRICE: forward,
            ExplainKey.FORECAST_VALUE: fv.amount,
            ExplainKey.DISCOUNT_FACTOR: df,
            ExplainKey.PRESENT_VALUE: fv.mul(df).amount,
        }]
