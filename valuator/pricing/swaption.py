"""Normal (Bachelier) model pricer for European swaptions.

The underlying must be a vanilla swap: one fixed leg and one Ibor leg in a
single currency. Payer or receiver follows the fixed leg: paying fixed is a
payer swaption.

    value = w * (F - K) * N(w * d) + s * sqrt(T) * n(d),   d = (F - K) / (s * sqrt(T))

with F the forward swap rate, K the fixed rate, s the normal volatility and
T the ACT/365F time to expiry. The option value is scaled by the annuity of
the settlement method.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, localcontext
from typing import ClassVar, assert_never, final

from valuator.core.calendar import year_fraction_act_365
from valuator.core.decimal_math import exp_d, ln_d, norm_cdf_d, norm_pdf_d, sqrt_d
from valuator.core.money import VALUATION_DECIMAL_CONTEXT, Currency, Money
from valuator.core.types import PayReceive
from valuator.pricing.period import DEFAULT_PERIOD_PRICER, DispatchingPaymentPeriodPricer
from valuator.pricing.protocols import PricingEnvironment
from valuator.product.swap import (
    FixedRateComputation,
    RatePaymentPeriod,
    SwapLegType,
)
from valuator.product.swaption import (
    CashSettlement,
    CashSettlementMethod,
    PhysicalSettlement,
    ResolvedSwaption,
)
from valuator.report.explain import ExplainKey, ExplainRow

_ZERO = Decimal(0)
_ONE = Decimal(1)


@final
@dataclass(frozen=True, slots=True)
class _VanillaTerms:
    """What the model needs from the underlying, computed once per call."""

    currency: Currency
    fixed_periods: tuple[RatePaymentPeriod, ...]
    strike: Decimal
    notional: Decimal  # absolute
    pvbp: Decimal
    forward: Decimal
    omega: int  # +1 payer, -1 receiver


@final
@dataclass(frozen=True, slots=True)
class _OptionValue:
    time_to_expiry: Decimal
    volatility: Decimal
    annuity: Decimal
    unit_value: Decimal  # option value per unit annuity
    present_value: Decimal


def _period_year_fraction(period: RatePaymentPeriod) -> Decimal:
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        return sum((a.year_fraction for a in period.accrual_periods), _ZERO)


def bachelier_value(forward: Decimal, strike: Decimal, vol: Decimal, t: Decimal, omega: int) -> Decimal:
    """Undiscounted normal-model option value per unit annuity.

    At or after expiry, or with zero volatility, this is the intrinsic value.
    """
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        moneyness = Decimal(omega) * (forward - strike)
        if t <= _ZERO or vol == _ZERO:
            return max(moneyness, _ZERO)
        std_dev = vol * sqrt_d(t)
        d = moneyness / std_dev
        return moneyness * norm_cdf_d(d) + std_dev * norm_pdf_d(d)


@final
@dataclass(frozen=True, slots=True, eq=False)
class NormalSwaptionPricer:
    period_pricer: DispatchingPaymentPeriodPricer = field(default=DEFAULT_PERIOD_PRICER)

    columns: ClassVar[tuple[ExplainKey, ...]] = (
        ExplainKey.ENTRY_TYPE,
        ExplainKey.EXPIRY_DATE,
        ExplainKey.SETTLEMENT_DATE,
        ExplainKey.PAYMENT_DATE,
        ExplainKey.START_DATE,
        ExplainKey.END_DATE,
        ExplainKey.INDEX,
        ExplainKey.CURRENCY,
        ExplainKey.NOTIONAL,
        ExplainKey.ACCRUAL_YEAR_FRACTION,
        ExplainKey.TIME_TO_EXPIRY,
        ExplainKey.FORWARD_SWAP_RATE,
        ExplainKey.STRIKE,
        ExplainKey.VOLATILITY,
        ExplainKey.DISCOUNT_FACTOR,
        ExplainKey.ANNUITY,
        ExplainKey.PRESENT_VALUE,
    )

    # -- underlying --

    def _vanilla_terms(self, env: PricingEnvironment, product: ResolvedSwaption) -> _VanillaTerms:
        currency = product.currency
        fixed_legs = product.underlying.legs_of_type(SwapLegType.FIXED)
        ibor_legs = product.underlying.legs_of_type(SwapLegType.IBOR)
        if len(fixed_legs) != 1 or len(ibor_legs) != 1 or len(product.underlying.legs) != 2:
            raise TypeError("NormalSwaptionPricer requires one fixed leg and one Ibor leg")
        fixed_leg, ibor_leg = fixed_legs[0], ibor_legs[0]
        if fixed_leg.pay_receive is ibor_leg.pay_receive:
            raise TypeError("NormalSwaptionPricer requires legs in opposite directions")

        fixed_periods: list[RatePaymentPeriod] = []
        for period in fixed_leg.payment_periods:
            if not isinstance(period, RatePaymentPeriod):
                raise TypeError("NormalSwaptionPricer: fixed leg must hold rate payment periods")
            fixed_periods.append(period)
        first = fixed_periods[0].accrual_periods[0].rate_computation
        if not isinstance(first, FixedRateComputation):
            raise TypeError("NormalSwaptionPricer: fixed leg must observe a fixed rate")

        with localcontext(VALUATION_DECIMAL_CONTEXT):
            notional = abs(fixed_periods[0].notional)
            pvbp = _ZERO
            for period in fixed_periods:
                df = env.discount_factor(currency, period.payment_date)
                pvbp += _period_year_fraction(period) * df * abs(period.notional)
            float_pv = sum(
                (self.period_pricer.present_value(env, p).amount for p in ibor_leg.payment_periods),
                _ZERO,
            )
            forward = float_pv * Decimal(ibor_leg.pay_receive.sign) / pvbp

        return _VanillaTerms(
            currency=currency,
            fixed_periods=tuple(fixed_periods),
            strike=first.rate,
            notional=notional,
            pvbp=pvbp,
            forward=forward,
            omega=1 if fixed_leg.pay_receive is PayReceive.PAY else -1,
        )

    # -- annuity --

    def _cash_annuity(
        self, env: PricingEnvironment, terms: _VanillaTerms, settlement: CashSettlement,
    ) -> Decimal:
        df_settle = env.discount_factor(terms.currency, settlement.settlement_date)
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            match settlement.method:
                case CashSettlementMethod.COLLATERALIZED_CASH_PRICE:
                    return terms.pvbp
                case CashSettlementMethod.PAR_YIELD:
                    # sum_i tau_i / prod_{j<=i} (1 + tau_j * F)
                    total = _ZERO
                    growth = _ONE
                    for period in terms.fixed_periods:
                        tau = _period_year_fraction(period)
                        growth = growth * (_ONE + tau * terms.forward)
                        total += tau / growth
                    return total * terms.notional * df_settle
                case CashSettlementMethod.ZERO_COUPON_YIELD:
                    # (1 - (1 + F)^-T) / F over the total accrual time T
                    tenor = sum((_period_year_fraction(p) for p in terms.fixed_periods), _ZERO)
                    if terms.forward == _ZERO:
                        factor = tenor
                    else:
                        factor = (_ONE - exp_d(-tenor * ln_d(_ONE + terms.forward))) / terms.forward
                    return factor * terms.notional * df_settle
                case _never:
                    assert_never(_never)

    def _annuity(self, env: PricingEnvironment, product: ResolvedSwaption, terms: _VanillaTerms) -> Decimal:
        match product.settlement:
            case PhysicalSettlement():
                return terms.pvbp
            case CashSettlement() as cash:
                return self._cash_annuity(env, terms, cash)
            case _never:
                assert_never(_never)

    # -- valuation --

    def _value(self, env: PricingEnvironment, product: ResolvedSwaption) -> tuple[_VanillaTerms, _OptionValue]:
        terms = self._vanilla_terms(env, product)
        t = year_fraction_act_365(env.valuation_date, product.expiry_date)
        tenor_years = year_fraction_act_365(product.underlying.start_date, product.underlying.end_date)
        vol = env.normal_volatility(product.index, product.expiry_date, tenor_years)
        annuity = self._annuity(env, product, terms)
        unit_value = bachelier_value(terms.forward, terms.strike, vol, t, terms.omega)
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            pv = Decimal(product.long_short.sign) * annuity * unit_value
        return terms, _OptionValue(
            time_to_expiry=t, volatility=vol, annuity=annuity, unit_value=unit_value, present_value=pv,
        )

    def present_value(self, env: PricingEnvironment, product: ResolvedSwaption) -> Money:
        terms, value = self._value(env, product)
        return Money(amount=value.present_value, currency=terms.currency)

    def future_value(self, env: PricingEnvironment, product: ResolvedSwaption) -> Money:
        """Present value carried forward to the settlement date."""
        terms, value = self._value(env, product)
        df = env.discount_factor(terms.currency, product.settlement_date)
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            return Money(amount=value.present_value / df, currency=terms.currency)

    def explain_rows(self, env: PricingEnvironment, product: ResolvedSwaption) -> list[ExplainRow]:
        """Expiry row with the model inputs, then one annuity row per fixed period."""
        terms, value = self._value(env, product)
        settlement_date: date = product.settlement_date
        rows: list[ExplainRow] = [{
            ExplainKey.ENTRY_TYPE: f"Expiry ({'payer' if terms.omega == 1 else 'receiver'})",
            ExplainKey.EXPIRY_DATE: product.expiry_date,
            ExplainKey.SETTLEMENT_DATE: settlement_date,
            ExplainKey.INDEX: product.index.name,
            ExplainKey.CURRENCY: terms.currency.code,
            ExplainKey.NOTIONAL: terms.notional,
            ExplainKey.TIME_TO_EXPIRY: value.time_to_expiry,
            ExplainKey.FORWARD_SWAP_RATE: terms.forward,
            ExplainKey.STRIKE: terms.strike,
            ExplainKey.VOLATILITY: value.volatility,
            ExplainKey.ANNUITY: value.annuity,
            ExplainKey.PRESENT_VALUE: value.present_value,
        }]
        for period in terms.fixed_periods:
            df = env.discount_factor(terms.currency, period.payment_date)
            tau = _period_year_fraction(period)
            with localcontext(VALUATION_DECIMAL_CONTEXT):
                contribution = tau * df * abs(period.notional)
            rows.append({
                ExplainKey.ENTRY_TYPE: "Annuity",
                ExplainKey.PAYMENT_DATE: period.payment_date,
                ExplainKey.START_DATE: period.start_date,
                ExplainKey.END_DATE: period.end_date,
                ExplainKey.CURRENCY: terms.currency.code,
                ExplainKey.NOTIONAL: abs(period.notional),
                ExplainKey.ACCRUAL_YEAR_FRACTION: tau,
                ExplainKey.DISCOUNT_FACTOR: df,
                ExplainKey.ANNUITY: contribution,
            })
        return rows
