"""PricerDispatch: one entry point for every resolved product variant.

The table from product type to pricer is built once, copied into a
read-only mapping and passed to whoever values trades. Lookup is by the
exact runtime type of the product; subclasses are not matched.

PAST_PAYMENT_DATE_UNDEFINED: pricing a product whose payment or settlement
date is before env.valuation_date is outside the pricing contract. Callers
filter such trades out first. The pricers neither clamp nor raise for them;
whatever number falls out of the discounting is returned unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final, final, get_args

from valuator.core.errors import UnsupportedProductError
from valuator.core.money import Money
from valuator.core.types import UtcDatetime
from valuator.pricing.equity import DiscountingEquityFuturePricer
from valuator.pricing.protocols import PricingEnvironment, ProductPricer
from valuator.pricing.swap import DiscountingSwapPricer
from valuator.pricing.swaption import NormalSwaptionPricer
from valuator.pricing.types import ValuationResult
from valuator.product.equity import EquityFuture
from valuator.product.swap import ResolvedSwap
from valuator.product.swaption import ResolvedSwaption
from valuator.product.types import ResolvedProduct
from valuator.report.cashflow import CashFlowReport

logger = logging.getLogger(__name__)

PAST_PAYMENT_DATE_UNDEFINED: Final = (
    "Payment or settlement dates before the valuation date give an undefined, deterministic result"
)


@final
@dataclass(frozen=True, slots=True, eq=False)
class PricerDispatch:
    """Immutable table of pricers keyed by resolved product type."""

    pricers: Mapping[type, ProductPricer[Any]]

    def __post_init__(self) -> None:
        table = dict(self.pricers)
        for product_type, pricer in table.items():
            if not isinstance(product_type, type):
                raise TypeError(f"PricerDispatch keys must be types, got {product_type!r}")
            for attr in ("present_value", "future_value", "explain_rows", "columns"):
                if not hasattr(pricer, attr):
                    raise TypeError(
                        f"PricerDispatch: pricer for {product_type.__qualname__} lacks {attr}"
                    )
        object.__setattr__(self, "pricers", MappingProxyType(table))
        logger.debug(
            "PricerDispatch built for %s", ", ".join(sorted(t.__qualname__ for t in table)),
        )

    @property
    def registered_types(self) -> frozenset[type]:
        return frozenset(self.pricers)

    def pricer_for(self, product: object) -> ProductPricer[Any]:
        """Pricer registered for type(product). UnsupportedProductError if none."""
        pricer = self.pricers.get(type(product))
        if pricer is None:
            raise UnsupportedProductError(type(product))
        return pricer

    def present_value(self, env: PricingEnvironment, product: ResolvedProduct) -> Money:
        """Signed value to the holder in the product's currency, discounted to env.valuation_date."""
        return self.pricer_for(product).present_value(env, product)

    def future_value(self, env: PricingEnvironment, product: ResolvedProduct) -> Money:
        """Same sign and currency as present_value, as of the product's own payment date."""
        return self.pricer_for(product).future_value(env, product)

    def explain(
        self,
        env: PricingEnvironment,
        product: ResolvedProduct,
        run_instant: UtcDatetime | None = None,
    ) -> CashFlowReport:
        """Row-per-event breakdown of the calculation, in the pricer's column order."""
        pricer = self.pricer_for(product)
        return CashFlowReport.from_rows(
            valuation_date=env.valuation_date,
            run_instant=run_instant or UtcDatetime.now(),
            columns=pricer.columns,
            rows=pricer.explain_rows(env, product),
        )

    def value(
        self,
        env: PricingEnvironment,
        product: ResolvedProduct,
        run_instant: UtcDatetime | None = None,
    ) -> ValuationResult:
        return ValuationResult(
            present_value=self.present_value(env, product),
            future_value=self.future_value(env, product),
            report=self.explain(env, product, run_instant),
        )


def create_default_dispatch() -> PricerDispatch:
    """Dispatch with the built-in pricer for every resolved product variant.

    Raises TypeError if a ResolvedProduct variant has no pricer.
    """
    dispatch = PricerDispatch(pricers={
        EquityFuture: DiscountingEquityFuturePricer(),
        ResolvedSwap: DiscountingSwapPricer(),
        ResolvedSwaption: NormalSwaptionPricer(),
    })
    missing = set(get_args(ResolvedProduct.__value__)) - dispatch.registered_types
    if missing:
        raise TypeError(
            f"Default dispatch has no pricer for {sorted(t.__qualname__ for t in missing)}"
        )
    return dispatch
