"""valuator.pricing -- pricers, pricing environment and dispatch."""

from valuator.pricing.dispatch import PricerDispatch as PricerDispatch
from valuator.pricing.dispatch import create_default_dispatch as create_default_dispatch
from valuator.pricing.environment import MarketEnvironment as MarketEnvironment
from valuator.pricing.equity import DiscountingEquityFuturePricer as DiscountingEquityFuturePricer
from valuator.pricing.protocols import PricingEnvironment as PricingEnvironment
from valuator.pricing.protocols import ProductPricer as ProductPricer
from valuator.pricing.swap import DiscountingSwapPricer as DiscountingSwapPricer
from valuator.pricing.swaption import NormalSwaptionPricer as NormalSwaptionPricer
from valuator.pricing.types import ValuationResult as ValuationResult
