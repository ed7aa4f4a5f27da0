"""valuator.product -- product definitions and their resolved forms."""

from valuator.product.equity import EquityFuture as EquityFuture
from valuator.product.resolve import resolve as resolve
from valuator.product.swap import FixedRateSwapLeg as FixedRateSwapLeg
from valuator.product.swap import IborRateSwapLeg as IborRateSwapLeg
from valuator.product.swap import KnownAmountSwapLeg as KnownAmountSwapLeg
from valuator.product.swap import LegSchedule as LegSchedule
from valuator.product.swap import ResolvedSwap as ResolvedSwap
from valuator.product.swap import ResolvedSwapLeg as ResolvedSwapLeg
from valuator.product.swap import Swap as Swap
from valuator.product.swap import SwapLeg as SwapLeg
from valuator.product.swaption import CashSettlement as CashSettlement
from valuator.product.swaption import CashSettlementMethod as CashSettlementMethod
from valuator.product.swaption import PhysicalSettlement as PhysicalSettlement
from valuator.product.swaption import ResolvedSwaption as ResolvedSwaption
from valuator.product.swaption import Swaption as Swaption
from valuator.product.types import Product as Product
from valuator.product.types import ResolvedProduct as ResolvedProduct
