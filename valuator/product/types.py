"""Closed unions over every product and resolved product variant."""

from __future__ import annotations

from valuator.product.equity import EquityFuture
from valuator.product.swap import ResolvedSwap, Swap
from valuator.product.swaption import ResolvedSwaption, Swaption

type Product = EquityFuture | Swap | Swaption

type ResolvedProduct = EquityFuture | ResolvedSwap | ResolvedSwaption
