"""Tests for valuator.pricing.dispatch -- PricerDispatch routing by exact type."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from builders import REFERENCE_DATA, market, spx_future, usd, vanilla_swap, vanilla_swaption
from valuator.core.errors import UnsupportedProductError
from valuator.core.money import Money
from valuator.core.result import unwrap
from valuator.core.types import UtcDatetime
from valuator.pricing.dispatch import PricerDispatch, create_default_dispatch
from valuator.pricing.protocols import PricingEnvironment
from valuator.pricing.types import ValuationResult
from valuator.product.equity import EquityFuture
from valuator.product.resolve import resolve
from valuator.product.swap import ResolvedSwap
from valuator.product.swaption import ResolvedSwaption
from valuator.report.explain import ExplainKey, ExplainRow

_RUN = UtcDatetime(value=datetime(2024, 3, 1, 18, 0, tzinfo=UTC))


@dataclass(frozen=True)
class ProductA:
    name: str = "a"


@dataclass(frozen=True)
class ProductB:
    name: str = "b"


@dataclass(frozen=True)
class ProductBSubclass(ProductB):
    pass


@dataclass
class RecordingPricer:
    """Returns a fixed value and remembers which products it saw."""

    value: Money
    seen: list[object] = field(default_factory=list)

    columns = (ExplainKey.ENTRY_TYPE, ExplainKey.PRESENT_VALUE)

    def present_value(self, env: PricingEnvironment, product: object) -> Money:  # noqa: ARG002
        self.seen.append(product)
        return self.value

    def future_value(self, env: PricingEnvironment, product: object) -> Money:  # noqa: ARG002
        self.seen.append(product)
        return self.value

    def explain_rows(self, env: PricingEnvironment, product: object) -> list[ExplainRow]:  # noqa: ARG002
        return [{ExplainKey.ENTRY_TYPE: type(product).__name__}, {ExplainKey.PRESENT_VALUE: self.value.amount}]


def _fakes() -> tuple[PricerDispatch, RecordingPricer, RecordingPricer]:
    pricer_a = RecordingPricer(usd("1"))
    pricer_b = RecordingPricer(usd("2"))
    return PricerDispatch(pricers={ProductA: pricer_a, ProductB: pricer_b}), pricer_a, pricer_b


class TestRouting:
    def test_present_value_routes_to_registered_pricer(self) -> None:
        dispatch, pricer_a, pricer_b = _fakes()
        product = ProductB()
        assert dispatch.present_value(market(), product) == usd("2")  # type: ignore[arg-type]
        assert pricer_b.seen == [product]
        assert pricer_a.seen == []

    def test_future_value_routes_to_registered_pricer(self) -> None:
        dispatch, pricer_a, pricer_b = _fakes()
        assert dispatch.future_value(market(), ProductA()) == usd("1")  # type: ignore[arg-type]
        assert len(pricer_a.seen) == 1
        assert pricer_b.seen == []

    def test_unregistered_type_raises(self) -> None:
        dispatch, _, _ = _fakes()
        with pytest.raises(UnsupportedProductError, match="EquityFuture") as info:
            dispatch.present_value(market(), spx_future())
        assert info.value.variant is EquityFuture

    def test_subclass_not_matched(self) -> None:
        dispatch, _, pricer_b = _fakes()
        with pytest.raises(UnsupportedProductError):
            dispatch.future_value(market(), ProductBSubclass())  # type: ignore[arg-type]
        assert pricer_b.seen == []

    def test_explain_uses_pricer_columns(self) -> None:
        dispatch, _, _ = _fakes()
        report = dispatch.explain(market(), ProductA(), run_instant=_RUN)  # type: ignore[arg-type]
        assert report.column_keys == RecordingPricer.columns
        assert report.data == (("ProductA", None), (None, Decimal("1")))
        assert report.run_instant == _RUN
        assert report.valuation_date == market().valuation_date

    def test_value_bundles_all_three(self) -> None:
        dispatch, _, _ = _fakes()
        result = dispatch.value(market(), ProductB(), run_instant=_RUN)  # type: ignore[arg-type]
        assert isinstance(result, ValuationResult)
        assert result.present_value == result.future_value == usd("2")
        assert result.report.row_count == 2


class TestTable:
    def test_read_only(self) -> None:
        dispatch, _, _ = _fakes()
        with pytest.raises(TypeError):
            dispatch.pricers[EquityFuture] = RecordingPricer(usd("0"))  # type: ignore[index]

    def test_caller_mutation_not_visible(self) -> None:
        table: dict[type, RecordingPricer] = {ProductA: RecordingPricer(usd("1"))}
        dispatch = PricerDispatch(pricers=table)
        table[ProductB] = RecordingPricer(usd("2"))
        assert dispatch.registered_types == frozenset({ProductA})

    def test_non_type_key_raises(self) -> None:
        with pytest.raises(TypeError, match="must be types"):
            PricerDispatch(pricers={"ProductA": RecordingPricer(usd("1"))})  # type: ignore[dict-item]

    def test_incomplete_pricer_raises(self) -> None:
        with pytest.raises(TypeError, match="lacks"):
            PricerDispatch(pricers={ProductA: object()})  # type: ignore[dict-item]


class TestDefaultDispatch:
    def test_covers_every_resolved_variant(self) -> None:
        expected = frozenset({EquityFuture, ResolvedSwap, ResolvedSwaption})
        assert create_default_dispatch().registered_types == expected

    @pytest.mark.parametrize("build", [spx_future, vanilla_swap, vanilla_swaption])
    def test_values_every_product(self, build: object) -> None:
        resolved = unwrap(resolve(build(), REFERENCE_DATA))  # type: ignore[operator]
        result = create_default_dispatch().value(market(), resolved, run_instant=_RUN)
        assert result.present_value.currency.code == "USD"
        assert result.report.row_count > 0
        assert result.report.column_keys[-1] is ExplainKey.PRESENT_VALUE
