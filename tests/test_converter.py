"""Tests for valuator.workflow.converter -- Temporal payload round trips."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from builders import spx_future, usd, vanilla_swap, vanilla_swaption
from valuator.core.money import NonEmptyStr
from valuator.core.types import PaymentFrequency
from valuator.product.swap import IborRateSwapLeg
from valuator.product.swaption import CashSettlement, CashSettlementMethod
from valuator.workflow.converter import VALUATOR_DATA_CONVERTER, ValuatorJSONTypeConverter, _from_json, _to_json
from valuator.workflow.types import (
    PortfolioValuationInput,
    PortfolioValuationResult,
    TradeValuation,
    TradeValuationInput,
    ValuationRequest,
)


def _round_trip(value: Any, hint: type) -> Any:
    converter = VALUATOR_DATA_CONVERTER.payload_converter
    payloads = converter.to_payloads([value])
    (decoded,) = converter.from_payloads(payloads, [hint])
    return decoded


def _request(trade_id: str, product: Any) -> ValuationRequest:
    return ValuationRequest(trade_id=NonEmptyStr(value=trade_id), product=product)


class TestToJson:
    def test_tags(self) -> None:
        assert _to_json(Decimal("1.50")) == {"__decimal__": "1.50"}
        assert _to_json(date(2024, 6, 3)) == {"__date__": "2024-06-03"}
        assert _to_json(PaymentFrequency.QUARTERLY) == "QUARTERLY"

    def test_dataclass_carries_type(self) -> None:
        encoded = _to_json(usd("1"))
        assert encoded["__type__"] == "valuator.core.money.Money"

    def test_frozenset_sorted(self) -> None:
        assert _to_json(frozenset({3, 1, 2})) == {"__frozenset__": [1, 2, 3]}

    def test_unsupported_raises(self) -> None:
        with pytest.raises(TypeError, match="Cannot serialize"):
            _to_json(object())


class TestRoundTrip:
    @pytest.mark.parametrize("build", [spx_future, vanilla_swap, vanilla_swaption])
    def test_products_in_activity_input(self, build: Any) -> None:
        inp = TradeValuationInput(request=_request("T-1", build()), valuation_date=date(2024, 3, 1))
        assert _round_trip(inp, TradeValuationInput) == inp

    def test_cash_settled_swaption(self) -> None:
        settlement = CashSettlement(CashSettlementMethod.ZERO_COUPON_YIELD, date(2024, 6, 3))
        swaption = vanilla_swaption(settlement=settlement)
        inp = TradeValuationInput(request=_request("T-2", swaption), valuation_date=date(2024, 3, 1))
        assert _round_trip(inp, TradeValuationInput) == inp

    def test_leg_defaults_survive(self) -> None:
        swap = vanilla_swap()
        assert isinstance(swap.legs[1], IborRateSwapLeg)
        inp = TradeValuationInput(request=_request("T-3", swap), valuation_date=date(2024, 3, 1))
        decoded = _round_trip(inp, TradeValuationInput)
        assert decoded.request.product.legs[1].reset_frequency is None
        assert decoded.request.product.legs[1].spread == Decimal(0)

    def test_portfolio_input(self) -> None:
        inp = PortfolioValuationInput(
            portfolio_id=NonEmptyStr(value="BOOK-1"),
            valuation_date=date(2024, 3, 1),
            requests=(_request("T-1", spx_future()), _request("T-2", vanilla_swap())),
            activity_timeout_s=30,
        )
        assert _round_trip(inp, PortfolioValuationInput) == inp

    def test_trade_valuation_success(self) -> None:
        valuation = TradeValuation(
            trade_id=NonEmptyStr(value="T-1"),
            present_value=usd("4942.80"),
            future_value=usd("5000"),
            row_count=1,
            report_csv="Entry Type\nEquityFuture\n",
        )
        assert _round_trip(valuation, TradeValuation) == valuation

    def test_result_with_failure(self) -> None:
        result = PortfolioValuationResult(
            portfolio_id=NonEmptyStr(value="BOOK-1"),
            valuations=(TradeValuation(trade_id=NonEmptyStr(value="T-9"), error="missing USNY"),),
        )
        decoded = _round_trip(result, PortfolioValuationResult)
        assert decoded == result
        assert decoded.failed[0].present_value is None


class TestDecodeSafety:
    def test_disallowed_module_refused(self) -> None:
        with pytest.raises(TypeError, match="Refusing to decode"):
            _from_json(Any, {"__type__": "subprocess.Popen", "args": ["ls"]})

    def test_unknown_class_refused(self) -> None:
        with pytest.raises(TypeError, match="Refusing to decode"):
            _from_json(Any, {"__type__": "valuator.core.money.Nothing"})

    def test_type_converter_unhandled_for_plain_values(self) -> None:
        assert ValuatorJSONTypeConverter().to_typed_value(int, 3) is ValuatorJSONTypeConverter.Unhandled
