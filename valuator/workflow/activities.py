"""Activity implementation for portfolio valuation.

The activity is a thin wrapper: resolve against reference data, build the
pricing environment for the valuation date, hand the resolved product to
the dispatcher. All domain logic lives in the pure library layer.

- Takes a single frozen-dataclass input
- Returns a frozen-dataclass output (with optional error field)
- Is idempotent: same trade + same market snapshot -> same output
"""

from __future__ import annotations

import io
from collections.abc import Callable
from datetime import date

from temporalio import activity
from temporalio.exceptions import ApplicationError

from valuator.core.errors import PricingError, UnsupportedProductError
from valuator.core.result import Err, Ok
from valuator.pricing.dispatch import PricerDispatch, create_default_dispatch
from valuator.pricing.protocols import PricingEnvironment
from valuator.product.resolve import resolve
from valuator.refdata.reference_data import ReferenceData
from valuator.workflow.types import TradeValuation, TradeValuationInput


def _reason(exc: Exception) -> str:
    """Message of exc without the quoting KeyError adds."""
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc)


class ValuationActivities:
    """Holds the collaborators the value_trade activity needs.

    environment_for maps a valuation date to the market snapshot for it.
    """

    def __init__(
        self,
        reference_data: ReferenceData,
        environment_for: Callable[[date], PricingEnvironment],
        dispatch: PricerDispatch | None = None,
    ) -> None:
        self._reference_data = reference_data
        self._environment_for = environment_for
        self._dispatch = dispatch or create_default_dispatch()

    @activity.defn(name="value_trade")
    async def value_trade(self, inp: TradeValuationInput) -> TradeValuation:
        """Resolve and value one trade.

        Missing reference or market data and unschedulable legs come back
        in the error field. An unsupported product type or a broken product
        invariant (TypeError, e.g. a cross-currency swaption) fails the
        activity without retry.
        """
        trade_id = inp.request.trade_id
        activity.logger.info("Valuing trade %s as of %s", trade_id.value, inp.valuation_date)

        match resolve(inp.request.product, self._reference_data):
            case Err(e):
                activity.logger.warning("Trade %s not resolved: %s", trade_id.value, e.message)
                return TradeValuation(trade_id=trade_id, error=e.message)
            case Ok(resolved):
                pass

        try:
            env = self._environment_for(inp.valuation_date)
            result = self._dispatch.value(env, resolved)
        except UnsupportedProductError as exc:
            raise ApplicationError(
                str(exc), type="UnsupportedProductError", non_retryable=True,
            ) from exc
        except TypeError as exc:
            activity.logger.error("Trade %s violates a product invariant: %s", trade_id.value, exc)
            raise ApplicationError(
                f"Trade {trade_id.value}: {exc}", type="InvariantViolation", non_retryable=True,
            ) from exc
        except (ArithmeticError, KeyError, ValueError) as exc:
            err = PricingError(
                message=f"Trade {trade_id.value} not valued: {_reason(exc)}",
                code="PRICING_FAILED",
                source="valuator.workflow.activities.value_trade",
                product=type(resolved).__qualname__,
                reason=_reason(exc),
            )
            activity.logger.warning(err.message)
            return TradeValuation(trade_id=trade_id, error=err.message)

        sink = io.StringIO()
        result.report.write_csv(sink)
        return TradeValuation(
            trade_id=trade_id,
            present_value=result.present_value,
            future_value=result.future_value,
            row_count=result.report.row_count,
            report_csv=sink.getvalue(),
        )
