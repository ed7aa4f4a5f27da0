"""Durable workflow valuing a portfolio one trade at a time.

Trades are submitted sequentially, one value_trade activity each. Cancelling
the workflow stops further submissions; valuations already returned are
not repeated on replay.

Determinism contract: this module contains NO I/O, NO randomness,
NO system clock access, NO mutable globals. All pricing happens in
the activity.
"""

from __future__ import annotations

import dataclasses
from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from valuator.workflow.activities import ValuationActivities
    from valuator.workflow.types import (
        PortfolioValuationInput,
        PortfolioValuationResult,
        TradeValuation,
        TradeValuationInput,
    )

VALUATION_RETRY = RetryPolicy(
    initial_interval=timedelta(seconds=1),
    backoff_coefficient=2.0,
    maximum_interval=timedelta(seconds=30),
    maximum_attempts=3,
    non_retryable_error_types=["UnsupportedProductError", "InvariantViolation"],
)


@workflow.defn(name="PortfolioValuation")
class PortfolioValuationWorkflow:
    """Value every trade of a portfolio as of one valuation date.

    Invariants maintained:
    - Exactly one TradeValuation per request, in request order
    - At most one activity in flight at any time
    - A trade that cannot be valued is reported, not retried
    """

    def __init__(self) -> None:
        self._status: str = "RECEIVED"
        self._completed: int = 0
        self._total: int = 0

    # -- Queries --

    @workflow.query
    def get_status(self) -> str:
        return self._status

    @workflow.query
    def get_progress(self) -> tuple[int, int]:
        """(trades valued so far, trades requested)."""
        return self._completed, self._total

    # -- Main workflow --

    @workflow.run
    async def run(self, inp: PortfolioValuationInput) -> PortfolioValuationResult:
        self._total = len(inp.requests)
        self._status = "VALUING"
        valuations: list[TradeValuation] = []
        retry = dataclasses.replace(VALUATION_RETRY, maximum_attempts=inp.max_activity_attempts)

        for request in inp.requests:
            valuation = await workflow.execute_activity_method(
                ValuationActivities.value_trade,
                TradeValuationInput(request=request, valuation_date=inp.valuation_date),
                start_to_close_timeout=timedelta(seconds=inp.activity_timeout_s),
                retry_policy=retry,
            )
            valuations.append(valuation)
            self._completed += 1
            if valuation.error is not None:
                workflow.logger.warning(
                    "Trade %s failed: %s", request.trade_id.value, valuation.error,
                )

        self._status = "COMPLETED"
        return PortfolioValuationResult(
            portfolio_id=inp.portfolio_id,
            valuations=tuple(valuations),
        )
