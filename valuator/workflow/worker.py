"""Worker process for the portfolio valuation workflow.

Starts a Temporal worker with the valuation workflow and the value_trade
activity registered on the configured task queue.

Usage::

    import asyncio, os
    from valuator.core.result import unwrap
    from valuator.infra.config import configure_logging, load_config
    from valuator.workflow.worker import run_worker

    config = unwrap(load_config(os.environ))
    configure_logging(config)
    asyncio.run(run_worker(config, reference_data, environment_for))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from temporalio.client import Client
from temporalio.worker import Worker

from valuator.infra.config import ValuationConfig
from valuator.pricing.protocols import PricingEnvironment
from valuator.refdata.reference_data import ReferenceData
from valuator.workflow.activities import ValuationActivities
from valuator.workflow.converter import VALUATOR_DATA_CONVERTER
from valuator.workflow.valuation_workflow import PortfolioValuationWorkflow

logger = logging.getLogger(__name__)


async def run_worker(
    config: ValuationConfig,
    reference_data: ReferenceData,
    environment_for: Callable[[date], PricingEnvironment],
) -> None:
    """Connect to Temporal and run the worker until interrupted."""
    temporal = config.temporal
    client = await Client.connect(
        temporal.target_host, namespace=temporal.namespace,
        data_converter=VALUATOR_DATA_CONVERTER,
    )
    activities = ValuationActivities(reference_data, environment_for)

    worker = Worker(
        client,
        task_queue=temporal.task_queue,
        workflows=[PortfolioValuationWorkflow],
        activities=[activities.value_trade],
    )
    logger.info(
        "Valuation worker on %s namespace=%s queue=%s",
        temporal.target_host, temporal.namespace, temporal.task_queue,
    )
    await worker.run()
