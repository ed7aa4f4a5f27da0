"""valuator.workflow -- Temporal.io portfolio valuation workflow."""

from valuator.workflow.types import PortfolioValuationInput as PortfolioValuationInput
from valuator.workflow.types import PortfolioValuationResult as PortfolioValuationResult
from valuator.workflow.types import TradeValuation as TradeValuation
from valuator.workflow.types import TradeValuationInput as TradeValuationInput
from valuator.workflow.types import ValuationRequest as ValuationRequest
