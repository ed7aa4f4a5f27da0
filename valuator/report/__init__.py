"""valuator.report -- explain keys and the cash flow report."""

from valuator.report.cashflow import CashFlowReport as CashFlowReport
from valuator.report.explain import ExplainKey as ExplainKey
from valuator.report.explain import ExplainRow as ExplainRow
