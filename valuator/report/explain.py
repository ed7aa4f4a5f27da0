"""Explain keys: named columns of intermediate calculation detail."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class ExplainKey(Enum):
    """One column of a cash-flow report. The value is the display header."""

    ENTRY_TYPE = "Entry Type"
    LEG = "Leg"
    PAYMENT_DATE = "Payment Date"
    START_DATE = "Start Date"
    END_DATE = "End Date"
    FIXING_DATE = "Fixing Date"
    EXPIRY_DATE = "Expiry Date"
    SETTLEMENT_DATE = "Settlement Date"
    INDEX = "Index"
    UNDERLYING = "Underlying"
    CURRENCY = "Currency"
    NOTIONAL = "Notional"
    UNIT_AMOUNT = "Unit Amount"
    ACCRUAL_YEAR_FRACTION = "Accrual Year Fraction"
    TIME_TO_EXPIRY = "Time To Expiry"
    FIXED_RATE = "Fixed Rate"
    FORWARD_RATE = "Forward Rate"
    SPREAD = "Spread"
    STRIKE = "Strike"
    FORWARD_PRICE = "Forward Price"
    FORWARD_SWAP_RATE = "Forward Swap Rate"
    VOLATILITY = "Volatility"
    ANNUITY = "Annuity"
    FORECAST_VALUE = "Forecast Value"
    DISCOUNT_FACTOR = "Discount Factor"
    PRESENT_VALUE = "Present Value"

    @property
    def header(self) -> str:
        return self.value


# Cells a pricer fills for one event; columns it leaves out render blank.
type ExplainRow = Mapping[ExplainKey, object]
