"""valuator.core -- value types, calendars, Decimal math and error values."""

from valuator.core.calendar import HolidayCalendar as HolidayCalendar
from valuator.core.calendar import day_count_fraction as day_count_fraction
from valuator.core.calendar import year_fraction_act_365 as year_fraction_act_365
from valuator.core.errors import PricingError as PricingError
from valuator.core.errors import ReferenceDataNotFoundError as ReferenceDataNotFoundError
from valuator.core.errors import UnsupportedProductError as UnsupportedProductError
from valuator.core.errors import ValuationError as ValuationError
from valuator.core.money import VALUATION_DECIMAL_CONTEXT as VALUATION_DECIMAL_CONTEXT
from valuator.core.money import Currency as Currency
from valuator.core.money import Money as Money
from valuator.core.money import NonEmptyStr as NonEmptyStr
from valuator.core.money import sum_money as sum_money
from valuator.core.result import Err as Err
from valuator.core.result import Ok as Ok
from valuator.core.result import sequence as sequence
from valuator.core.result import unwrap as unwrap
from valuator.core.types import BusinessDayConvention as BusinessDayConvention
from valuator.core.types import DayCountConvention as DayCountConvention
from valuator.core.types import FrozenMap as FrozenMap
from valuator.core.types import LongShort as LongShort
from valuator.core.types import PayReceive as PayReceive
from valuator.core.types import PaymentFrequency as PaymentFrequency
from valuator.core.types import UtcDatetime as UtcDatetime
