"""valuator.refdata -- reference data identifiers, values and lookup."""

from valuator.refdata.reference_data import ImmutableReferenceData as ImmutableReferenceData
from valuator.refdata.reference_data import ReferenceData as ReferenceData
from valuator.refdata.types import HolidayCalendarId as HolidayCalendarId
from valuator.refdata.types import IborIndex as IborIndex
from valuator.refdata.types import IborIndexId as IborIndexId
from valuator.refdata.types import ReferenceDataId as ReferenceDataId
