"""ReferenceData protocol and an immutable in-memory implementation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol, final

from valuator.core.errors import ReferenceDataNotFoundError
from valuator.core.result import Err, Ok
from valuator.refdata.types import HolidayCalendarId, IborIndexId, ReferenceDataId

logger = logging.getLogger(__name__)


class ReferenceData(Protocol):
    """Source of calendars, indices and other static data used by resolution."""

    def lookup(self, identifier: ReferenceDataId) -> Ok[Any] | Err[ReferenceDataNotFoundError]:
        """Return the value for identifier, or Err naming the missing identifier."""
        ...

    def contains(self, identifier: ReferenceDataId) -> bool:
        ...


def _type_error(identifier: object, value: object) -> str | None:
    if not isinstance(identifier, HolidayCalendarId | IborIndexId):
        return f"unsupported identifier type {type(identifier).__name__}"
    expected = identifier.value_type
    if not isinstance(value, expected):
        return (
            f"value for {type(identifier).__name__} '{identifier}' must be "
            f"{expected.__name__}, got {type(value).__name__}"
        )
    if getattr(value, "name", None) != identifier.name:
        return f"value name '{getattr(value, 'name', None)}' does not match identifier '{identifier}'"
    return None


@final
@dataclass(frozen=True, slots=True, eq=False)
class ImmutableReferenceData:
    """Reference data backed by a read-only mapping, copied on construction."""

    values: Mapping[ReferenceDataId, object]

    def __post_init__(self) -> None:
        copied = dict(self.values)
        for identifier, value in copied.items():
            problem = _type_error(identifier, value)
            if problem is not None:
                raise TypeError(f"ImmutableReferenceData: {problem}")
        object.__setattr__(self, "values", MappingProxyType(copied))

    @staticmethod
    def create(values: Mapping[ReferenceDataId, object]) -> Ok[ImmutableReferenceData] | Err[str]:
        for identifier, value in values.items():
            problem = _type_error(identifier, value)
            if problem is not None:
                return Err(f"ImmutableReferenceData: {problem}")
        return Ok(ImmutableReferenceData(values=values))

    @staticmethod
    def empty() -> ImmutableReferenceData:
        return ImmutableReferenceData(values={})

    def lookup(self, identifier: ReferenceDataId) -> Ok[Any] | Err[ReferenceDataNotFoundError]:
        value = self.values.get(identifier)
        if value is None:
            logger.debug("Reference data miss for %s %s", type(identifier).__name__, identifier)
            return Err(ReferenceDataNotFoundError.of(
                type(identifier).__name__,
                str(identifier),
                "refdata.ImmutableReferenceData.lookup",
            ))
        return Ok(value)

    def contains(self, identifier: ReferenceDataId) -> bool:
        return identifier in self.values

    def combined_with(self, other: ImmutableReferenceData) -> ImmutableReferenceData:
        """New instance holding both sets of values; ``other`` wins on clashes."""
        return ImmutableReferenceData(values={**self.values, **other.values})

    def __len__(self) -> int:
        return len(self.values)
