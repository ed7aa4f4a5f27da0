"""Core value types: UtcDatetime, FrozenMap, direction enums and conventions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar, Literal, final

from valuator.core.result import Err, Ok

# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """Timezone-aware UTC datetime. Naive datetimes are rejected."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            raise TypeError("UtcDatetime requires timezone-aware datetime, got naive")

    @staticmethod
    def now() -> UtcDatetime:
        return UtcDatetime(value=datetime.now(tz=UTC))


# ---------------------------------------------------------------------------
# FrozenMap
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class FrozenMap[K, V]:
    """Immutable sorted mapping with deterministic iteration order.

    Entries are stored as a sorted tuple of (key, value) pairs, so two maps
    built from the same data compare and hash equal.
    """

    _entries: tuple[tuple[K, V], ...]

    EMPTY: ClassVar[FrozenMap[Any, Any]]  # Assigned after class definition

    @staticmethod
    def create(items: dict[K, V] | Iterable[tuple[K, V]]) -> Ok[FrozenMap[K, V]] | Err[str]:
        """Create a FrozenMap from a dict or iterable of (key, value) pairs.

        Duplicate keys: last value wins. Non-comparable keys: returns Err.
        """
        d = items if isinstance(items, dict) else dict(items)
        try:
            entries = tuple(sorted(d.items(), key=lambda kv: kv[0]))
        except TypeError as e:
            return Err(f"FrozenMap keys must be comparable: {e}")
        return Ok(FrozenMap(_entries=entries))

    def get(self, key: K, default: V | None = None) -> V | None:
        for k, v in self._entries:
            if k == key:
                return v
        return default

    def __getitem__(self, key: K) -> V:
        for k, v in self._entries:
            if k == key:
                return v
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._entries)

    def __iter__(self) -> Iterator[K]:
        return (k for k, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> tuple[tuple[K, V], ...]:
        """Return the sorted (key, value) entries."""
        return self._entries


FrozenMap.EMPTY = FrozenMap(_entries=())


# ---------------------------------------------------------------------------
# Direction
# ---------------------------------------------------------------------------


class LongShort(Enum):
    """Whether the holder bought (LONG) or sold (SHORT) the position."""

    LONG = "LONG"
    SHORT = "SHORT"

    @property
    def sign(self) -> int:
        return 1 if self is LongShort.LONG else -1


class PayReceive(Enum):
    """Direction of a swap leg from the holder's point of view."""

    PAY = "PAY"
    RECEIVE = "RECEIVE"

    @property
    def sign(self) -> int:
        return -1 if self is PayReceive.PAY else 1


# ---------------------------------------------------------------------------
# Conventions
# ---------------------------------------------------------------------------


class DayCountConvention(Enum):
    ACT_360 = "ACT/360"
    ACT_365F = "ACT/365F"
    THIRTY_360 = "30/360"
    ACT_ACT_ISDA = "ACT/ACT.ISDA"


type BusinessDayConvention = Literal["NONE", "FOLLOWING", "MOD_FOLLOWING", "PRECEDING"]


class PaymentFrequency(Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMI_ANNUAL = "SEMI_ANNUAL"
    ANNUAL = "ANNUAL"

    @property
    def months(self) -> int:
        return _FREQUENCY_MONTHS[self]


_FREQUENCY_MONTHS: dict[PaymentFrequency, int] = {
    PaymentFrequency.MONTHLY: 1,
    PaymentFrequency.QUARTERLY: 3,
    PaymentFrequency.SEMI_ANNUAL: 6,
    PaymentFrequency.ANNUAL: 12,
}
