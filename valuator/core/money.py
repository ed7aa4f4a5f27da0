"""Money, Decimal context, and refined numeric/string types.

All valuation arithmetic uses VALUATION_DECIMAL_CONTEXT with prec=28,
ROUND_HALF_EVEN, and traps for InvalidOperation/DivisionByZero/Overflow.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import final

from valuator.core.result import Err, Ok

VALUATION_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


# --- Refined types ---


@final
@dataclass(frozen=True, slots=True)
class NonEmptyStr:
    """String constrained to be non-empty."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise TypeError("NonEmptyStr requires non-empty string")

    @staticmethod
    def parse(raw: str) -> Ok[NonEmptyStr] | Err[str]:
        if not isinstance(raw, str) or not raw:
            return Err("NonEmptyStr requires non-empty string")
        return Ok(NonEmptyStr(value=raw))


# ISO 4217 minor units for the currencies we quote; anything else rounds to 2.
_ISO4217_MINOR_UNITS: dict[str, int] = {
    "USD": 2, "EUR": 2, "GBP": 2, "CHF": 2, "CAD": 2, "AUD": 2, "SEK": 2,
    "NOK": 2, "DKK": 2, "NZD": 2, "HKD": 2, "SGD": 2,
    "JPY": 0, "KRW": 0,
    "BHD": 3, "KWD": 3, "OMR": 3,
}


@final
@dataclass(frozen=True, slots=True, order=True)
class Currency:
    """ISO 4217 style code: exactly three upper-case ASCII letters."""

    code: str

    def __post_init__(self) -> None:
        if not _is_currency_code(self.code):
            raise TypeError(f"Currency requires three upper-case letters, got {self.code!r}")

    @staticmethod
    def parse(raw: str) -> Ok[Currency] | Err[str]:
        if not _is_currency_code(raw):
            return Err(f"Currency requires three upper-case letters, got {raw!r}")
        return Ok(Currency(code=raw))

    @property
    def minor_units(self) -> int:
        return _ISO4217_MINOR_UNITS.get(self.code, 2)

    def __str__(self) -> str:
        return self.code


def _is_currency_code(raw: object) -> bool:
    return (
        isinstance(raw, str)
        and len(raw) == 3
        and raw.isascii()
        and raw.isalpha()
        and raw.isupper()
    )


@final
@dataclass(frozen=True, slots=True)
class Money:
    """Immutable monetary amount with currency. Arithmetic uses VALUATION_DECIMAL_CONTEXT."""

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise TypeError(f"Money.amount must be finite Decimal, got {self.amount!r}")
        if not isinstance(self.currency, Currency):
            raise TypeError(f"Money.currency must be Currency, got {type(self.currency).__name__}")

    @staticmethod
    def create(amount: Decimal, currency: str) -> Ok[Money] | Err[str]:
        """Create Money, rejecting non-Decimal, NaN, Infinity and bad codes."""
        if not isinstance(amount, Decimal):
            return Err(f"Money.amount must be Decimal, got {type(amount).__name__}")
        if not amount.is_finite():
            return Err(f"Money.amount must be finite, got {amount}")
        match Currency.parse(currency):
            case Err(e):
                return Err(f"Money.currency: {e}")
            case Ok(c):
                return Ok(Money(amount=amount, currency=c))

    @staticmethod
    def zero(currency: Currency) -> Money:
        return Money(amount=Decimal(0), currency=currency)

    def add(self, other: Money) -> Ok[Money] | Err[str]:
        """Add two Money values. Err if currencies differ."""
        if self.currency != other.currency:
            return Err(f"Currency mismatch: {self.currency} vs {other.currency}")
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            return Ok(Money(amount=self.amount + other.amount, currency=self.currency))

    def sub(self, other: Money) -> Ok[Money] | Err[str]:
        """Subtract. Err if currencies differ."""
        if self.currency != other.currency:
            return Err(f"Currency mismatch: {self.currency} vs {other.currency}")
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            return Ok(Money(amount=self.amount - other.amount, currency=self.currency))

    def mul(self, factor: Decimal) -> Money:
        """Scalar multiplication. Currency preserved."""
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            return Money(amount=self.amount * factor, currency=self.currency)

    def negate(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def round_to_minor_unit(self) -> Money:
        """Quantize to the currency's ISO 4217 minor unit."""
        quantizer = Decimal(10) ** -self.currency.minor_units
        with localcontext(VALUATION_DECIMAL_CONTEXT):
            rounded = self.amount.quantize(quantizer)
        return Money(amount=rounded, currency=self.currency)

    def __str__(self) -> str:
        return f"{self.currency.code} {self.amount}"


def sum_money(currency: Currency, values: tuple[Money, ...] | list[Money]) -> Money:
    """Sum same-currency amounts, starting from zero in ``currency``.

    Raises TypeError on a currency mismatch: callers only sum amounts they
    produced themselves in one currency.
    """
    total = Decimal(0)
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        for m in values:
            if m.currency != currency:
                raise TypeError(f"Currency mismatch: {m.currency} vs {currency}")
            total += m.amount
    return Money(amount=total, currency=currency)
