"""Error values and the one programming-error exception.

Data-driven failures are frozen dataclass values carried in Err and can be
pattern-matched, serialized and logged. ValuationError carries no timestamp;
callers that need one attach it at the boundary.

UnsupportedProductError is the exception: asking the dispatcher to price a
variant nobody registered is a wiring bug, not a data problem.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final


@dataclass(frozen=True, slots=True)
class ValuationError:
    """Base error value. NOT @final, has subclasses."""

    message: str
    code: str
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> ValuationError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to dict with stable keys."""
        return {
            "message": self.message,
            "code": self.code,
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class ReferenceDataNotFoundError(ValuationError):
    """A product referenced an identifier the reference data cannot supply."""

    identifier: str
    identifier_type: str

    @staticmethod
    def of(identifier_type: str, identifier: str, source: str) -> ReferenceDataNotFoundError:
        return ReferenceDataNotFoundError(
            message=f"Reference data not found for {identifier_type} '{identifier}'",
            code="REFDATA_NOT_FOUND",
            source=source,
            identifier=identifier,
            identifier_type=identifier_type,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            **ValuationError.to_dict(self),
            "identifier": self.identifier,
            "identifier_type": self.identifier_type,
        }


@final
@dataclass(frozen=True, slots=True)
class PricingError(ValuationError):
    """Pricing computation failed for a well-formed product."""

    product: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {**ValuationError.to_dict(self), "product": self.product, "reason": self.reason}


# ---------------------------------------------------------------------------
# Programming error
# ---------------------------------------------------------------------------


class UnsupportedProductError(TypeError):
    """No pricer (or resolver) exists for the exact runtime variant.

    Raised, never returned. The registered set is fixed when the dispatcher
    is built.
    """

    def __init__(self, variant: type, handler: str = "pricer") -> None:
        self.variant = variant
        self.handler = handler
        super().__init__(f"No {handler} registered for product type {variant.__qualname__}")
