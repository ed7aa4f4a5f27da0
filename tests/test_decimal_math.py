"""Tests for valuator.core.decimal_math -- pure-Decimal exp, ln, sqrt and the normal distribution."""

from __future__ import annotations

from decimal import Decimal, localcontext

import pytest

from valuator.core.decimal_math import exp_d, ln_d, norm_cdf_d, norm_pdf_d, sqrt_d
from valuator.core.money import VALUATION_DECIMAL_CONTEXT

# ---------------------------------------------------------------------------
# Reference constants (computed to > 28 significant digits)
# ---------------------------------------------------------------------------

# e = 2.71828182845904523536028747135...
_E = Decimal("2.7182818284590452353602874714")
# 1/e = 0.36787944117144232159552377016...
_INV_E = Decimal("0.3678794411714423215955237702")
# ln(2) = 0.69314718055994530941723212145...
_LN2 = Decimal("0.6931471805599453094172321215")
# sqrt(2) = 1.41421356237309504880168872421...
_SQRT2 = Decimal("1.414213562373095048801688724")
# e^50 = 5184705528587072464087.4533229...
_E50 = Decimal("5184705528587072464087.453323")
# e^(-10) = 0.0000453999297624848515...
_E_NEG10 = Decimal("0.00004539992976248485153559152")


def _ulp_28() -> Decimal:
    """One unit in the last place for 28-digit precision near magnitude 1."""
    return Decimal("1e-27")


# ---------------------------------------------------------------------------
# exp_d tests
# ---------------------------------------------------------------------------


class TestExpD:
    def test_exp_zero_is_one(self) -> None:
        assert exp_d(Decimal("0")) == Decimal("1")

    def test_exp_one_matches_e(self) -> None:
        result = exp_d(Decimal("1"))
        diff = abs(result - _E)
        # Within 1 ULP at prec=28 (last digit may differ by rounding)
        assert diff <= _ulp_28(), f"exp(1) off by {diff}"

    def test_exp_negative_one_matches_inv_e(self) -> None:
        result = exp_d(Decimal("-1"))
        diff = abs(result - _INV_E)
        assert diff <= _ulp_28(), f"exp(-1) off by {diff}"

    def test_exp_large_argument_range_reduction(self) -> None:
        """exp(50) exercises range reduction (50/ln2 ~ 72 halvings)."""
        result = exp_d(Decimal("50"))
        diff = abs(result - _E50)
        # For a 22-digit integer part, 1 ULP at prec=28 is ~1e(22-28)=1e-6
        relative = diff / _E50
        assert relative < Decimal("1e-26"), f"exp(50) relative error {relative}"

    def test_exp_negative_large(self) -> None:
        """exp(-10) is a small positive number."""
        result = exp_d(Decimal("-10"))
        diff = abs(result - _E_NEG10)
        assert diff <= _ulp_28() * Decimal("10"), f"exp(-10) off by {diff}"

    def test_exp_small_positive(self) -> None:
        """exp(1e-10) ~ 1 + 1e-10 + 5e-21 + ..."""
        result = exp_d(Decimal("1e-10"))
        expected = Decimal("1.000000000100000000005000000")
        diff = abs(result - expected)
        assert diff <= _ulp_28() * Decimal("10"), f"exp(1e-10) off by {diff}"

    def test_exp_returns_decimal(self) -> None:
        result = exp_d(Decimal("1"))
        assert isinstance(result, Decimal)

    def test_exp_no_float_internally(self) -> None:
        """Verify output is Decimal, not a float-derived approximation."""
        result = exp_d(Decimal("1"))
        # A float-derived Decimal would have a long non-repeating representation.
        # Our result should have exactly 28 significant digits (the context precision).
        assert isinstance(result, Decimal)
        # The adjusted exponent + number of digits should equal precision
        digits = len(result.as_tuple().digits)
        assert digits <= VALUATION_DECIMAL_CONTEXT.prec


# ---------------------------------------------------------------------------
# ln_d tests
# ---------------------------------------------------------------------------


class TestLnD:
    def test_ln_one_is_zero(self) -> None:
        assert ln_d(Decimal("1")) == Decimal("0")

    def test_ln_e_is_one(self) -> None:
        """ln(e) == 1 to 27+ digits."""
        result = ln_d(_E)
        diff = abs(result - Decimal("1"))
        # The input _E itself has 28-digit precision, so round-trip loses ~1 ULP
        assert diff <= _ulp_28() * Decimal("10"), f"ln(e) off by {diff}"

    def test_ln_two_matches_known(self) -> None:
        result = ln_d(Decimal("2"))
        diff = abs(result - _LN2)
        assert diff <= _ulp_28(), f"ln(2) off by {diff}"

    def test_ln_zero_raises(self) -> None:
        with pytest.raises(ValueError, match="requires x > 0"):
            ln_d(Decimal("0"))

    def test_ln_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="requires x > 0"):
            ln_d(Decimal("-5"))

    def test_ln_large_value(self) -> None:
        """ln(1000) = 3 * ln(10) ~ 6.9077..."""
        result = ln_d(Decimal("1000"))
        # ln(1000) = 6.9077552789821370520539743640...
        expected = Decimal("6.907755278982137052053974364")
        diff = abs(result - expected)
        assert diff <= _ulp_28() * Decimal("10"), f"ln(1000) off by {diff}"

    def test_ln_small_value(self) -> None:
        """ln(0.001) = -ln(1000)."""
        result = ln_d(Decimal("0.001"))
        expected = -Decimal("6.907755278982137052053974364")
        diff = abs(result - expected)
        assert diff <= _ulp_28() * Decimal("10"), f"ln(0.001) off by {diff}"


# ---------------------------------------------------------------------------
# Round-trip tests: ln(exp(x)) == x and exp(ln(x)) == x
# ---------------------------------------------------------------------------


class TestRoundTrips:
    @pytest.mark.parametrize("x", [
        Decimal("0"), Decimal("1"), Decimal("-1"),
        Decimal("3.7"), Decimal("0.001"), Decimal("10"),
    ])
    def test_ln_exp_round_trip(self, x: Decimal) -> None:
        """ln(exp(x)) == x to within a few ULP."""
        if x == Decimal("0"):
            # ln(exp(0)) = ln(1) = 0 exactly
            assert ln_d(exp_d(x)) == Decimal("0")
            return
        result = ln_d(exp_d(x))
        diff = abs(result - x)
        # Allow a few ULP relative to |x|
        tolerance = max(abs(x), Decimal("1")) * Decimal("1e-25")
        assert diff < tolerance, f"ln(exp({x})) off by {diff}"

    @pytest.mark.parametrize("x", [
        Decimal("0.25"), Decimal("1"), Decimal("2.5"),
        Decimal("100"), Decimal("0.01"),
    ])
    def test_exp_ln_round_trip(self, x: Decimal) -> None:
        """exp(ln(x)) == x to within a few ULP."""
        if x == Decimal("1"):
            assert exp_d(ln_d(x)) == Decimal("1")
            return
        result = exp_d(ln_d(x))
        diff = abs(result - x)
        tolerance = max(x, Decimal("1")) * Decimal("1e-25")
        assert diff < tolerance, f"exp(ln({x})) off by {diff}"


# ---------------------------------------------------------------------------
# sqrt_d tests
# ---------------------------------------------------------------------------


class TestSqrtD:
    def test_sqrt_four_is_two(self) -> None:
        assert sqrt_d(Decimal("4")) == Decimal("2")

    def test_sqrt_one_is_one(self) -> None:
        assert sqrt_d(Decimal("1")) == Decimal("1")

    def test_sqrt_zero_is_zero(self) -> None:
        assert sqrt_d(Decimal("0")) == Decimal("0")

    def test_sqrt_two_matches_known(self) -> None:
        result = sqrt_d(Decimal("2"))
        diff = abs(result - _SQRT2)
        assert diff <= _ulp_28(), f"sqrt(2) off by {diff}"

    def test_sqrt_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="requires x >= 0"):
            sqrt_d(Decimal("-1"))

    def test_sqrt_uses_valuation_context(self) -> None:
        """Even with a different thread-local context, uses VALUATION_DECIMAL_CONTEXT."""
        with localcontext() as ctx:
            ctx.prec = 3  # deliberately low
            result = sqrt_d(Decimal("2"))
            # Should still have full precision, not 3 digits
            assert len(result.as_tuple().digits) > 3


# ---------------------------------------------------------------------------
# Standard normal
# ---------------------------------------------------------------------------

# Phi(1) = 0.84134474606854293...
_PHI_1 = Decimal("0.8413447460685429485852325456")
# phi(0) = 1/sqrt(2*pi) = 0.39894228040143267793994605993...
_PDF_0 = Decimal("0.3989422804014326779399460599")


class TestNormPdfD:
    def test_pdf_at_zero(self) -> None:
        diff = abs(norm_pdf_d(Decimal("0")) - _PDF_0)
        assert diff <= _ulp_28(), f"phi(0) off by {diff}"

    def test_pdf_is_symmetric(self) -> None:
        assert norm_pdf_d(Decimal("1.3")) == norm_pdf_d(Decimal("-1.3"))

    def test_pdf_far_tail_is_tiny(self) -> None:
        assert Decimal("0") < norm_pdf_d(Decimal("10")) < Decimal("1e-20")


class TestNormCdfD:
    def test_cdf_at_zero_is_half(self) -> None:
        assert norm_cdf_d(Decimal("0")) == Decimal("0.5")

    def test_cdf_at_one_matches_known(self) -> None:
        diff = abs(norm_cdf_d(Decimal("1")) - _PHI_1)
        assert diff <= _ulp_28() * Decimal("10"), f"Phi(1) off by {diff}"

    @pytest.mark.parametrize("x", [
        Decimal("0.1"), Decimal("0.75"), Decimal("1.96"), Decimal("3.5"), Decimal("6"),
    ])
    def test_cdf_symmetry(self, x: Decimal) -> None:
        """Phi(x) + Phi(-x) == 1."""
        total = norm_cdf_d(x) + norm_cdf_d(-x)
        assert abs(total - Decimal("1")) < Decimal("1e-25")

    def test_cdf_clamped_in_tails(self) -> None:
        assert norm_cdf_d(Decimal("12")) == Decimal("1")
        assert norm_cdf_d(Decimal("-40")) == Decimal("0")

    def test_cdf_is_monotone(self) -> None:
        xs = [Decimal(i) / Decimal(4) for i in range(-20, 21)]
        values = [norm_cdf_d(x) for x in xs]
        assert values == sorted(values)

    def test_cdf_within_unit_interval(self) -> None:
        for x in (Decimal("-8"), Decimal("-0.5"), Decimal("0.5"), Decimal("8")):
            assert Decimal("0") <= norm_cdf_d(x) <= Decimal("1")


# Context isolation: all functions use VALUATION_DECIMAL_CONTEXT
# ---------------------------------------------------------------------------


class TestContextIsolation:
    def test_exp_ignores_thread_local_context(self) -> None:
        """exp_d uses VALUATION_DECIMAL_CONTEXT even when thread-local prec is low."""
        with localcontext() as ctx:
            ctx.prec = 3
            result = exp_d(Decimal("1"))
            digits = len(result.as_tuple().digits)
            assert digits >= 20, f"Only got {digits} digits -- leaked thread-local context?"

    def test_ln_ignores_thread_local_context(self) -> None:
        with localcontext() as ctx:
            ctx.prec = 3
            result = ln_d(Decimal("2"))
            digits = len(result.as_tuple().digits)
            assert digits >= 20, f"Only got {digits} digits -- leaked thread-local context?"

    def test_cdf_ignores_thread_local_context(self) -> None:
        with localcontext() as ctx:
            ctx.prec = 3
            result = norm_cdf_d(Decimal("1"))
            assert abs(result - _PHI_1) < Decimal("1e-20")
