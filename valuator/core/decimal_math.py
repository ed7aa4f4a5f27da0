"""Pure-Decimal mathematical functions used by discounting and option pricing.

Results are rounded to VALUATION_DECIMAL_CONTEXT (prec=28, ROUND_HALF_EVEN).
No float, no math module: every intermediate computation is Decimal.

Functions
---------
exp_d      : Decimal -> Decimal   (Taylor series with range reduction)
ln_d       : Decimal -> Decimal   (range reduction + atanh series; ValueError on non-positive)
sqrt_d     : Decimal -> Decimal   (Decimal.sqrt in VALUATION_DECIMAL_CONTEXT)
norm_pdf_d : Decimal -> Decimal   (standard normal density)
norm_cdf_d : Decimal -> Decimal   (standard normal distribution, Marsaglia series)
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from valuator.core.money import VALUATION_DECIMAL_CONTEXT

# ---------------------------------------------------------------------------
# Internal precision: compute at +10 guard digits, then round back to 28
# ---------------------------------------------------------------------------

_GUARD_DIGITS = 10
_INTERNAL_PREC = VALUATION_DECIMAL_CONTEXT.prec + _GUARD_DIGITS

_ZERO = Decimal(0)
_ONE = Decimal(1)
_TWO = Decimal(2)
_HALF = Decimal("0.5")
_PI = Decimal("3.1415926535897932384626433832795028841971")

# Beyond this |x| the normal cdf is 0 or 1 at 28 digits.
_CDF_CUTOFF = Decimal(12)


def _to_output(value: Decimal) -> Decimal:
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        return value + _ZERO  # forces rounding to prec=28


def _epsilon(prec: int) -> Decimal:
    return Decimal(10) ** (-(prec + 2))


def _ln2_const(prec: int) -> Decimal:
    """ln(2) = 2 * atanh(1/3), summed to the given precision."""
    with localcontext(VALUATION_DECIMAL_CONTEXT) as ctx:
        ctx.prec = prec + 5
        third = _ONE / Decimal(3)
        third_sq = third * third
        term = third
        result = third
        eps = _epsilon(ctx.prec)
        for k in range(1, 300):
            term = term * third_sq
            contrib = term / Decimal(2 * k + 1)
            result = result + contrib
            if abs(contrib) < eps:
                break
        return result * _TWO


# ---------------------------------------------------------------------------
# exp_d
# ---------------------------------------------------------------------------


def exp_d(x: Decimal) -> Decimal:
    """Compute exp(x) for arbitrary Decimal x.

    Writes x = k * ln2 + r with |r| <= ln2/2, sums the Taylor series for
    exp(r) and scales by the exact integer power 2^k.
    """
    if x == _ZERO:
        return _ONE
    with localcontext(VALUATION_DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        ln2 = _ln2_const(ctx.prec)
        k = int((x / ln2).to_integral_value())
        r = x - Decimal(k) * ln2

        exp_r = _ONE
        term = _ONE
        eps = _epsilon(ctx.prec)
        for n in range(1, 200):
            term = term * r / Decimal(n)
            exp_r = exp_r + term
            if abs(term) < eps:
                break

        result = exp_r * (_TWO ** k) if k >= 0 else exp_r / (_TWO ** (-k))
        return _to_output(result)


# ---------------------------------------------------------------------------
# ln_d
# ---------------------------------------------------------------------------


def ln_d(x: Decimal) -> Decimal:
    """Compute ln(x) for positive Decimal x.

    Raises
    ------
    ValueError
        If x <= 0.

    Halves or doubles x into [0.5, 2) and sums ln(m) = 2 * atanh((m-1)/(m+1)),
    which converges fast since |(m-1)/(m+1)| < 1/3.
    """
    if x <= _ZERO:
        raise ValueError(f"ln_d requires x > 0, got {x}")
    if x == _ONE:
        return _ZERO

    with localcontext(VALUATION_DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        val = x + _ZERO
        e = 0
        while val >= _TWO:
            val = val / _TWO
            e += 1
        while val < _HALF:
            val = val * _TWO
            e -= 1

        u = (val - _ONE) / (val + _ONE)
        u_sq = u * u
        term = u
        ln_val = u
        eps = _epsilon(ctx.prec)
        for k in range(1, 300):
            term = term * u_sq
            contrib = term / Decimal(2 * k + 1)
            ln_val = ln_val + contrib
            if abs(contrib) < eps:
                break

        result = ln_val * _TWO + Decimal(e) * _ln2_const(ctx.prec)
        return _to_output(result)


# ---------------------------------------------------------------------------
# sqrt_d
# ---------------------------------------------------------------------------


def sqrt_d(x: Decimal) -> Decimal:
    """Square root. ValueError if x < 0."""
    if x < _ZERO:
        raise ValueError(f"sqrt_d requires x >= 0, got {x}")
    with localcontext(VALUATION_DECIMAL_CONTEXT):
        return x.sqrt()


# ---------------------------------------------------------------------------
# Standard normal
# ---------------------------------------------------------------------------


def norm_pdf_d(x: Decimal) -> Decimal:
    """phi(x) = exp(-x^2 / 2) / sqrt(2 * pi)."""
    with localcontext(VALUATION_DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        density = exp_d(-(x * x) / _TWO) / (_TWO * _PI).sqrt()
        return _to_output(density)


def norm_cdf_d(x: Decimal) -> Decimal:
    """Phi(x) via Marsaglia's series.

    Phi(x) = 1/2 + phi(x) * (x + x^3/3 + x^5/(3*5) + x^7/(3*5*7) + ...)

    Every term has the sign of x, so the sum has no cancellation. Clamped to
    0 or 1 beyond |x| = 12.
    """
    if x >= _CDF_CUTOFF:
        return _ONE
    if x <= -_CDF_CUTOFF:
        return _ZERO
    if x == _ZERO:
        return _HALF
    with localcontext(VALUATION_DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        x_sq = x * x
        term = x
        total = x
        eps = _epsilon(ctx.prec)
        for n in range(1, 2000):
            term = term * x_sq / Decimal(2 * n + 1)
            total = total + term
            if abs(term) < eps * abs(total):
                break
        phi = exp_d(-x_sq / _TWO) / (_TWO * _PI).sqrt()
        return _to_output(_HALF + phi * total)
