"""Monetary normalization helpers.

Every amount inside the engine is an ``int`` number of cents. Dollar values
are converted exactly once, at the boundary, and rates are ``Decimal``
fractions (0.153, not 15.3). Rounding is always ROUND_HALF_UP to the cent.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Union

from .exceptions import InvalidInputError

DollarValue = Union[Decimal, int, str, float]

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


def dollars_to_cents(value: DollarValue) -> int:
    """Convert a dollar amount to integer cents.

    Floats are routed through ``str`` so that 0.1 becomes exactly 10 cents.

    Raises:
        InvalidInputError: If the value cannot be parsed as a number.
    """
    if isinstance(value, bool):
        raise InvalidInputError("Boolean is not a monetary amount", value=value)
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (ArithmeticError, ValueError, TypeError) as e:
        raise InvalidInputError(
            f"Cannot interpret {value!r} as a dollar amount",
            value=str(value),
        ) from e
    if not amount.is_finite():
        raise InvalidInputError("Monetary amount must be finite", value=str(value))
    return int((amount * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_dollars(cents: int) -> Decimal:
    """Convert integer cents to a two-place Decimal dollar amount."""
    return (Decimal(cents) / HUNDRED).quantize(CENT)


def round_cents(amount: Decimal) -> int:
    """Round a fractional cent amount to whole cents (half up)."""
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_rate(cents: int, rate: Decimal) -> int:
    """Multiply cents by a fractional rate and round to whole cents."""
    return round_cents(Decimal(cents) * rate)


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer division rounding up, for "or fraction thereof" rules."""
    if numerator <= 0:
        return 0
    return int((Decimal(numerator) / Decimal(denominator)).to_integral_value(rounding=ROUND_CEILING))


def clamp(value: Decimal, low: Decimal = Decimal("0"), high: Decimal = Decimal("1")) -> Decimal:
    """Clamp a Decimal into ``[low, high]``."""
    return max(low, min(high, value))


def monthly(annual_cents: int) -> int:
    """Annual cents to monthly cents."""
    return round_cents(Decimal(annual_cents) / MONTHS_PER_YEAR)


def annualize(monthly_cents: int) -> int:
    """Monthly cents to annual cents."""
    return monthly_cents * MONTHS_PER_YEAR


def fraction_to_percent(fraction: Decimal, places: int = 2) -> Decimal:
    """0-1 fraction to a 0-100 percentage, for boundary output only."""
    return (fraction * HUNDRED).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def percent_to_fraction(percent: DollarValue) -> Decimal:
    """0-100 percentage from the boundary to an internal 0-1 fraction."""
    if isinstance(percent, float):
        percent = str(percent)
    return Decimal(percent) / HUNDRED


def ratio(numerator: int, denominator: int) -> Decimal:
    """Exact ratio of two cent amounts; 0 when the denominator is 0."""
    if denominator == 0:
        return Decimal("0")
    return Decimal(numerator) / Decimal(denominator)


__all__ = [
    "DollarValue",
    "dollars_to_cents",
    "cents_to_dollars",
    "round_cents",
    "apply_rate",
    "ceil_div",
    "clamp",
    "monthly",
    "annualize",
    "fraction_to_percent",
    "percent_to_fraction",
    "ratio",
    "MONTHS_PER_YEAR",
]
