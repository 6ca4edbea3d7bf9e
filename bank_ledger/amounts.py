"""
Amount Handling Module

Decimal coercion and rounding for every monetary value in the ledger.
NEVER uses float for balances; floats are only accepted at the boundary
and converted through their string form.
"""

from decimal import Decimal, ROUND_HALF_UP, Inexact, InvalidOperation, getcontext, localcontext
from contextlib import contextmanager
from typing import Union

from .errors import InvalidAmountError

# Set global decimal context for financial precision
getcontext().prec = 28

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

AmountLike = Union[Decimal, int, float, str]


def quantize(value: Decimal) -> Decimal:
    """
    Round a Decimal to cent precision

    Raises:
        InvalidAmountError: If the value has too many digits to hold cents
    """
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmountError(
            f"Amount {value} exceeds the supported precision",
            amount=str(value)
        )


@contextmanager
def exact_arithmetic():
    """
    Balance arithmetic that must not round

    Any result needing more digits than the context holds raises
    InvalidAmountError instead of being silently rounded.
    """
    with localcontext() as ctx:
        ctx.prec = 28
        ctx.traps[Inexact] = True
        try:
            yield ctx
        except Inexact:
            raise InvalidAmountError("Resulting balance exceeds the supported precision")


def to_amount(value: AmountLike) -> Decimal:
    """
    Convert a caller-supplied value to a cent-precision Decimal

    Args:
        value: Decimal, int, str or float amount

    Returns:
        Decimal with two decimal places

    Raises:
        InvalidAmountError: If the value is not a finite number, has
            fractions of a cent, or is too large to hold cents
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Cannot use {value!r} as an amount", amount=str(value))

    if not isinstance(value, Decimal):
        value = str(value).strip()
        try:
            value = Decimal(value)
        except InvalidOperation:
            raise InvalidAmountError(f"Cannot convert '{value}' to an amount", amount=value)

    if not value.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value}", amount=str(value))

    amount = quantize(value)
    if amount != value:
        raise InvalidAmountError(
            f"Amount {value} has fractions of a cent",
            amount=str(value)
        )
    return amount


def require_positive(value: AmountLike, operation: str) -> Decimal:
    """Coerce an amount and reject anything that is not strictly positive"""
    amount = to_amount(value)
    if amount <= ZERO:
        raise InvalidAmountError(
            f"Invalid {operation} amount. Amount must be positive.",
            amount=str(amount),
            operation=operation
        )
    return amount


def format_amount(value: Decimal) -> str:
    """Format for display, e.g. $1,234.50 or -$135.00"""
    value = quantize(value)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
