from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from novalgo.utils.exceptions import InvalidAmount

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Numeric(15, 2) leaves 13 integer digits.
MAX_AMOUNT = Decimal(10) ** 13


def _decimal(value):
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if abs(amount) >= MAX_AMOUNT:
        raise InvalidAmount(
            "Amount is too large",
            details={"amount": str(value), "maximum": str(MAX_AMOUNT - CENT)},
        )
    return amount


def to_money(value):
    """Coerce a computed ``value`` to a Decimal rounded to cents; floats go through ``str``."""
    amount = _decimal(value)
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmount(f"Invalid amount: {value!r}")


def parse_money(value):
    """Like ``to_money`` for caller-supplied amounts, which must already be whole cents."""
    amount = _decimal(value)
    rounded = to_money(amount)
    if rounded != amount:
        raise InvalidAmount(
            "Amount cannot have more than 2 decimal places",
            details={"amount": str(value)},
        )
    return rounded


def positive_money(value):
    amount = parse_money(value)
    if amount <= ZERO:
        raise InvalidAmount(details={"amount": str(amount)})
    return amount
