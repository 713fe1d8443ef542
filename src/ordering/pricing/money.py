"""Money helpers for the payment-processor boundary.

Cart and order totals are kept in major currency units (dollars). The
payment processor speaks minor units (cents); conversion happens here and
nowhere else.
"""

from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError

MAX_PAYMENT_AMOUNT = 999_999.99
SUPPORTED_CURRENCIES = ("usd", "eur", "gbp", "cad", "aud")

PROCESSING_FEE_RATE = 0.029
PROCESSING_FEE_FIXED = 0.30

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "CAD": "CA$", "AUD": "A$"}


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount to integer cents, rounding half up."""
    cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


def from_minor_units(amount: int) -> float:
    return float(Decimal(int(amount)) / 100)


def validate_payment(amount: float, currency: str) -> None:
    """Reject amounts and currencies the payment processor will not accept."""
    if amount <= 0:
        raise ValidationError({"amount": ["Amount must be greater than 0"]})
    if amount > MAX_PAYMENT_AMOUNT:
        raise ValidationError({"amount": ["Amount exceeds maximum limit"]})
    if (currency or "").lower() not in SUPPORTED_CURRENCIES:
        raise ValidationError({"currency": ["Currency not supported"]})


def processing_fee(amount: float) -> float:
    """Card processing fee charged on ``amount`` (2.9% + 0.30)."""
    return round(amount * PROCESSING_FEE_RATE + PROCESSING_FEE_FIXED, 2)


def format_amount(amount: float, currency: str = "USD") -> str:
    """Render an amount for display, e.g. ``$1,234.50``."""
    code = currency.upper()
    symbol = _CURRENCY_SYMBOLS.get(code)
    sign = "-" if amount < 0 else ""
    body = f"{abs(amount):,.2f}"
    if symbol is None:
        return f"{sign}{body} {code}"
    return f"{sign}{symbol}{body}"
