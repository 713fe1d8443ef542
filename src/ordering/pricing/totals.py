"""Money/Totals engine — derives cart and order totals from line items.

Totals are never patched incrementally: every mutation of a cart calls
compute_totals() again over the full set of lines, so the result is always
a pure function of (lines, discount, rules).

    subtotal = max(0, Σ(unit_price × quantity) − discount)
    tax      = subtotal × tax_rate
    shipping = 0 if subtotal ≥ free_shipping_threshold else shipping_cost
    total    = subtotal + tax + shipping
"""

from collections.abc import Iterable
from dataclasses import dataclass

TAX_RATE = 0.08
FREE_SHIPPING_THRESHOLD = 50.0
SHIPPING_COST = 9.99
DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class PricingRules:
    """The small set of constants the engine prices with."""

    tax_rate: float = TAX_RATE
    free_shipping_threshold: float = FREE_SHIPPING_THRESHOLD
    shipping_cost: float = SHIPPING_COST
    currency: str = DEFAULT_CURRENCY


DEFAULT_PRICING_RULES = PricingRules()


@dataclass(frozen=True)
class Totals:
    """Derived monetary summary of a collection of line items."""

    subtotal: float = 0.0
    discount: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    total: float = 0.0
    total_items: int = 0
    currency: str = DEFAULT_CURRENCY

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "tax": self.tax,
            "shipping": self.shipping,
            "total": self.total,
            "total_items": self.total_items,
            "currency": self.currency,
        }


EMPTY_TOTALS = Totals()


def round_money(amount: float) -> float:
    return round(float(amount), 2)


def _price_and_quantity(line) -> tuple[float, int]:
    if isinstance(line, dict):
        return float(line["unit_price"]), int(line["quantity"])
    return float(line.unit_price), int(line.quantity)


def compute_totals(
    line_items: Iterable,
    discount: float = 0.0,
    rules: PricingRules = DEFAULT_PRICING_RULES,
) -> Totals:
    """Price a sequence of line items.

    Each line item exposes ``unit_price`` and ``quantity`` (as attributes or
    mapping keys). ``discount`` is a flat amount taken off the gross before
    tax and shipping are computed; the subtotal never goes below zero.
    """
    gross = 0.0
    total_items = 0
    for line in line_items:
        unit_price, quantity = _price_and_quantity(line)
        gross += unit_price * quantity
        total_items += quantity

    gross = round_money(gross)
    applied_discount = round_money(min(max(float(discount or 0.0), 0.0), gross))
    subtotal = round_money(max(0.0, gross - applied_discount))
    tax = round_money(subtotal * rules.tax_rate)
    shipping = 0.0 if subtotal >= rules.free_shipping_threshold else rules.shipping_cost
    total = round_money(subtotal + tax + shipping)

    return Totals(
        subtotal=subtotal,
        discount=applied_discount,
        tax=tax,
        shipping=shipping,
        total=total,
        total_items=total_items,
        currency=rules.currency,
    )
