"""Shopping Cart aggregate (CQRS) — line items plus their derived totals.

The cart owns its line items and keeps a CartTotals value object in step
with them: every mutation recomputes the totals through the pricing engine
inside the same atomic change, and a post-invariant rejects any state in
which the stored totals disagree with the lines.

A line is identified by (product_id, canonical variations). Adding the same
product with the same variation selections increments the existing line;
different selections create a separate line.
"""

import json
from dataclasses import replace
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from ordering.cart.events import (
    CartCleared,
    CartDiscountApplied,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.domain import ordering
from ordering.pricing.totals import DEFAULT_CURRENCY, DEFAULT_PRICING_RULES, Totals, compute_totals

_MONEY_FIELDS = ("subtotal", "discount", "tax", "shipping", "total")


def canonical_variations(variations) -> str:
    """Serialize a variation selection map so equal selections compare equal.

    ``None``, ``{}`` and ``"{}"`` are the same selection.
    """
    if not variations:
        return "{}"
    if isinstance(variations, str):
        variations = json.loads(variations) or {}
    return json.dumps(
        {str(key): str(value) for key, value in variations.items()},
        sort_keys=True,
        separators=(",", ":"),
    )


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="ShoppingCart")
class ProductSnapshot:
    """Product details copied into a cart line when it is added.

    The snapshot is not live-linked to the catalogue: later price or stock
    changes do not reach lines already in the cart.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    sku = String(max_length=50)
    price = Float(required=True, min_value=0.0)
    stock = Integer(required=True, min_value=0)


@ordering.value_object(part_of="ShoppingCart")
class CartTotals:
    """Derived money summary of the cart. Never edited except by a recompute."""

    subtotal = Float(default=0.0)
    discount = Float(default=0.0)
    tax = Float(default=0.0)
    shipping = Float(default=0.0)
    total = Float(default=0.0)
    total_items = Integer(default=0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product = ValueObject(ProductSnapshot, required=True)
    quantity = Integer(required=True, min_value=1)
    variations = Text(default="{}")  # Canonical JSON: {"size": "M", ...}
    added_at = DateTime()

    @property
    def unit_price(self) -> float:
        return self.product.price

    @property
    def line_key(self) -> tuple[str, str]:
        return str(self.product.product_id), canonical_variations(self.variations)

    @property
    def line_total(self) -> float:
        return round(self.product.price * self.quantity, 2)

    def selected_variations(self) -> dict:
        return json.loads(self.variations) if self.variations else {}


def _as_snapshot(product) -> ProductSnapshot:
    if isinstance(product, ProductSnapshot):
        return product
    return ProductSnapshot(
        product_id=product.get("product_id") or product.get("id"),
        name=product.get("name"),
        sku=product.get("sku"),
        price=product.get("price"),
        stock=product.get("stock"),
    )


def _validate_quantity(quantity, field="quantity"):
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError({field: ["Quantity must be a whole number"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier()  # Nullable for guest carts
    session_id = String(max_length=255)
    items = HasMany(CartItem)
    totals = ValueObject(CartTotals)
    discount = Float(default=0.0, min_value=0.0)
    discount_code = String(max_length=100)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def totals_must_reflect_line_items(self):
        if self.totals is None or not self.items:
            return
        expected = self.expected_totals()
        stale = self.totals.total_items != expected.total_items or any(
            abs((getattr(self.totals, name) or 0.0) - getattr(expected, name)) > 0.005 for name in _MONEY_FIELDS
        )
        if stale:
            raise ValidationError({"totals": ["Cart totals do not match its line items"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, session_id=None, currency=DEFAULT_CURRENCY):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            session_id=session_id,
            currency=currency,
            totals=CartTotals(currency=currency),
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def find_line(self, product_id, variations=None):
        key = (str(product_id), canonical_variations(variations))
        return next((i for i in self.items if i.line_key == key), None)

    def expected_totals(self) -> Totals:
        """What the pricing engine says the totals should be right now."""
        currency = self.currency or DEFAULT_CURRENCY
        if not self.items:
            return Totals(currency=currency)
        rules = replace(DEFAULT_PRICING_RULES, currency=currency)
        return compute_totals(self.items, discount=self.discount or 0.0, rules=rules)

    def _recalculate(self):
        self.totals = CartTotals(**self.expected_totals().as_dict())

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity=1, variations=None):
        """Add ``quantity`` units of ``product``; merges into a matching line."""
        _validate_quantity(quantity)
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        snapshot = _as_snapshot(product)
        canonical = canonical_variations(variations)
        existing = self.find_line(snapshot.product_id, canonical)

        resulting = quantity + (existing.quantity if existing else 0)
        if resulting > snapshot.stock:
            raise ValidationError({"quantity": [f"Only {snapshot.stock} of {snapshot.name} in stock"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            if existing:
                existing.quantity = resulting
                item = existing
            else:
                item = CartItem(
                    product=snapshot,
                    quantity=quantity,
                    variations=canonical,
                    added_at=now,
                )
                self.add_items(item)
            self.updated_at = now
            self._recalculate()

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(snapshot.product_id),
                variations=canonical,
                quantity=quantity,
                line_quantity=item.quantity,
                new_total=self.totals.total,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        """Overwrite a line's quantity. Zero or less removes the line.

        Unknown ``item_id`` is a no-op.
        """
        _validate_quantity(new_quantity, field="new_quantity")

        item = self.find_item(item_id)
        if item is None:
            return None

        if new_quantity <= 0:
            self.remove_item(item_id)
            return None

        if new_quantity > item.product.stock:
            raise ValidationError({"new_quantity": [f"Only {item.product.stock} of {item.product.name} in stock"]})

        previous_quantity = item.quantity
        now = datetime.now(UTC)
        with atomic_change(self):
            item.quantity = new_quantity
            self.updated_at = now
            self._recalculate()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                new_total=self.totals.total,
            )
        )
        return item

    def remove_item(self, item_id) -> bool:
        """Remove a line. Returns False when there was nothing to remove."""
        item = self.find_item(item_id)
        if item is None:
            return False

        now = datetime.now(UTC)
        with atomic_change(self):
            self.remove_items(item)
            self.updated_at = now
            self._recalculate()

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
                new_total=self.totals.total,
            )
        )
        return True

    def clear(self):
        """Empty the cart and zero its totals (nothing left to price)."""
        now = datetime.now(UTC)
        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self.discount = 0.0
            self.discount_code = None
            self.totals = CartTotals(currency=self.currency or DEFAULT_CURRENCY)
            self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                cleared_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Discounts
    # -------------------------------------------------------------------
    def apply_discount(self, amount, code=None):
        """Record a flat discount, replacing any earlier one.

        Which codes map to which amounts is decided outside the cart.
        """
        if amount is None or amount < 0:
            raise ValidationError({"amount": ["Discount cannot be negative"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.discount = float(amount)
            self.discount_code = code
            self.updated_at = now
            self._recalculate()

        self.raise_(
            CartDiscountApplied(
                cart_id=str(self.id),
                amount=float(amount),
                code=code,
                new_total=self.totals.total,
            )
        )
