"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product (with its chosen variations) was added to the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variations = Text()  # Canonical JSON of the selected variations
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    new_total = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was overwritten."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    new_total = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart (explicitly or by a zero quantity)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_total = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed and the totals zeroed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    cleared_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartDiscountApplied:
    """A flat discount was recorded against the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    amount = Float(required=True)
    code = String()
    new_total = Float(required=True)
