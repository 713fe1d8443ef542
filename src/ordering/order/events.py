"""Order domain events — immutable facts about order state changes.

All events are past tense, versioned, and carry enough data for the
notification and tracking sides to act without reloading the order.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A paid cart was turned into an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    tracking_number = String(required=True)
    lines = Text(required=True)  # JSON list of line dicts
    line_count = Integer(required=True)
    total = Float(required=True)
    currency = String(required=True)
    estimated_delivery = DateTime()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along one edge of its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    reason = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class DeliveryEstimateRevised:
    """A fresher agent position produced a new estimated delivery time."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_estimate = DateTime()
    estimated_delivery = DateTime(required=True)
    revised_at = DateTime(required=True)
