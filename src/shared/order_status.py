"""Order status vocabulary shared by the Ordering and Tracking contexts.

The Ordering context owns the transition rules (ordering.order.lifecycle);
Tracking only needs the closed set of values to label feed updates.
"""

from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


TERMINAL_STATUSES = frozenset(
    {
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
        OrderStatus.REFUNDED,
    }
)


def coerce_status(value) -> OrderStatus:
    """Accept an OrderStatus or its string value and return the enum member."""
    if isinstance(value, OrderStatus):
        return value
    return OrderStatus(str(value).lower())
