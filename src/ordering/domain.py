"""Ordering bounded context — Shopping Cart, Order lifecycle, and Checkout.

Owns cart pricing, the order status state machine, and the checkout flow
that turns a priced cart into an order after payment confirmation.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
ordering = Domain(name="ordering")
