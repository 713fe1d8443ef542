"""Tracking bounded context — delivery feed, agents, and ETA estimation.

Owns the append-only tracking-update feed for each order, the delivery
agents that carry orders, and the distance/ETA math used to refine an
order's estimated delivery while it is out for delivery.
"""

from protean.domain import Domain

from ordering.utils.logging import get_logger

logger = get_logger(__name__)

# Domain Composition Root
tracking = Domain(name="tracking")
