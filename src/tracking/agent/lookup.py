"""Finding the agent responsible for an order."""

from protean.utils.globals import current_domain

from tracking.agent.agent import DeliveryAgent


def find_agent_for_order(order_id) -> DeliveryAgent | None:
    """The active agent whose assigned orders include ``order_id``, if any."""
    repo = current_domain.repository_for(DeliveryAgent)
    results = repo._dao.query.filter(is_active=True).all()
    return next((agent for agent in results.items if agent.is_assigned_to(order_id)), None)
