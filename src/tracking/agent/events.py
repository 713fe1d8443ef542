"""DeliveryAgent domain events."""

from protean.fields import DateTime, Float, Identifier, String

from tracking.domain import tracking


@tracking.event(part_of="DeliveryAgent")
class AgentRegistered:
    __version__ = 1

    agent_id = Identifier(required=True)
    name = String(required=True)
    vehicle_type = String()
    registered_at = DateTime(required=True)


@tracking.event(part_of="DeliveryAgent")
class AgentLocationUpdated:
    __version__ = 1

    agent_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    updated_at = DateTime(required=True)


@tracking.event(part_of="DeliveryAgent")
class OrderAssignedToAgent:
    __version__ = 1

    agent_id = Identifier(required=True)
    order_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@tracking.event(part_of="DeliveryAgent")
class OrderReleasedFromAgent:
    __version__ = 1

    agent_id = Identifier(required=True)
    order_id = Identifier(required=True)
    released_at = DateTime(required=True)


@tracking.event(part_of="DeliveryAgent")
class AgentDeactivated:
    __version__ = 1

    agent_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
