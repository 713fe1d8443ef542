"""Delivery agent management — commands and handler.

update_agent_location() wraps UpdateAgentLocation so that the new position
reaches live trackers only after the agent has been saved.
"""

from protean import handle
from protean.fields import DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from tracking.agent.agent import DeliveryAgent, VehicleType
from tracking.domain import tracking
from tracking.feed import get_feed_source


@tracking.command(part_of="DeliveryAgent")
class RegisterAgent:
    name = String(required=True, max_length=255)
    phone = String(max_length=30)
    vehicle_type = String(choices=VehicleType, default=VehicleType.MOTORCYCLE.value)


@tracking.command(part_of="DeliveryAgent")
class UpdateAgentLocation:
    agent_id = Identifier(required=True)
    latitude = Float(required=True, min_value=-90.0, max_value=90.0)
    longitude = Float(required=True, min_value=-180.0, max_value=180.0)
    reported_at = DateTime()


@tracking.command(part_of="DeliveryAgent")
class AssignOrderToAgent:
    agent_id = Identifier(required=True)
    order_id = Identifier(required=True)


@tracking.command(part_of="DeliveryAgent")
class ReleaseOrderFromAgent:
    agent_id = Identifier(required=True)
    order_id = Identifier(required=True)


@tracking.command(part_of="DeliveryAgent")
class DeactivateAgent:
    agent_id = Identifier(required=True)


@tracking.command_handler(part_of=DeliveryAgent)
class ManageAgentHandler:
    @handle(RegisterAgent)
    def register_agent(self, command):
        agent = DeliveryAgent.register(
            name=command.name,
            phone=command.phone,
            vehicle_type=command.vehicle_type,
        )
        current_domain.repository_for(DeliveryAgent).add(agent)
        return str(agent.id)

    @handle(UpdateAgentLocation)
    def update_location(self, command):
        repo = current_domain.repository_for(DeliveryAgent)
        agent = repo.get(command.agent_id)
        agent.update_location(command.latitude, command.longitude, reported_at=command.reported_at)
        repo.add(agent)

    @handle(AssignOrderToAgent)
    def assign_order(self, command):
        repo = current_domain.repository_for(DeliveryAgent)
        agent = repo.get(command.agent_id)
        agent.assign_order(command.order_id)
        repo.add(agent)

    @handle(ReleaseOrderFromAgent)
    def release_order(self, command):
        repo = current_domain.repository_for(DeliveryAgent)
        agent = repo.get(command.agent_id)
        agent.release_order(command.order_id)
        repo.add(agent)

    @handle(DeactivateAgent)
    def deactivate(self, command):
        repo = current_domain.repository_for(DeliveryAgent)
        agent = repo.get(command.agent_id)
        agent.deactivate()
        repo.add(agent)


def update_agent_location(agent_id, latitude, longitude, reported_at=None):
    """Save the agent's new position, then publish it to the live feed."""
    with tracking.domain_context():
        current_domain.process(
            UpdateAgentLocation(
                agent_id=agent_id,
                latitude=latitude,
                longitude=longitude,
                reported_at=reported_at,
            ),
            asynchronous=False,
        )
        agent = current_domain.repository_for(DeliveryAgent).get(agent_id)

    position = agent.current_position()
    get_feed_source().publish_agent_position(position)
    return position
