"""DeliveryAgent aggregate — the courier carrying one or more orders.

An agent holds the ids of the orders assigned to it and its last reported
position. Only active agents can take new orders or report positions.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String, Text

from tracking.agent.events import (
    AgentDeactivated,
    AgentLocationUpdated,
    AgentRegistered,
    OrderAssignedToAgent,
    OrderReleasedFromAgent,
)
from tracking.domain import tracking
from tracking.feed.reducer import AgentPosition


class VehicleType(Enum):
    BICYCLE = "bicycle"
    MOTORCYCLE = "motorcycle"
    CAR = "car"
    VAN = "van"


@tracking.aggregate
class DeliveryAgent:
    name = String(required=True, max_length=255)
    phone = String(max_length=30)
    vehicle_type = String(choices=VehicleType, default=VehicleType.MOTORCYCLE.value)
    current_latitude = Float(min_value=-90.0, max_value=90.0)
    current_longitude = Float(min_value=-180.0, max_value=180.0)
    last_location_update = DateTime()
    is_active = Boolean(default=True)
    assigned_orders = Text(default="[]")  # JSON list of order ids
    created_at = DateTime()

    @classmethod
    def register(cls, name, phone=None, vehicle_type=VehicleType.MOTORCYCLE.value):
        now = datetime.now(UTC)
        agent = cls(
            name=name,
            phone=phone,
            vehicle_type=vehicle_type,
            is_active=True,
            assigned_orders="[]",
            created_at=now,
        )
        agent.raise_(
            AgentRegistered(
                agent_id=str(agent.id),
                name=name,
                vehicle_type=vehicle_type,
                registered_at=now,
            )
        )
        return agent

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def assigned_order_ids(self) -> list[str]:
        return json.loads(self.assigned_orders) if self.assigned_orders else []

    def is_assigned_to(self, order_id) -> bool:
        return str(order_id) in self.assigned_order_ids()

    def current_position(self) -> AgentPosition | None:
        if self.current_latitude is None or self.current_longitude is None:
            return None
        return AgentPosition(
            agent_id=str(self.id),
            latitude=self.current_latitude,
            longitude=self.current_longitude,
            timestamp=self.last_location_update,
        )

    def _assert_active(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Agent is not active"]})

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def update_location(self, latitude: float, longitude: float, reported_at: datetime | None = None) -> None:
        self._assert_active()
        now = reported_at or datetime.now(UTC)
        self.current_latitude = latitude
        self.current_longitude = longitude
        self.last_location_update = now
        self.raise_(
            AgentLocationUpdated(
                agent_id=str(self.id),
                latitude=latitude,
                longitude=longitude,
                updated_at=now,
            )
        )

    def assign_order(self, order_id) -> None:
        self._assert_active()
        order_ids = self.assigned_order_ids()
        if str(order_id) in order_ids:
            return

        now = datetime.now(UTC)
        order_ids.append(str(order_id))
        self.assigned_orders = json.dumps(order_ids)
        self.raise_(
            OrderAssignedToAgent(
                agent_id=str(self.id),
                order_id=str(order_id),
                assigned_at=now,
            )
        )

    def release_order(self, order_id) -> None:
        """Take an order off the agent. Unknown order ids are ignored."""
        order_ids = self.assigned_order_ids()
        if str(order_id) not in order_ids:
            return

        now = datetime.now(UTC)
        order_ids.remove(str(order_id))
        self.assigned_orders = json.dumps(order_ids)
        self.raise_(
            OrderReleasedFromAgent(
                agent_id=str(self.id),
                order_id=str(order_id),
                released_at=now,
            )
        )

    def deactivate(self) -> None:
        if not self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = False
        self.raise_(
            AgentDeactivated(
                agent_id=str(self.id),
                deactivated_at=now,
            )
        )
