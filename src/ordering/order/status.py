"""Order status changes and delivery-estimate revisions — commands and handler."""

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from shared.order_status import OrderStatus


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    """Move an order along exactly one edge of its lifecycle."""

    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    reason = String(max_length=500)


@ordering.command(part_of="Order")
class ReviseDeliveryEstimate:
    order_id = Identifier(required=True)
    estimated_delivery = DateTime(required=True)


@ordering.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.transition_to(command.status, reason=command.reason)
        repo.add(order)

    @handle(ReviseDeliveryEstimate)
    def revise_estimate(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.revise_delivery_estimate(command.estimated_delivery):
            repo.add(order)
