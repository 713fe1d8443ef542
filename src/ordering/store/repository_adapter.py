"""Order store backed by the ordering domain's repository.

Every call runs inside an ordering domain context so that code living in
other contexts (tracking) can read and update orders through it.
"""

import structlog

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.store.port import OrderStore

logger = structlog.get_logger(__name__)


class RepositoryOrderStore(OrderStore):
    def __init__(self, domain=ordering) -> None:
        self._domain = domain

    def _repo(self):
        return self._domain.repository_for(Order)

    def create_order(self, order):
        with self._domain.domain_context():
            self._repo().add(order)
        return order

    def get_order(self, order_id):
        with self._domain.domain_context():
            return self._repo().get(order_id)

    def list_orders(self, customer_id):
        with self._domain.domain_context():
            return self._repo().for_customer(customer_id)

    def update_order_status(self, order_id, status):
        with self._domain.domain_context():
            repo = self._repo()
            order = repo.get(order_id)
            applied = order.advance_to(status)
            if applied:
                repo.add(order)
                logger.info(
                    "Order status updated",
                    order_id=str(order_id),
                    statuses=[s.value for s in applied],
                )
            return order

    def revise_delivery_estimate(self, order_id, estimated_delivery):
        with self._domain.domain_context():
            repo = self._repo()
            order = repo.get(order_id)
            if order.revise_delivery_estimate(estimated_delivery):
                repo.add(order)
            return order

    def find_by_payment_intent(self, payment_intent_id):
        with self._domain.domain_context():
            return self._repo().find_by_payment_intent(payment_intent_id)
