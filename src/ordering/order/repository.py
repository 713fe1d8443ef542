"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order lookups beyond get-by-id."""

    def find_by_payment_intent(self, payment_intent_id: str) -> Order | None:
        results = self._dao.query.filter(payment_intent_id=payment_intent_id).all()
        return results.first if results.items else None

    def for_customer(self, customer_id: str) -> list[Order]:
        """A customer's orders, newest first."""
        results = self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").all()
        return list(results.items)
