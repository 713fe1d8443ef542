"""Order store port (abstract interface).

The orders half of the document store: create, read, list and update
orders. Reads of a missing order raise ObjectNotFoundError.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class OrderStore(ABC):
    """Abstract order persistence interface."""

    @abstractmethod
    def create_order(self, order):
        """Persist a newly placed order and return it."""
        ...

    @abstractmethod
    def get_order(self, order_id: str):
        """Return the order, or raise ObjectNotFoundError."""
        ...

    @abstractmethod
    def list_orders(self, customer_id: str) -> list:
        """A customer's orders, newest first."""
        ...

    @abstractmethod
    def update_order_status(self, order_id: str, status):
        """Bring an order to ``status`` through its lifecycle and persist it.

        Raises InvalidTransition when the lifecycle does not allow it.
        """
        ...

    @abstractmethod
    def revise_delivery_estimate(self, order_id: str, estimated_delivery: datetime):
        """Record a refined delivery estimate; terminal orders are left alone."""
        ...

    @abstractmethod
    def find_by_payment_intent(self, payment_intent_id: str):
        """The order placed with this payment intent, or None."""
        ...
