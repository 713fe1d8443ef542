"""Payment processor port (abstract interface).

Defines the two calls checkout needs from a card-network processor:
create a payment intent for an amount, then confirm it with the shopper's
payment method. Amounts cross this boundary in minor units (cents).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentIntent:
    """A processor-side intent to collect ``amount`` minor units."""

    id: str
    client_secret: str
    amount: int
    currency: str
    status: str = "requires_confirmation"


@dataclass(frozen=True)
class PaymentConfirmation:
    """Result of confirming a payment intent."""

    success: bool
    payment_intent: PaymentIntent | None = None
    error: str | None = None


class PaymentProcessor(ABC):
    """Abstract payment processor interface."""

    @abstractmethod
    def create_payment_intent(self, amount: int, currency: str) -> PaymentIntent:
        """Create an intent for ``amount`` minor units.

        Raises UpstreamFailure when the processor cannot be reached or
        rejects the request.
        """
        ...

    @abstractmethod
    def confirm_payment(self, client_secret: str, payment_method: str) -> PaymentConfirmation:
        """Confirm a previously created intent with a payment method."""
        ...
