"""Configurable fake payment processor for development and testing.

Simulates a card processor without external calls. It can be configured at
runtime to confirm or decline payments, or to fail outright when an intent
is created, and it records every call for assertions.
"""

from dataclasses import replace
from uuid import uuid4

from payments.gateway.port import PaymentConfirmation, PaymentIntent, PaymentProcessor
from shared.errors import UpstreamFailure


class FakePaymentProcessor(PaymentProcessor):
    """Configurable fake payment processor."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Your card was declined."
        self.intent_error: str | None = None
        self.intents: dict[str, PaymentIntent] = {}
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Your card was declined.",
        intent_error: str | None = None,
    ) -> None:
        """Configure processor behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.intent_error = intent_error

    def create_payment_intent(self, amount: int, currency: str) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount": amount,
                "currency": currency,
            }
        )
        if self.intent_error:
            raise UpstreamFailure(self.intent_error, source="payments")

        token = uuid4().hex[:24]
        intent = PaymentIntent(
            id=f"pi_{token}",
            client_secret=f"pi_{token}_secret_{uuid4().hex[:12]}",
            amount=amount,
            currency=currency.lower(),
        )
        self.intents[intent.client_secret] = intent
        return intent

    def confirm_payment(self, client_secret: str, payment_method: str) -> PaymentConfirmation:
        self.calls.append(
            {
                "method": "confirm_payment",
                "client_secret": client_secret,
                "payment_method": payment_method,
            }
        )
        intent = self.intents.get(client_secret)
        if intent is None:
            return PaymentConfirmation(success=False, error="No such payment intent")

        if self.should_succeed:
            confirmed = replace(intent, status="succeeded")
            self.intents[client_secret] = confirmed
            return PaymentConfirmation(success=True, payment_intent=confirmed)
        return PaymentConfirmation(
            success=False,
            payment_intent=replace(intent, status="requires_payment_method"),
            error=self.failure_reason,
        )
