"""Error taxonomy shared across contexts.

Input validation uses protean's ValidationError directly, and reads of
missing records surface protean's ObjectNotFoundError. The classes here
cover the two categories protean has no name for: illegal lifecycle
transitions and collaborator failures.
"""

from protean.exceptions import ValidationError


class InvalidTransition(ValidationError):
    """A status change that the order lifecycle does not permit."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        current_value = getattr(current, "value", current)
        target_value = getattr(target, "value", target)
        super().__init__({"status": [f"Cannot transition from {current_value} to {target_value}"]})


class UpstreamFailure(Exception):
    """A collaborator (payments, persistence, identity, geocoding) failed.

    Propagated untouched to the caller; nothing in the core retries.
    """

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.message = message
        self.source = source


class PaymentDeclined(UpstreamFailure):
    """The payment processor refused to confirm a payment."""

    def __init__(self, message: str, payment_intent_id: str | None = None):
        super().__init__(message, source="payments")
        self.payment_intent_id = payment_intent_id
