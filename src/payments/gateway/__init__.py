"""Payment processor factory.

Provides get_payment_processor() / set_payment_processor() to swap
implementations. The fake processor is the only adapter shipped; select it
(or fail loudly) through the PAYMENT_ADAPTER environment variable.
"""

import os

from payments.gateway.port import PaymentProcessor

_current_processor: PaymentProcessor | None = None


def get_payment_processor() -> PaymentProcessor:
    """Return the current payment processor. Defaults to FakePaymentProcessor."""
    global _current_processor
    if _current_processor is None:
        adapter = os.environ.get("PAYMENT_ADAPTER", "fake")
        if adapter == "fake":
            from payments.gateway.fake_adapter import FakePaymentProcessor

            _current_processor = FakePaymentProcessor()
        else:
            raise ValueError(f"Unknown payment adapter: {adapter}")
    return _current_processor


def set_payment_processor(processor: PaymentProcessor) -> None:
    """Override the active payment processor (useful for tests)."""
    global _current_processor
    _current_processor = processor


def reset_payment_processor() -> None:
    """Reset to the default processor."""
    global _current_processor
    _current_processor = None
