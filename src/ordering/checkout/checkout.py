"""Checkout — turns a priced cart into a paid order.

The sequence is strictly ordered and stops at the first failure:

    1. reject an empty cart
    2. validate the amount and currency for the processor
    3. create a payment intent (minor units)
    4. confirm it with the shopper's payment method
    5. return the existing order if this payment intent already placed one
    6. place and persist the order
    7. clear the cart
    8. notify, fire-and-forget

Nothing before step 7 touches the cart, so a failed checkout leaves it
exactly as it was. Collaborator failures propagate; there are no retries.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from notifications.dispatch import notify
from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.pricing.money import to_minor_units, validate_payment
from ordering.store import get_order_store
from payments.gateway import get_payment_processor
from shared.errors import PaymentDeclined

logger = structlog.get_logger(__name__)


def _method_id(payment_method) -> str:
    if isinstance(payment_method, dict):
        return payment_method["method_id"]
    return payment_method.method_id


class CheckoutService:
    def __init__(self, payments=None, store=None) -> None:
        self.payments = payments or get_payment_processor()
        self.store = store or get_order_store()

    def checkout(
        self,
        cart,
        customer_id,
        shipping_address,
        billing_address,
        payment_method,
        payment_intent=None,
    ):
        """Charge the cart total and place the order.

        ``payment_intent`` resumes a checkout whose intent was already
        created, e.g. when the client retries after a lost response.
        """
        if cart is None or cart.is_empty:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        total = cart.totals.total
        currency = cart.totals.currency
        validate_payment(total, currency)

        if payment_intent is None:
            payment_intent = self.payments.create_payment_intent(to_minor_units(total), currency.lower())

        confirmation = self.payments.confirm_payment(payment_intent.client_secret, _method_id(payment_method))
        if not confirmation.success:
            logger.warning(
                "Payment declined at checkout",
                cart_id=str(cart.id),
                payment_intent_id=payment_intent.id,
                error=confirmation.error,
            )
            raise PaymentDeclined(confirmation.error or "Payment failed", payment_intent_id=payment_intent.id)

        intent_id = confirmation.payment_intent.id
        order = self.store.find_by_payment_intent(intent_id)
        if order is not None:
            logger.info(
                "Checkout already placed an order for this payment",
                order_id=str(order.id),
                payment_intent_id=intent_id,
            )
            cart.clear()
            return order

        order = Order.place(
            cart=cart,
            payment=confirmation,
            customer_id=customer_id,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method,
        )
        self.store.create_order(order)
        cart.clear()

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(customer_id),
            total=order.totals.total,
        )
        notify(
            "order_placed",
            {
                "order_id": str(order.id),
                "tracking_number": order.tracking_number,
                "total": order.totals.total,
                "currency": order.totals.currency,
            },
        )
        return order


@ordering.command(part_of="ShoppingCart")
class CheckoutCart:
    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON address dict
    billing_address = Text()  # JSON address dict; defaults to shipping
    payment_method = Text(required=True)  # JSON: {method_id, type, brand, last4}


@ordering.command_handler(part_of=ShoppingCart)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)

        shipping_address = json.loads(command.shipping_address)
        billing_address = json.loads(command.billing_address) if command.billing_address else shipping_address

        order = CheckoutService().checkout(
            cart=cart,
            customer_id=command.customer_id,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=json.loads(command.payment_method),
        )
        repo.add(cart)
        return str(order.id)
