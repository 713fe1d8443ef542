"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.order.order import Order
from payments.gateway.port import PaymentConfirmation, PaymentIntent
from pytest_bdd import given, parsers, then

_ADDRESS = {
    "street": "123 Main St",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "US",
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart(customer_id):
    return ShoppingCart.create(customer_id=customer_id)


@given(parsers.cfparse("a pending order for {quantity:d} units at {price:f}"), target_fixture="order")
def pending_order(customer_id, quantity, price):
    cart = ShoppingCart.create(customer_id=customer_id)
    cart.add_item({"product_id": "prod-001", "name": "Lamp", "price": price, "stock": 100}, quantity=quantity)
    intent = PaymentIntent(id="pi_bdd", client_secret="pi_bdd_secret", amount=100, currency="usd")
    return Order.place(
        cart=cart,
        payment=PaymentConfirmation(success=True, payment_intent=intent),
        customer_id=customer_id,
        shipping_address=_ADDRESS,
        billing_address=_ADDRESS,
        payment_method={"method_id": "pm_card_visa"},
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails(error):
    assert error["exc"] is not None
