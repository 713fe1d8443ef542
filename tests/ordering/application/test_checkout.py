"""Application tests for checkout — payment, order placement and cart clearing."""

import json

import pytest
from notifications.channel import get_push_channel
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart
from ordering.cart.management import CreateCart
from ordering.checkout.checkout import CheckoutCart, CheckoutService
from ordering.order.order import Order
from ordering.store import get_order_store
from payments.gateway import get_payment_processor
from protean import current_domain
from protean.exceptions import ValidationError
from shared.errors import PaymentDeclined, UpstreamFailure
from shared.order_status import OrderStatus

_ADDRESS = {
    "full_name": "Ada Lovelace",
    "street": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "US",
}
_CARD = {"method_id": "pm_card_visa", "brand": "visa", "last4": "4242"}


def _cart(price=15.0, quantity=2):
    cart = ShoppingCart.create(customer_id="cust-001")
    cart.add_item({"product_id": "prod-001", "name": "Lamp", "price": price, "stock": 10}, quantity=quantity)
    return cart


def _checkout(cart, **overrides):
    kwargs = {
        "cart": cart,
        "customer_id": "cust-001",
        "shipping_address": _ADDRESS,
        "billing_address": _ADDRESS,
        "payment_method": _CARD,
    }
    kwargs.update(overrides)
    return CheckoutService().checkout(**kwargs)


class TestSuccessfulCheckout:
    def test_places_pending_order(self):
        order = _checkout(_cart())
        assert order.current_status == OrderStatus.PENDING
        assert order.totals.total == pytest.approx(42.39)
        assert order.tracking_number.startswith("EC")

    def test_order_is_persisted(self):
        order = _checkout(_cart())
        stored = get_order_store().get_order(str(order.id))
        assert stored.payment_intent_id == order.payment_intent_id

    def test_charges_total_in_minor_units(self):
        _checkout(_cart())
        calls = get_payment_processor().calls
        assert calls[0] == {"method": "create_payment_intent", "amount": 4239, "currency": "usd"}
        assert calls[1]["method"] == "confirm_payment"
        assert calls[1]["payment_method"] == "pm_card_visa"

    def test_clears_cart(self):
        cart = _cart()
        _checkout(cart)
        assert cart.is_empty
        assert cart.totals.total == 0.0

    def test_sends_order_placed_push(self):
        order = _checkout(_cart())
        pushes = get_push_channel().sent_pushes
        assert len(pushes) == 1
        assert pushes[0]["title"] == "🎉 Order Placed"
        assert order.tracking_number in pushes[0]["body"]
        assert "$42.39" in pushes[0]["body"]
        assert pushes[0]["data"] == {"orderId": str(order.id), "type": "order_placed"}

    def test_push_failure_does_not_fail_checkout(self):
        get_push_channel().configure(raise_on_send=True)
        order = _checkout(_cart())
        assert get_order_store().get_order(str(order.id)) is not None


class TestCheckoutFailures:
    def test_empty_cart_rejected_before_payment(self):
        with pytest.raises(ValidationError):
            _checkout(ShoppingCart.create(customer_id="cust-001"))
        assert get_payment_processor().calls == []

    def test_declined_payment_leaves_cart_intact(self):
        get_payment_processor().configure(should_succeed=False)
        cart = _cart()
        with pytest.raises(PaymentDeclined) as exc:
            _checkout(cart)
        assert exc.value.message == "Your card was declined."
        assert exc.value.payment_intent_id.startswith("pi_")
        assert len(cart.items) == 1
        assert cart.totals.total == pytest.approx(42.39)
        assert get_order_store().list_orders("cust-001") == []

    def test_intent_failure_propagates(self):
        get_payment_processor().configure(should_succeed=True, intent_error="Processor unavailable")
        cart = _cart()
        with pytest.raises(UpstreamFailure):
            _checkout(cart)
        assert not cart.is_empty

    def test_unsupported_amount_rejected(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item({"product_id": "prod-009", "name": "Yacht", "price": 999_999.0, "stock": 5}, quantity=2)
        with pytest.raises(ValidationError) as exc:
            _checkout(cart)
        assert "amount" in exc.value.messages


class TestCheckoutDeduplication:
    def test_resumed_intent_returns_existing_order(self):
        first = _checkout(_cart())
        intent = next(iter(get_payment_processor().intents.values()))

        retry_cart = _cart()
        second = _checkout(retry_cart, payment_intent=intent)

        assert str(second.id) == str(first.id)
        assert retry_cart.is_empty
        assert len(get_order_store().list_orders("cust-001")) == 1
        assert len(get_push_channel().sent_pushes) == 1


class TestCheckoutCartCommand:
    def _prepared_cart(self):
        cart_id = current_domain.process(CreateCart(customer_id="cust-001"), asynchronous=False)
        current_domain.process(
            AddToCart(
                cart_id=cart_id,
                product_id="prod-001",
                name="Lamp",
                price=30.0,
                stock=10,
                quantity=2,
            ),
            asynchronous=False,
        )
        return cart_id

    def test_places_order_and_clears_stored_cart(self):
        cart_id = self._prepared_cart()
        order_id = current_domain.process(
            CheckoutCart(
                cart_id=cart_id,
                customer_id="cust-001",
                shipping_address=json.dumps(_ADDRESS),
                payment_method=json.dumps(_CARD),
            ),
            asynchronous=False,
        )
        order = current_domain.repository_for(Order).get(order_id)
        assert order.totals.total == pytest.approx(64.8)
        assert order.billing_address.city == "Springfield"
        assert current_domain.repository_for(ShoppingCart).get(cart_id).is_empty

    def test_declined_keeps_stored_cart(self):
        get_payment_processor().configure(should_succeed=False)
        cart_id = self._prepared_cart()
        with pytest.raises(PaymentDeclined):
            current_domain.process(
                CheckoutCart(
                    cart_id=cart_id,
                    customer_id="cust-001",
                    shipping_address=json.dumps(_ADDRESS),
                    payment_method=json.dumps(_CARD),
                ),
                asynchronous=False,
            )
        assert len(current_domain.repository_for(ShoppingCart).get(cart_id).items) == 1
