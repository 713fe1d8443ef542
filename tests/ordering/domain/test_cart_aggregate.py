"""Tests for the ShoppingCart aggregate — lines, totals, and their invariant."""

import pytest
from ordering.cart.cart import CartTotals, ProductSnapshot, ShoppingCart, canonical_variations
from ordering.cart.events import (
    CartCleared,
    CartDiscountApplied,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from protean.exceptions import ValidationError


def _product(product_id="prod-001", price=20.0, stock=5, name="Canvas Tote"):
    return {
        "product_id": product_id,
        "name": name,
        "sku": f"SKU-{product_id}",
        "price": price,
        "stock": stock,
    }


def _cart_with_item(quantity=2, **product):
    cart = ShoppingCart.create(customer_id="cust-001")
    cart.add_item(_product(**product), quantity=quantity)
    cart._events.clear()
    return cart


def _cart_with_two_lines():
    cart = ShoppingCart.create(customer_id="cust-001")
    cart.add_item(_product(), quantity=2)
    cart.add_item(_product(product_id="prod-002", price=12.5, name="Notebook"), quantity=1)
    return cart


def _lines(cart):
    return sorted((item.line_key, item.quantity, item.unit_price) for item in cart.items)


class TestCartCreation:
    def test_create_with_customer_id(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        assert str(cart.customer_id) == "cust-001"
        assert cart.session_id is None

    def test_create_guest_cart(self):
        cart = ShoppingCart.create(session_id="sess-guest-001")
        assert cart.customer_id is None
        assert cart.session_id == "sess-guest-001"

    def test_new_cart_is_empty_with_zero_totals(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        assert cart.is_empty
        assert cart.totals.total == 0.0
        assert cart.totals.shipping == 0.0
        assert cart.totals.currency == "USD"

    def test_create_sets_timestamps(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        assert cart.created_at is not None
        assert cart.updated_at is not None


class TestCanonicalVariations:
    def test_none_and_empty_are_equal(self):
        assert canonical_variations(None) == canonical_variations({}) == "{}"

    def test_key_order_does_not_matter(self):
        assert canonical_variations({"size": "M", "color": "Red"}) == canonical_variations(
            {"color": "Red", "size": "M"}
        )

    def test_accepts_json_text(self):
        assert canonical_variations('{"size": "M"}') == canonical_variations({"size": "M"})


class TestAddItem:
    def test_adds_new_line(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        item = cart.add_item(_product(), quantity=2)
        assert len(cart.items) == 1
        assert item.quantity == 2
        assert item.unit_price == 20.0
        assert item.added_at is not None

    def test_recomputes_totals(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item(_product(price=15.0), quantity=2)
        assert cart.totals.subtotal == 30.0
        assert cart.totals.tax == pytest.approx(2.4)
        assert cart.totals.shipping == 9.99
        assert cart.totals.total == pytest.approx(42.39)
        assert cart.totals.total_items == 2

    def test_same_product_and_variations_merge(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item(_product(), quantity=1, variations={"size": "M", "color": "Red"})
        cart.add_item(_product(), quantity=2, variations={"color": "Red", "size": "M"})
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3

    def test_two_adds_match_one_add_of_the_sum(self):
        twice = ShoppingCart.create(customer_id="cust-001")
        twice.add_item(_product(), quantity=1, variations={"size": "M"})
        twice.add_item(_product(), quantity=2, variations={"size": "M"})
        once = ShoppingCart.create(customer_id="cust-001")
        once.add_item(_product(), quantity=3, variations={"size": "M"})

        assert _lines(twice) == _lines(once)
        assert twice.totals.to_dict() == once.totals.to_dict()

    def test_missing_and_empty_variations_merge(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item(_product(), quantity=1)
        cart.add_item(_product(), quantity=1, variations={})
        assert len(cart.items) == 1

    def test_different_variations_make_separate_lines(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item(_product(), quantity=1, variations={"size": "M"})
        cart.add_item(_product(), quantity=1, variations={"size": "L"})
        assert len(cart.items) == 2

    def test_merge_keeps_first_price_snapshot(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item(_product(price=20.0), quantity=1)
        cart.add_item(_product(price=25.0), quantity=1)
        assert cart.items[0].unit_price == 20.0
        assert cart.totals.subtotal == 40.0

    def test_accepts_product_snapshot(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        snapshot = ProductSnapshot(product_id="prod-9", name="Mug", price=8.0, stock=3)
        cart.add_item(snapshot, quantity=1)
        assert cart.items[0].product.name == "Mug"

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        cart = ShoppingCart.create(customer_id="cust-001")
        with pytest.raises(ValidationError):
            cart.add_item(_product(), quantity=quantity)
        assert cart.is_empty

    def test_fractional_quantity_rejected(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        with pytest.raises(ValidationError):
            cart.add_item(_product(), quantity=1.5)

    def test_cannot_exceed_stock(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        with pytest.raises(ValidationError) as exc:
            cart.add_item(_product(stock=5), quantity=6)
        assert "quantity" in exc.value.messages
        assert cart.is_empty

    def test_merge_cannot_exceed_stock(self):
        cart = _cart_with_item(quantity=3, stock=5)
        with pytest.raises(ValidationError):
            cart.add_item(_product(stock=5), quantity=3)
        assert cart.items[0].quantity == 3
        assert cart._events == []

    def test_raises_item_added_event(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item(_product(), quantity=2)
        cart.add_item(_product(), quantity=1)
        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 2
        assert events[1].quantity == 1
        assert events[1].line_quantity == 3
        assert events[1].new_total == cart.totals.total


class TestUpdateItemQuantity:
    def test_overwrites_quantity(self):
        cart = _cart_with_item(quantity=1)
        item_id = str(cart.items[0].id)
        cart.update_item_quantity(item_id, 4)
        assert cart.items[0].quantity == 4
        assert cart.totals.subtotal == 80.0
        assert cart.totals.shipping == 0.0

    def test_zero_removes_line(self):
        cart = _cart_with_item(quantity=2)
        cart.update_item_quantity(str(cart.items[0].id), 0)
        assert cart.is_empty
        assert any(isinstance(e, CartItemRemoved) for e in cart._events)

    def test_negative_removes_line(self):
        cart = _cart_with_item(quantity=2)
        cart.update_item_quantity(str(cart.items[0].id), -3)
        assert cart.is_empty

    def test_zero_quantity_matches_remove(self):
        updated = _cart_with_two_lines()
        removed = _cart_with_two_lines()

        updated.update_item_quantity(str(updated.find_line("prod-002").id), 0)
        removed.remove_item(str(removed.find_line("prod-002").id))

        assert _lines(updated) == _lines(removed) == [(("prod-001", "{}"), 2, 20.0)]
        assert updated.totals.to_dict() == removed.totals.to_dict()

    def test_unknown_item_is_noop(self):
        cart = _cart_with_item(quantity=2)
        assert cart.update_item_quantity("missing", 5) is None
        assert cart.items[0].quantity == 2
        assert cart._events == []

    def test_cannot_exceed_line_stock(self):
        cart = _cart_with_item(quantity=2, stock=3)
        with pytest.raises(ValidationError):
            cart.update_item_quantity(str(cart.items[0].id), 4)
        assert cart.items[0].quantity == 2

    def test_raises_quantity_updated_event(self):
        cart = _cart_with_item(quantity=1)
        cart.update_item_quantity(str(cart.items[0].id), 3)
        event = cart._events[-1]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 3


class TestRemoveItem:
    def test_removes_line(self):
        cart = _cart_with_item()
        assert cart.remove_item(str(cart.items[0].id)) is True
        assert cart.is_empty

    def test_unknown_item_is_noop(self):
        cart = _cart_with_item()
        assert cart.remove_item("missing") is False
        assert len(cart.items) == 1
        assert cart._events == []

    def test_removing_last_line_zeroes_totals(self):
        cart = _cart_with_item()
        cart.remove_item(str(cart.items[0].id))
        assert cart.totals.subtotal == 0.0
        assert cart.totals.shipping == 0.0
        assert cart.totals.total == 0.0

    def test_remaining_lines_are_repriced(self):
        cart = ShoppingCart.create(customer_id="cust-001")
        cart.add_item(_product("prod-001", price=40.0), quantity=1)
        cart.add_item(_product("prod-002", price=15.0), quantity=1)
        assert cart.totals.shipping == 0.0
        cart.remove_item(str(cart.items[0].id))
        assert cart.totals.subtotal == 15.0
        assert cart.totals.shipping == 9.99


class TestClear:
    def test_empties_cart_and_zeroes_totals(self):
        cart = _cart_with_item()
        cart.apply_discount(5.0, code="SAVE5")
        cart.clear()
        assert cart.is_empty
        assert cart.totals.total == 0.0
        assert cart.discount == 0.0
        assert cart.discount_code is None

    def test_raises_cleared_event(self):
        cart = _cart_with_item()
        cart.clear()
        assert isinstance(cart._events[-1], CartCleared)


class TestDiscount:
    def test_discount_reduces_subtotal(self):
        cart = _cart_with_item(quantity=3)
        cart.apply_discount(15.0, code="SPRING15")
        assert cart.totals.discount == 15.0
        assert cart.totals.subtotal == 45.0
        assert cart.discount_code == "SPRING15"

    def test_new_discount_replaces_old(self):
        cart = _cart_with_item(quantity=3)
        cart.apply_discount(15.0)
        cart.apply_discount(5.0)
        assert cart.totals.subtotal == 55.0

    def test_negative_discount_rejected(self):
        cart = _cart_with_item()
        with pytest.raises(ValidationError):
            cart.apply_discount(-1.0)

    def test_discount_survives_line_changes(self):
        cart = _cart_with_item(quantity=1)
        cart.apply_discount(5.0)
        cart.update_item_quantity(str(cart.items[0].id), 2)
        assert cart.totals.subtotal == 35.0

    def test_raises_discount_applied_event(self):
        cart = _cart_with_item()
        cart.apply_discount(5.0, code="SAVE5")
        event = cart._events[-1]
        assert isinstance(event, CartDiscountApplied)
        assert event.code == "SAVE5"
        assert event.amount == 5.0


class TestTotalsInvariant:
    def test_totals_always_match_engine(self):
        cart = _cart_with_item(quantity=2)
        cart.apply_discount(3.0)
        expected = cart.expected_totals()
        assert cart.totals.total == pytest.approx(expected.total)
        assert cart.totals.total_items == expected.total_items

    def test_stale_totals_are_rejected(self):
        cart = _cart_with_item(quantity=2)
        with pytest.raises(ValidationError):
            cart.totals = CartTotals(subtotal=999.0, total=999.0, total_items=2)

    def test_line_total(self):
        cart = _cart_with_item(quantity=3, price=19.99)
        assert cart.items[0].line_total == pytest.approx(59.97)
