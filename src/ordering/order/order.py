"""Order aggregate (CQRS) — a paid snapshot of a cart moving towards delivery.

The Order is created once, from a non-empty cart and a successful payment
confirmation, and is afterwards mutated only by status transitions and
delivery-estimate refinements. Orders are never deleted: cancellation is a
terminal status.

State Machine (see ordering.order.lifecycle):
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    {PENDING, CONFIRMED, PROCESSING, SHIPPED} → {CANCELLED, REFUNDED}
"""

import json
import random
from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import DeliveryEstimateRevised, OrderPlaced, OrderStatusChanged
from ordering.order.lifecycle import can_transition, is_terminal, path_to
from shared.errors import InvalidTransition
from shared.order_status import OrderStatus, coerce_status

DELIVERY_LEAD_TIME = timedelta(days=7)


def generate_tracking_number(now: datetime | None = None) -> str:
    """``EC`` + last 8 digits of the epoch-millisecond clock + 3 random digits."""
    now = now or datetime.now(UTC)
    millis = str(int(now.timestamp() * 1000))
    return f"EC{millis[-8:]}{random.randint(0, 999):03d}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Address:
    """A delivery or billing address captured at checkout time.

    Once recorded on an Order the address is immutable; later edits to the
    customer's saved addresses do not reach placed orders.
    """

    full_name = String(max_length=255)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(max_length=30)


@ordering.value_object(part_of="Order")
class PaymentMethodRef:
    """Reference to the card used; never the card details themselves."""

    method_id = String(required=True, max_length=255)
    type = String(max_length=20, default="card")
    brand = String(max_length=30)
    last4 = String(max_length=4)


@ordering.value_object(part_of="Order")
class OrderTotals:
    """Totals locked at checkout; catalogue changes never reach them."""

    subtotal = Float(default=0.0)
    discount = Float(default=0.0)
    tax = Float(default=0.0)
    shipping = Float(default=0.0)
    total = Float(default=0.0)
    total_items = Integer(default=0)
    currency = String(max_length=3, default="USD")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    sku = String(max_length=50)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    variations = Text(default="{}")
    line_total = Float(default=0.0)


def _value_object(cls, value):
    if value is None or isinstance(value, cls):
        return value
    return cls(**value)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    lines = HasMany(OrderLine)
    totals = ValueObject(OrderTotals)
    shipping_address = ValueObject(Address)
    billing_address = ValueObject(Address)
    payment_method = ValueObject(PaymentMethodRef)
    payment_intent_id = String(max_length=255)
    tracking_number = String(max_length=50)
    estimated_delivery = DateTime()
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        cart,
        payment,
        customer_id,
        shipping_address,
        billing_address,
        payment_method,
    ):
        """Create a pending order from a priced cart and a confirmed payment.

        Args:
            cart: A ShoppingCart with at least one line.
            payment: A PaymentConfirmation; must report success.
            customer_id: The authenticated user placing the order.
            shipping_address: Address or dict of address fields.
            billing_address: Address or dict of address fields.
            payment_method: PaymentMethodRef or dict.
        """
        if cart is None or not cart.items:
            raise ValidationError({"cart": ["Cannot place an order from an empty cart"]})
        if payment is None or not payment.success or payment.payment_intent is None:
            raise ValidationError({"payment": ["Order requires a successful payment confirmation"]})

        now = datetime.now(UTC)
        lines = [
            OrderLine(
                product_id=item.product.product_id,
                name=item.product.name,
                sku=item.product.sku,
                unit_price=item.product.price,
                quantity=item.quantity,
                variations=item.variations,
                line_total=item.line_total,
            )
            for item in cart.items
        ]
        totals = cart.totals
        order = cls(
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            lines=lines,
            totals=OrderTotals(
                subtotal=totals.subtotal,
                discount=totals.discount,
                tax=totals.tax,
                shipping=totals.shipping,
                total=totals.total,
                total_items=totals.total_items,
                currency=totals.currency,
            ),
            shipping_address=_value_object(Address, shipping_address),
            billing_address=_value_object(Address, billing_address),
            payment_method=_value_object(PaymentMethodRef, payment_method),
            payment_intent_id=payment.payment_intent.id,
            tracking_number=generate_tracking_number(now),
            estimated_delivery=now + DELIVERY_LEAD_TIME,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                payment_intent_id=order.payment_intent_id,
                tracking_number=order.tracking_number,
                lines=json.dumps(
                    [
                        {
                            "product_id": str(line.product_id),
                            "name": line.name,
                            "unit_price": line.unit_price,
                            "quantity": line.quantity,
                        }
                        for line in lines
                    ]
                ),
                line_count=len(lines),
                total=order.totals.total,
                currency=order.totals.currency,
                estimated_delivery=order.estimated_delivery,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.current_status)

    def transition_to(self, target, reason: str | None = None) -> None:
        """Move one edge along the lifecycle, or raise InvalidTransition."""
        current = self.current_status
        target = coerce_status(target)
        if not can_transition(current, target):
            raise InvalidTransition(current, target)

        now = datetime.now(UTC)
        self.status = target.value
        if target == OrderStatus.CANCELLED:
            self.cancellation_reason = reason
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                from_status=current.value,
                to_status=target.value,
                reason=reason,
                changed_at=now,
            )
        )

    def advance_to(self, target) -> list[OrderStatus]:
        """Bring the order to ``target``, stepping through skipped statuses.

        Used when an external feed reports a status the order has not caught
        up with yet. Returns the statuses actually applied.
        """
        target = coerce_status(target)
        steps = path_to(self.current_status, target)
        # Validate the whole walk before touching state
        current = self.current_status
        for step in steps:
            if not can_transition(current, step):
                raise InvalidTransition(self.current_status, target)
            current = step
        for step in steps:
            self.transition_to(step)
        return steps

    def confirm(self) -> None:
        self.transition_to(OrderStatus.CONFIRMED)

    def start_processing(self) -> None:
        self.transition_to(OrderStatus.PROCESSING)

    def ship(self, tracking_number: str | None = None) -> None:
        self.transition_to(OrderStatus.SHIPPED)
        if tracking_number:
            self.tracking_number = tracking_number

    def deliver(self) -> None:
        self.transition_to(OrderStatus.DELIVERED)

    def cancel(self, reason: str | None = None) -> None:
        self.transition_to(OrderStatus.CANCELLED, reason=reason)

    def refund(self, reason: str | None = None) -> None:
        self.transition_to(OrderStatus.REFUNDED, reason=reason)

    # -------------------------------------------------------------------
    # Delivery estimate
    # -------------------------------------------------------------------
    def revise_delivery_estimate(self, estimated_delivery: datetime) -> bool:
        """Replace the provisional estimate. Ignored once the order is terminal."""
        if self.is_terminal:
            return False

        now = datetime.now(UTC)
        previous = self.estimated_delivery
        self.estimated_delivery = estimated_delivery
        self.updated_at = now
        self.raise_(
            DeliveryEstimateRevised(
                order_id=str(self.id),
                previous_estimate=previous,
                estimated_delivery=estimated_delivery,
                revised_at=now,
            )
        )
        return True
