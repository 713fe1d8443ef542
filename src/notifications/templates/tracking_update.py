"""Tracking update template — sent for every status update on the feed."""

from shared.order_status import OrderStatus, coerce_status

_TITLES = {
    OrderStatus.CONFIRMED: "📦 Order Confirmed",
    OrderStatus.PROCESSING: "🏭 Order Processing",
    OrderStatus.SHIPPED: "🚚 Order Shipped",
    OrderStatus.DELIVERED: "✅ Order Delivered",
    OrderStatus.CANCELLED: "❌ Order Cancelled",
}
DEFAULT_TITLE = "📋 Order Update"


def title_for_status(status) -> str:
    try:
        return _TITLES.get(coerce_status(status), DEFAULT_TITLE)
    except ValueError:
        return DEFAULT_TITLE


class TrackingUpdateTemplate:
    notification_type = "tracking_update"

    @staticmethod
    def render(context: dict) -> dict:
        status = context.get("status")
        return {
            "title": title_for_status(status),
            "body": context.get("message", ""),
            "data": {
                "orderId": context.get("order_id"),
                "status": getattr(status, "value", status),
                "type": "tracking_update",
            },
        }
