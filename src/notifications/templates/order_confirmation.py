"""Order confirmation template — sent when checkout places an order."""

from ordering.pricing.money import format_amount


class OrderConfirmationTemplate:
    notification_type = "order_placed"

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        tracking_number = context.get("tracking_number", "N/A")
        total = format_amount(context.get("total", 0.0), context.get("currency", "USD"))
        return {
            "title": "🎉 Order Placed",
            "body": (f"Your order #{tracking_number} for {total} has been placed. We'll let you know when it ships."),
            "data": {
                "orderId": order_id,
                "type": "order_placed",
            },
        }
