"""Template registry — maps notification types to template classes.

Each template renders a title, body and data payload from context values.
"""

from notifications.templates.order_confirmation import OrderConfirmationTemplate
from notifications.templates.tracking_update import TrackingUpdateTemplate, title_for_status

TEMPLATE_REGISTRY: dict[str, type] = {
    OrderConfirmationTemplate.notification_type: OrderConfirmationTemplate,
    TrackingUpdateTemplate.notification_type: TrackingUpdateTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls


__all__ = ["get_template", "title_for_status", "TEMPLATE_REGISTRY"]
