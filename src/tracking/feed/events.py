"""Tracking domain events."""

from protean.fields import DateTime, Float, Identifier, String

from tracking.domain import tracking


@tracking.event(part_of="TrackingUpdate")
class TrackingUpdateRecorded:
    """The delivery system appended an update to an order's feed."""

    __version__ = 1

    update_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True)
    latitude = Float()
    longitude = Float()
    address = String()
    message = String()
    timestamp = DateTime(required=True)
    estimated_delivery = DateTime()
