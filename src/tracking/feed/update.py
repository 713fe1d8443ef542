"""TrackingUpdate aggregate — one append-only entry in an order's feed.

Updates are recorded once by the delivery system and never edited or
removed afterwards; the aggregate therefore has a factory and no mutators.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, String, ValueObject

from shared.order_status import OrderStatus, coerce_status
from tracking.domain import tracking
from tracking.feed.events import TrackingUpdateRecorded
from tracking.feed.reducer import FeedEntry


@tracking.value_object(part_of="TrackingUpdate")
class GeoLocation:
    latitude = Float(required=True, min_value=-90.0, max_value=90.0)
    longitude = Float(required=True, min_value=-180.0, max_value=180.0)
    address = String(max_length=500)


@tracking.aggregate
class TrackingUpdate:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    location = ValueObject(GeoLocation)
    message = String(max_length=500)
    timestamp = DateTime(required=True)
    estimated_delivery = DateTime()

    @classmethod
    def record(
        cls,
        order_id,
        status,
        message="",
        latitude=None,
        longitude=None,
        address=None,
        timestamp=None,
        estimated_delivery=None,
    ):
        status = coerce_status(status)
        timestamp = timestamp or datetime.now(UTC)
        location = None
        if latitude is not None and longitude is not None:
            location = GeoLocation(latitude=latitude, longitude=longitude, address=address)

        update = cls(
            order_id=order_id,
            status=status.value,
            location=location,
            message=message,
            timestamp=timestamp,
            estimated_delivery=estimated_delivery,
        )
        update.raise_(
            TrackingUpdateRecorded(
                update_id=str(update.id),
                order_id=str(order_id),
                status=status.value,
                latitude=latitude,
                longitude=longitude,
                address=address,
                message=message,
                timestamp=timestamp,
                estimated_delivery=estimated_delivery,
            )
        )
        return update

    def as_feed_entry(self) -> FeedEntry:
        location = self.location
        return FeedEntry(
            id=str(self.id),
            order_id=str(self.order_id),
            status=OrderStatus(self.status),
            timestamp=self.timestamp,
            message=self.message or "",
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            address=location.address if location else None,
            estimated_delivery=self.estimated_delivery,
        )
