"""Recording tracking updates — the delivery system's write path.

RecordTrackingUpdate stores the update (filling a missing street address
through the geocoder). record_tracking_update() wraps the command with the
steps that reach beyond this context once the update is committed: publish
it to the live feed, bring the order's status in line with it, and tell
the shopper. Only storing the update can fail the call; an order that
cannot take the reported status is logged, and notification is
fire-and-forget.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from notifications.dispatch import notify
from ordering.store import get_order_store
from shared.errors import InvalidTransition
from shared.order_status import OrderStatus
from tracking.domain import tracking
from tracking.feed import get_feed_source
from tracking.feed.update import TrackingUpdate
from tracking.geocoding import describe_location

logger = structlog.get_logger(__name__)


@tracking.command(part_of="TrackingUpdate")
class RecordTrackingUpdate:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    message = String(max_length=500)
    latitude = Float()
    longitude = Float()
    address = String(max_length=500)
    timestamp = DateTime()
    estimated_delivery = DateTime()


@tracking.command_handler(part_of=TrackingUpdate)
class RecordTrackingUpdateHandler:
    @handle(RecordTrackingUpdate)
    def record(self, command):
        address = command.address
        if not address and command.latitude is not None and command.longitude is not None:
            address = describe_location(command.latitude, command.longitude)

        update = TrackingUpdate.record(
            order_id=command.order_id,
            status=command.status,
            message=command.message or "",
            latitude=command.latitude,
            longitude=command.longitude,
            address=address,
            timestamp=command.timestamp,
            estimated_delivery=command.estimated_delivery,
        )
        current_domain.repository_for(TrackingUpdate).add(update)
        return str(update.id)


def reconcile_order_status(order_id, status) -> bool:
    """Move the order to ``status``; False when that is not possible."""
    try:
        get_order_store().update_order_status(str(order_id), status)
    except InvalidTransition as exc:
        logger.warning(
            "Tracking status conflicts with order lifecycle",
            order_id=str(order_id),
            current=exc.current.value,
            reported=exc.target.value,
        )
        return False
    except ObjectNotFoundError:
        logger.warning("Tracking update for unknown order", order_id=str(order_id))
        return False
    return True


def record_tracking_update(**fields) -> str:
    """Record an update and propagate it. Returns the update id."""
    with tracking.domain_context():
        update_id = current_domain.process(RecordTrackingUpdate(**fields), asynchronous=False)
        update = current_domain.repository_for(TrackingUpdate).get(update_id)

    entry = update.as_feed_entry()
    get_feed_source().publish_tracking_update(entry)
    reconcile_order_status(entry.order_id, entry.status)
    notify(
        "tracking_update",
        {
            "order_id": entry.order_id,
            "status": entry.status,
            "message": entry.message,
        },
    )
    logger.info(
        "Tracking update recorded",
        order_id=entry.order_id,
        status=entry.status.value,
        update_id=update_id,
    )
    return update_id
