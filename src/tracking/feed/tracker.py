"""OrderTracker — live view of one order while its tracking screen is open.

Subscribes to the order's update feed and, when an agent is assigned, to
that agent's position. Every delivery is folded into a TrackingState. When
an order store is supplied the tracker also keeps the order record in step:
the order's status follows the feed, and fresher agent positions refine its
estimated delivery.

A tracker that cannot subscribe keeps working from what the order record
says (``live`` stays False). After stop(), late deliveries are ignored.
"""

import structlog

from shared.errors import InvalidTransition
from tracking.feed import get_feed_source
from tracking.feed.reducer import apply_agent_position, initial_state, reduce_feed

logger = structlog.get_logger(__name__)


class OrderTracker:
    def __init__(self, order_id, feed=None, store=None, destination=None, clock=None) -> None:
        self.order_id = str(order_id)
        self.feed = feed or get_feed_source()
        self.store = store
        self.destination = destination
        self._clock = clock
        self.state = initial_state(self.order_id)
        self.live = False
        self._stopped = False
        self._unsubscribers = []

    def _now(self):
        return self._clock() if self._clock else None

    def start(self, agent_id=None):
        """Load the order's known status and subscribe to its live streams.

        Starting again replaces any earlier subscriptions.
        """
        self._release()
        self._stopped = False
        if self.store is not None:
            order = self.store.get_order(self.order_id)
            self.state = initial_state(
                self.order_id,
                status=order.status,
                estimated_delivery=order.estimated_delivery,
                now=self._now(),
            )

        try:
            self._unsubscribers.append(self.feed.subscribe_tracking_updates(self.order_id, self._on_updates))
            if agent_id is not None:
                self._unsubscribers.append(self.feed.subscribe_agent_location(str(agent_id), self._on_agent_position))
        except Exception as exc:
            logger.warning(
                "Live tracking unavailable",
                order_id=self.order_id,
                error=str(exc),
            )
            self._release()
            self.live = False
            return self.state

        self.live = True
        return self.state

    def stop(self):
        """Cancel both subscriptions; nothing delivered afterwards is applied."""
        self._stopped = True
        self.live = False
        self._release()

    def _release(self):
        while self._unsubscribers:
            unsubscribe = self._unsubscribers.pop()
            unsubscribe()

    # -------------------------------------------------------------------
    # Feed callbacks
    # -------------------------------------------------------------------
    def _on_updates(self, entries):
        if self._stopped:
            return
        previous_status = self.state.status
        self.state = reduce_feed(self.state, entries, now=self._now())
        if self.store is not None and self.state.status is not None and self.state.status != previous_status:
            self._reconcile_status()

    def _on_agent_position(self, position):
        if self._stopped:
            return
        previous_estimate = self.state.estimated_delivery
        self.state = apply_agent_position(self.state, position, destination=self.destination, now=self._now())
        estimate = self.state.estimated_delivery
        if self.store is not None and estimate is not None and estimate != previous_estimate:
            try:
                self.store.revise_delivery_estimate(self.order_id, estimate)
            except Exception as exc:
                logger.error(
                    "Failed to revise order estimate",
                    order_id=self.order_id,
                    error=str(exc),
                )

    def _reconcile_status(self):
        try:
            self.store.update_order_status(self.order_id, self.state.status)
        except InvalidTransition as exc:
            logger.warning(
                "Feed status conflicts with order lifecycle",
                order_id=self.order_id,
                current=exc.current.value,
                reported=exc.target.value,
            )
        except Exception as exc:
            logger.error(
                "Failed to reconcile order status",
                order_id=self.order_id,
                status=self.state.status.value,
                error=str(exc),
            )
