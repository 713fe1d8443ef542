"""In-memory tracking feed source for development and testing.

Delivers synchronously: a new subscriber receives the current snapshot at
once, and every publish re-delivers the full snapshot to the order's
subscribers. Agent subscribers receive the latest known position. A failing
subscriber is logged and the rest are still served.
"""

from collections import defaultdict

import structlog

from shared.errors import UpstreamFailure
from tracking.feed.port import TrackingFeedSource
from tracking.feed.reducer import AgentPosition, FeedEntry

logger = structlog.get_logger(__name__)


class InMemoryFeedSource(TrackingFeedSource):
    def __init__(self) -> None:
        self._entries: dict[str, list[FeedEntry]] = defaultdict(list)
        self._positions: dict[str, AgentPosition] = {}
        self._update_subscribers: dict[str, list] = defaultdict(list)
        self._agent_subscribers: dict[str, list] = defaultdict(list)
        self.should_succeed = True
        self.failure_reason = "Feed unavailable"

    def configure(self, should_succeed: bool, failure_reason: str = "Feed unavailable") -> None:
        """Make subscribe calls fail (or succeed again)."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def snapshot(self, order_id: str) -> list[FeedEntry]:
        """All updates for an order, newest first; later arrivals win ties."""
        indexed = list(enumerate(self._entries.get(str(order_id), [])))
        indexed.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [entry for _, entry in indexed]

    def subscriber_count(self, order_id: str | None = None, agent_id: str | None = None) -> int:
        if order_id is not None:
            return len(self._update_subscribers.get(str(order_id), []))
        return len(self._agent_subscribers.get(str(agent_id), []))

    def subscribe_tracking_updates(self, order_id, callback):
        if not self.should_succeed:
            raise UpstreamFailure(self.failure_reason, source="feed")

        key = str(order_id)
        self._update_subscribers[key].append(callback)
        callback(self.snapshot(key))

        def unsubscribe():
            if callback in self._update_subscribers[key]:
                self._update_subscribers[key].remove(callback)

        return unsubscribe

    def subscribe_agent_location(self, agent_id, callback):
        if not self.should_succeed:
            raise UpstreamFailure(self.failure_reason, source="feed")

        key = str(agent_id)
        self._agent_subscribers[key].append(callback)
        if key in self._positions:
            callback(self._positions[key])

        def unsubscribe():
            if callback in self._agent_subscribers[key]:
                self._agent_subscribers[key].remove(callback)

        return unsubscribe

    def publish_tracking_update(self, entry):
        key = str(entry.order_id)
        self._entries[key].append(entry)
        snapshot = self.snapshot(key)
        for callback in list(self._update_subscribers[key]):
            try:
                callback(snapshot)
            except Exception as exc:
                logger.error("Tracking subscriber failed", order_id=key, error=str(exc))

    def publish_agent_position(self, position):
        key = str(position.agent_id)
        self._positions[key] = position
        for callback in list(self._agent_subscribers[key]):
            try:
                callback(position)
            except Exception as exc:
                logger.error("Agent location subscriber failed", agent_id=key, error=str(exc))
