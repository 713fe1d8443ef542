"""Tracking feed source port — the subscription half of the document store.

Subscriptions deliver full snapshots: every callback receives all of an
order's updates, most recent first. Each subscribe call returns a
zero-argument function that cancels the subscription.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from tracking.feed.reducer import AgentPosition, FeedEntry

Unsubscribe = Callable[[], None]


class TrackingFeedSource(ABC):
    @abstractmethod
    def subscribe_tracking_updates(self, order_id: str, callback: Callable[[list[FeedEntry]], None]) -> Unsubscribe:
        ...

    @abstractmethod
    def subscribe_agent_location(self, agent_id: str, callback: Callable[[AgentPosition], None]) -> Unsubscribe:
        ...

    @abstractmethod
    def publish_tracking_update(self, entry: FeedEntry) -> None:
        ...

    @abstractmethod
    def publish_agent_position(self, position: AgentPosition) -> None:
        ...
