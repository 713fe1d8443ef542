"""Tracking feed source registry.

The in-memory source is the only adapter shipped; select it (or fail
loudly) through the FEED_ADAPTER environment variable.
"""

import os

from tracking.feed.port import TrackingFeedSource

_feed_instance: TrackingFeedSource | None = None


def get_feed_source() -> TrackingFeedSource:
    """Return the configured feed source (singleton)."""
    global _feed_instance
    if _feed_instance is None:
        adapter = os.environ.get("FEED_ADAPTER", "memory")
        if adapter == "memory":
            from tracking.feed.memory_adapter import InMemoryFeedSource

            _feed_instance = InMemoryFeedSource()
        else:
            raise ValueError(f"Unknown feed adapter: {adapter}")
    return _feed_instance


def set_feed_source(source: TrackingFeedSource) -> None:
    global _feed_instance
    _feed_instance = source


def reset_feed_source() -> None:
    """Reset the feed singleton (useful for testing)."""
    global _feed_instance
    _feed_instance = None
