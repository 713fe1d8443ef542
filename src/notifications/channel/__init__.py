"""Channel adapter registry — pluggable push notification dispatch.

Uses the fake push adapter by default; select another through the
NOTIFIER_ADAPTER environment variable.
"""

import os

from notifications.channel.push_port import PushPort

_push_instance: PushPort | None = None


def get_push_channel() -> PushPort:
    """Return the configured push adapter (singleton)."""
    global _push_instance
    if _push_instance is None:
        adapter = os.environ.get("NOTIFIER_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_push import FakePushAdapter

            _push_instance = FakePushAdapter()
        else:
            raise ValueError(f"Unknown notifier adapter: {adapter}")
    return _push_instance


def set_push_channel(channel: PushPort) -> None:
    """Override the active push adapter (useful for tests)."""
    global _push_instance
    _push_instance = channel


def reset_channels() -> None:
    """Reset the push singleton (useful for testing)."""
    global _push_instance
    _push_instance = None
