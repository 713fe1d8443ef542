"""Geocoder registry and best-effort location descriptions.

Uses the fake geocoder by default; select another through the
GEOCODER_ADAPTER environment variable.
"""

import os

import structlog

from tracking.geocoding.port import Geocoder

logger = structlog.get_logger(__name__)

_geocoder_instance: Geocoder | None = None


def get_geocoder() -> Geocoder:
    """Return the configured geocoder (singleton)."""
    global _geocoder_instance
    if _geocoder_instance is None:
        adapter = os.environ.get("GEOCODER_ADAPTER", "fake")
        if adapter == "fake":
            from tracking.geocoding.fake_adapter import FakeGeocoder

            _geocoder_instance = FakeGeocoder()
        else:
            raise ValueError(f"Unknown geocoder adapter: {adapter}")
    return _geocoder_instance


def set_geocoder(geocoder: Geocoder) -> None:
    global _geocoder_instance
    _geocoder_instance = geocoder


def reset_geocoder() -> None:
    """Reset the geocoder singleton (useful for testing)."""
    global _geocoder_instance
    _geocoder_instance = None


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude:.4f}, {longitude:.4f}"


def describe_location(latitude: float, longitude: float) -> str:
    """Street address when the geocoder knows one, formatted coordinates otherwise."""
    try:
        address = get_geocoder().reverse_geocode(latitude, longitude)
    except Exception as exc:
        logger.warning(
            "Reverse geocoding failed",
            latitude=latitude,
            longitude=longitude,
            error=str(exc),
        )
        address = None
    return address.strip() if address and address.strip() else format_coordinates(latitude, longitude)
