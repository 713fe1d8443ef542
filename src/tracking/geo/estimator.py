"""Distance and delivery-time estimation.

Great-circle distance by the haversine formula, turned into a travel time
at a fixed average city speed plus a fixed handling buffer. Estimates are
advisory: they refine an order's expected delivery and never gate its
progression.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

EARTH_RADIUS_KM = 6371.0
AVERAGE_SPEED_KMH = 30.0
DELIVERY_BUFFER = timedelta(minutes=30)


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


def _coordinates(point) -> tuple[float, float]:
    if isinstance(point, tuple | list):
        return float(point[0]), float(point[1])
    return float(point.latitude), float(point.longitude)


def haversine_distance(origin, destination) -> float:
    """Distance in kilometres between two points.

    Points are ``(latitude, longitude)`` pairs or anything with
    ``latitude``/``longitude`` attributes.
    """
    lat1, lon1 = _coordinates(origin)
    lat2, lon2 = _coordinates(destination)

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_delivery(origin, destination, now: datetime | None = None) -> datetime:
    """now + travel time at AVERAGE_SPEED_KMH + DELIVERY_BUFFER."""
    now = now or datetime.now(UTC)
    hours = haversine_distance(origin, destination) / AVERAGE_SPEED_KMH
    return now + timedelta(hours=hours) + DELIVERY_BUFFER


def delivery_window(estimated_delivery: datetime, now: datetime | None = None) -> str:
    """Human-facing window: "Today", "Tomorrow", or e.g. "Friday, Oct 23"."""
    now = now or datetime.now(UTC)
    if estimated_delivery.tzinfo is not None and now.tzinfo is not None:
        estimated_delivery = estimated_delivery.astimezone(now.tzinfo)

    day = estimated_delivery.date()
    if day == now.date():
        return "Today"
    if day == now.date() + timedelta(days=1):
        return "Tomorrow"
    return f"{estimated_delivery:%A, %b} {day.day}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def format_time_ago(timestamp: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    seconds = (now - timestamp).total_seconds()

    minutes = math.floor(seconds / 60)
    hours = math.floor(seconds / 3600)
    days = math.floor(seconds / 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(days, "day")
