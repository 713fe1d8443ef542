"""Fake geocoder — answers from a small in-memory gazetteer."""

from shared.errors import UpstreamFailure
from tracking.geocoding.port import Geocoder


class FakeGeocoder(Geocoder):
    def __init__(self) -> None:
        self.places: dict[tuple[float, float], str] = {}
        self.should_succeed = True
        self.failure_reason = "Geocoding service unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Geocoding service unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_place(self, latitude: float, longitude: float, address: str) -> None:
        self.places[(round(latitude, 4), round(longitude, 4))] = address

    def reverse_geocode(self, latitude, longitude):
        self.calls.append({"method": "reverse_geocode", "latitude": latitude, "longitude": longitude})
        if not self.should_succeed:
            raise UpstreamFailure(self.failure_reason, source="geocoding")
        return self.places.get((round(latitude, 4), round(longitude, 4)))
