"""Reverse geocoding port (abstract interface)."""

from abc import ABC, abstractmethod


class Geocoder(ABC):
    @abstractmethod
    def reverse_geocode(self, latitude: float, longitude: float) -> str | None:
        """Street address for a coordinate, or None when nothing is known.

        May raise UpstreamFailure when the service is unreachable.
        """
        ...
