"""Great-circle helpers for radius search."""

from dataclasses import dataclass
import math

EARTH_RADIUS_MILES = 3963.0


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


def distance_miles(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance between two points."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(min(1.0, math.sqrt(h)))


def bounding_box(center: Coordinates, radius_miles: float) -> BoundingBox:
    """Smallest lat/lng box containing every point within ``radius_miles``."""
    angular = radius_miles / EARTH_RADIUS_MILES
    lat_delta = math.degrees(angular)
    min_lat = max(-90.0, center.latitude - lat_delta)
    max_lat = min(90.0, center.latitude + lat_delta)

    if min_lat <= -90.0 or max_lat >= 90.0 or angular >= math.pi / 2:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)

    # Widest longitude span occurs at the latitude farthest from the equator.
    cos_lat = math.cos(math.radians(max(abs(min_lat), abs(max_lat))))
    lng_delta = math.degrees(angular / cos_lat) if cos_lat > 0 else 180.0
    min_lng, max_lng = center.longitude - lng_delta, center.longitude + lng_delta
    # A box that wraps the antimeridian cannot be expressed as one BETWEEN.
    if lng_delta >= 180.0 or min_lng < -180.0 or max_lng > 180.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)
    return BoundingBox(min_lat, max_lat, min_lng, max_lng)
