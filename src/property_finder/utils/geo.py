"""Geographic utilities: distances, reverse geocoding and viewer location."""

import math
from typing import Awaitable, Callable, Optional

import httpx
from geopy.geocoders import Nominatim
from rich.console import Console

from property_finder.config.settings import (
    EARTH_RADIUS_KM,
    GEOCODER_TIMEOUT,
    GEOCODER_USER_AGENT,
    VIEWER_LOCATION_TIMEOUT,
    VIEWER_LOCATION_URL,
)
from property_finder.models.listing import Coordinates, ViewerLocation

console = Console()

LocationSource = Callable[[], Awaitable[Coordinates]]


class GeocodingError(Exception):
    """Raised when a coordinate pair cannot be turned into an address."""


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great circle distance between two points in km.

    Ranges are not checked; non-finite input gives NaN.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push near-antipodal points just above 1
    if a > 1:
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance(a: Coordinates, b: Coordinates) -> float:
    """Distance in km between two coordinates."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)


class ReverseGeocoder:
    """Turn (latitude, longitude) into a formatted address using Nominatim."""

    def __init__(self, user_agent: str = None, timeout: float = None):
        self.timeout = timeout or GEOCODER_TIMEOUT
        self.geolocator = Nominatim(user_agent=user_agent or GEOCODER_USER_AGENT)

    def __call__(self, latitude: float, longitude: float) -> str:
        location = self.geolocator.reverse(
            (latitude, longitude), exactly_one=True, timeout=self.timeout
        )
        if location is None or not location.address:
            raise GeocodingError(f"No address found for {latitude}, {longitude}")
        return location.address


def ip_location_source(url: str = None, timeout: float = None) -> LocationSource:
    """Build a location source that asks an IP geolocation service where we are."""
    url = url or VIEWER_LOCATION_URL
    timeout = timeout or VIEWER_LOCATION_TIMEOUT

    async def locate() -> Coordinates:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.get(url, headers={"User-Agent": GEOCODER_USER_AGENT})
            resp.raise_for_status()
            data = resp.json()

        lat = data.get("latitude", data.get("lat"))
        lng = data.get("longitude", data.get("lon"))
        if lat is None or lng is None:
            raise ValueError(f"Location service returned no coordinates: {data}")
        return Coordinates(lat=float(lat), lng=float(lng))

    return locate


async def resolve_viewer_location(source: Optional[LocationSource]) -> ViewerLocation:
    """
    Resolve the viewer location once.

    Args:
        source: Async callable returning the viewer coordinates, or None when
                the environment has no way to locate the viewer.

    Returns:
        A resolved ViewerLocation, or an unavailable one with reason
        "unsupported" (no source) or "error" (the source failed).
        Failures are not retried.
    """
    if source is None:
        return ViewerLocation.unavailable("unsupported", "Geolocation is not supported here")

    try:
        coords = await source()
    except Exception as e:
        console.print(f"[yellow]Could not determine viewer location: {e}[/]")
        return ViewerLocation.unavailable("error", str(e))

    return ViewerLocation.resolved(coords.lat, coords.lng)
