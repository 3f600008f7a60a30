"""Pipeline that turns the raw listing set into the ordered display list."""

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from property_finder.filters import matches
from property_finder.models.listing import (
    FilterSpec,
    Listing,
    LocationStatus,
    ViewerLocation,
)
from property_finder.utils.geo import distance


@dataclass(frozen=True)
class DisplayEntry:
    """A listing as shown to the viewer, with its distance when known."""

    listing: Listing
    distance_km: Optional[float] = None

    @property
    def has_distance(self) -> bool:
        return self.distance_km is not None


@dataclass(frozen=True)
class DisplayList:
    """Ordered listings plus the location state that explains the order."""

    entries: tuple[DisplayEntry, ...] = ()
    location: ViewerLocation = field(default_factory=ViewerLocation.pending)
    total: int = 0  # listings before filtering

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def listings(self) -> list[Listing]:
        return [entry.listing for entry in self.entries]

    @property
    def sorted_by_distance(self) -> bool:
        return self.location.status == LocationStatus.RESOLVED

    @property
    def filtered_out(self) -> int:
        return self.total - len(self.entries)

    @property
    def status_message(self) -> str:
        """Human-readable reason for the current ordering."""
        status = self.location.status
        if status == LocationStatus.RESOLVED:
            return "Sorted by distance from your location"
        if status == LocationStatus.PENDING:
            return "Determining your location..."
        if self.location.reason == "unsupported":
            return "Location not supported; showing listings in default order"
        detail = f" ({self.location.message})" if self.location.message else ""
        return f"Location unavailable{detail}; showing listings in default order"


def listing_distance(listing: Listing, viewer: ViewerLocation) -> Optional[float]:
    """Distance from the viewer to a listing in km, or None if it can't be known."""
    if viewer.coordinates is None or listing.coordinates is None:
        return None
    coords = listing.coordinates
    if not (math.isfinite(coords.lat) and math.isfinite(coords.lng)):
        return None
    km = distance(viewer.coordinates, coords)
    return km if math.isfinite(km) else None


def _distance_sort_key(entry: DisplayEntry) -> tuple[int, float]:
    # Unknown distances sort last; sorted() keeps baseline order on ties
    if entry.distance_km is None:
        return (1, 0.0)
    return (0, entry.distance_km)


def compute_display_list(
    listings: Iterable[Listing],
    filters: FilterSpec = None,
    search_term: str = "",
    viewer_location: Optional[ViewerLocation] = None,
) -> DisplayList:
    """
    Build the display list.

    1. Keep the listings passing the search term and filters, in input order
    2. If the viewer location is resolved, annotate distances and stable-sort
       ascending, unknown distances last
    3. Otherwise keep input order; the returned location status says why
    """
    filters = filters or FilterSpec()
    viewer = viewer_location or ViewerLocation.pending()

    all_listings = list(listings)
    filtered = [l for l in all_listings if matches(l, filters, search_term)]

    if viewer.status == LocationStatus.RESOLVED and viewer.coordinates is not None:
        entries = [DisplayEntry(l, listing_distance(l, viewer)) for l in filtered]
        entries.sort(key=_distance_sort_key)
    else:
        entries = [DisplayEntry(l) for l in filtered]

    return DisplayList(entries=tuple(entries), location=viewer, total=len(all_listings))
