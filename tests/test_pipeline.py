from property_finder.data.placeholder import PLACEHOLDER_LISTINGS
from property_finder.models.listing import (
    Coordinates,
    FilterSpec,
    LocationStatus,
    ViewerLocation,
)
from property_finder.pipeline import compute_display_list
from property_finder.utils.geo import distance

from conftest import make_listing

VIEWER = ViewerLocation.resolved(0.0, 0.0)


def at_km_east(km: float) -> dict:
    # One degree of longitude on the equator is ~111.19 km
    return {"lat": 0.0, "lng": km / 111.19492664455873}


def test_ties_keep_baseline_order():
    a = make_listing("A", coordinates=at_km_east(5))
    b = make_listing("B", coordinates=at_km_east(5))
    c = make_listing("C", coordinates=at_km_east(3))

    display = compute_display_list([a, b, c], FilterSpec(), "", VIEWER)

    assert [l.id for l in display.listings] == ["C", "A", "B"]
    assert display.sorted_by_distance


def test_unknown_distance_goes_last():
    no_coords = make_listing("X", coordinates=None)
    far = make_listing("far", coordinates=at_km_east(500))
    near = make_listing("near", coordinates=at_km_east(1))
    other_unknown = make_listing("Y", coordinates=None)

    display = compute_display_list([no_coords, far, other_unknown, near], viewer_location=VIEWER)

    assert [l.id for l in display.listings] == ["near", "far", "X", "Y"]
    assert display.entries[-1].distance_km is None
    assert display.entries[0].distance_km is not None


def test_distances_are_annotated():
    display = compute_display_list(PLACEHOLDER_LISTINGS, viewer_location=ViewerLocation.resolved(34.05, -118.24))
    first = display.entries[0]
    assert first.listing.id == "4"  # Los Angeles
    assert first.distance_km < 1
    for entry in display:
        assert entry.distance_km == distance(Coordinates(lat=34.05, lng=-118.24), entry.listing.coordinates)


def test_no_location_keeps_baseline_order():
    for viewer in (None, ViewerLocation.pending(), ViewerLocation.unavailable("error", "denied")):
        display = compute_display_list(PLACEHOLDER_LISTINGS, FilterSpec(), "", viewer)
        assert display.listings == PLACEHOLDER_LISTINGS
        assert all(entry.distance_km is None for entry in display)
        assert not display.sorted_by_distance


def test_status_messages_distinguish_location_states():
    pending = compute_display_list([], viewer_location=ViewerLocation.pending())
    resolved = compute_display_list([], viewer_location=VIEWER)
    unsupported = compute_display_list([], viewer_location=ViewerLocation.unavailable("unsupported"))
    failed = compute_display_list([], viewer_location=ViewerLocation.unavailable("error", "timeout"))

    assert pending.location.status == LocationStatus.PENDING
    messages = {d.status_message for d in (pending, resolved, unsupported, failed)}
    assert len(messages) == 4
    assert "timeout" in failed.status_message


def test_filters_applied_before_sorting():
    spec = FilterSpec(listing_type="rent")
    display = compute_display_list(PLACEHOLDER_LISTINGS, spec, "", ViewerLocation.resolved(40.7, -74.0))
    assert {l.type for l in display.listings} == {"rent"}
    assert display.listings[0].id == "2"  # New York
    assert display.total == len(PLACEHOLDER_LISTINGS)
    assert display.filtered_out == 3


def test_repeated_calls_give_same_result():
    args = (PLACEHOLDER_LISTINGS, FilterSpec(min_price="1000"), "ca", VIEWER)
    assert compute_display_list(*args) == compute_display_list(*args)
