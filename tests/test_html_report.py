from property_finder.data.placeholder import PLACEHOLDER_LISTINGS
from property_finder.export.html_report import build_map, export_to_html
from property_finder.models.listing import FilterSpec, ViewerLocation
from property_finder.pipeline import compute_display_list

from conftest import make_listing


def test_report_lists_matches_with_distances(tmp_path):
    display = compute_display_list(
        PLACEHOLDER_LISTINGS, FilterSpec(listing_type="rent"), "", ViewerLocation.resolved(34.05, -118.24)
    )
    path = export_to_html(display, tmp_path, "report.html", search_term="")

    html = path.read_text(encoding="utf-8")
    assert path == tmp_path / "report.html"
    assert "Luxury Penthouse Suite" in html
    assert "Spacious Modern Villa" not in html
    assert "km away" in html
    assert "Sorted by distance" in html
    assert html.index("Luxury Penthouse Suite") < html.index("Cozy Downtown Apartment")


def test_report_without_matches(tmp_path):
    display = compute_display_list(PLACEHOLDER_LISTINGS, FilterSpec(min_price="99999999"))
    html = export_to_html(display, tmp_path).read_text(encoding="utf-8")
    assert "No properties match" in html


def test_no_map_without_any_coordinates():
    display = compute_display_list([make_listing(coordinates=None)])
    assert build_map(display) is None


def test_map_centers_on_viewer():
    display = compute_display_list(PLACEHOLDER_LISTINGS, viewer_location=ViewerLocation.resolved(40.7, -74.0))
    fmap = build_map(display)
    assert fmap.location == [40.7, -74.0]


def test_seller_text_is_escaped_but_map_is_not(tmp_path):
    listing = make_listing(title="<script>alert(1)</script> Cottage", address="1 <b>Bold</b> Way")
    display = compute_display_list([listing])
    html = export_to_html(display, tmp_path).read_text(encoding="utf-8")

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt; Cottage" in html
    assert "1 &lt;b&gt;Bold&lt;/b&gt; Way" in html
    assert "<iframe" in html
