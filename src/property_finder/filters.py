"""Predicates deciding whether a listing passes the active filters."""

import math
from typing import Optional

from property_finder.models.listing import FilterSpec, Listing, NumericInput


def parse_number(value: NumericInput) -> Optional[float]:
    """Parse a numeric filter bound.

    Empty, missing, non-numeric and non-finite input all mean "no constraint"
    and return None, never zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_int(value: NumericInput) -> Optional[int]:
    """Parse a count threshold, truncating fractions ("2.5" -> 2)."""
    number = parse_number(value)
    return int(number) if number is not None else None


def matches_search(listing: Listing, search_term: str) -> bool:
    """Case-insensitive match of the term against title, address or type."""
    term = (search_term or "").strip().lower()
    if not term:
        return True
    return (
        term in listing.title.lower()
        or term in listing.address.lower()
        or term in listing.type.lower()
    )


def matches(listing: Listing, filters: FilterSpec, search_term: str = "") -> bool:
    """Return True if the listing passes the search term and every active filter."""
    if not matches_search(listing, search_term):
        return False

    # Price range
    min_price = parse_number(filters.min_price)
    max_price = parse_number(filters.max_price)
    if min_price is not None and listing.price < min_price:
        return False
    if max_price is not None and listing.price > max_price:
        return False

    if filters.listing_type != "any" and listing.type != filters.listing_type:
        return False

    # Bedroom / bathroom minimums
    bedrooms = parse_int(filters.bedrooms)
    bathrooms = parse_int(filters.bathrooms)
    if bedrooms is not None and listing.bedrooms < bedrooms:
        return False
    if bathrooms is not None and listing.bathrooms < bathrooms:
        return False

    # Required flags; an unset flag never constrains
    if filters.garage and not listing.garage:
        return False
    if filters.negotiable and not listing.negotiable:
        return False
    if filters.water and not listing.utilities.water:
        return False
    if filters.electricity and not listing.utilities.electricity:
        return False

    if filters.accessibility != "any" and listing.accessibility != filters.accessibility:
        return False

    if not filters.selected_features <= listing.features:
        return False

    location = filters.location.strip().lower()
    if location and location not in listing.address.lower():
        return False

    return True
