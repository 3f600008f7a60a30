"""Data models for property listings, filters and validation results."""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from property_finder.config.settings import ACCESSIBILITY_MODES, ALL_FEATURES, LISTING_TYPES

Feature = Literal[ALL_FEATURES]
ListingType = Literal[LISTING_TYPES]
Accessibility = Literal[ACCESSIBILITY_MODES]

# Numeric filter inputs arrive as raw text from forms/CLI or as numbers
NumericInput = Optional[Union[float, str]]


class Coordinates(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Utilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    water: bool = False
    electricity: bool = False


class Listing(BaseModel):
    """A property listing. Immutable so a filtering pass never alters it."""

    model_config = ConfigDict(frozen=True)

    # === Identifiers ===
    id: str
    title: str
    address: str = Field(description="Free-text street address")
    type: ListingType = Field(description="sale / rent")

    # === Property details ===
    price: float = Field(ge=0)
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    area: float = Field(0, ge=0, description="Floor area in sqft or sqm")
    coordinates: Optional[Coordinates] = Field(
        None, description="Missing coordinates make the distance unknown"
    )
    description: str = ""
    image_url: Optional[str] = None

    # === Conditions ===
    negotiable: bool = False
    accessibility: Accessibility = "unspecified"
    utilities: Utilities = Field(default_factory=Utilities)
    garage: bool = False
    features: frozenset[Feature] = frozenset()


class FilterSpec(BaseModel):
    """User-chosen constraints. The default instance excludes nothing."""

    model_config = ConfigDict(frozen=True)

    min_price: NumericInput = None
    max_price: NumericInput = None
    listing_type: Literal["sale", "rent", "any"] = "any"
    bedrooms: NumericInput = Field(None, description="Minimum bedroom count")
    bathrooms: NumericInput = Field(None, description="Minimum bathroom count")
    garage: bool = False
    negotiable: bool = False
    accessibility: Literal["vehicle", "narrow_way", "any"] = "any"
    water: bool = False
    electricity: bool = False
    selected_features: frozenset[Feature] = frozenset()
    location: str = Field("", description="Substring the address must contain")


class LocationStatus(str, Enum):
    """Availability of the viewer location."""

    PENDING = "pending"
    RESOLVED = "resolved"
    UNAVAILABLE = "unavailable"


class ViewerLocation(BaseModel):
    """Where the person browsing is, if known."""

    model_config = ConfigDict(frozen=True)

    status: LocationStatus = LocationStatus.PENDING
    coordinates: Optional[Coordinates] = None
    reason: Optional[Literal["error", "unsupported"]] = None
    message: Optional[str] = None

    @classmethod
    def pending(cls) -> "ViewerLocation":
        return cls()

    @classmethod
    def resolved(cls, lat: float, lng: float) -> "ViewerLocation":
        return cls(status=LocationStatus.RESOLVED, coordinates=Coordinates(lat=lat, lng=lng))

    @classmethod
    def unavailable(
        cls, reason: Literal["error", "unsupported"], message: str = None
    ) -> "ViewerLocation":
        return cls(status=LocationStatus.UNAVAILABLE, reason=reason, message=message)


class ValidationErrorKind(str, Enum):
    """Why a location validation came back invalid."""

    MISSING_INPUT = "missing_input"
    INVALID_INPUT_FORMAT = "invalid_input_format"
    MODEL_UNAVAILABLE = "model_unavailable"
    NO_STRUCTURED_OUTPUT = "no_structured_output"
    AUTH_OR_QUOTA = "auth_or_quota"
    TIMEOUT = "timeout"
    CONTENT_FILTERED = "content_filtered"
    UNKNOWN = "unknown"


class LocationVerdict(BaseModel):
    """Structured output the model must return."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid_location: bool = Field(
        alias="isValidLocation", description="Whether the photo plausibly matches the address"
    )
    formatted_address: str = Field(
        alias="formattedAddress", description="The formatted address of the location"
    )


class ValidationResult(LocationVerdict):
    """Verdict of one validation attempt.

    ``formatted_address`` holds the address on success and a human-readable
    error message otherwise.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    error_kind: Optional[ValidationErrorKind] = Field(None, exclude=True)

    @classmethod
    def failure(cls, kind: ValidationErrorKind, message: str) -> "ValidationResult":
        return cls(is_valid_location=False, formatted_address=message, error_kind=kind)
