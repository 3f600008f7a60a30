"""Property upload workflow: form values, photo, and the location validation gate."""

import base64
import mimetypes
import uuid
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from rich.console import Console

from property_finder.llm.validator import LocationValidator
from property_finder.models.listing import (
    Coordinates,
    Feature,
    Listing,
    ListingType,
    ValidationResult,
)

console = Console()


class ValidationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"


class SubmissionBlockedError(Exception):
    """Raised when submitting without a valid location verdict."""


class ValidationInProgressError(Exception):
    """Raised when validation is triggered while one is already running."""


class PropertyUpload(BaseModel):
    """Values a seller enters for a new listing."""

    title: str = Field(min_length=5, description="Title must be at least 5 characters.")
    description: str = Field(
        min_length=20, description="Description must be at least 20 characters."
    )
    price: float = Field(gt=0, description="Price must be a positive number.")
    type: ListingType
    address: str = Field(min_length=5, description="Address is required.")
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    area: float = Field(0, ge=0)
    features: frozenset[Feature] = frozenset()


def encode_photo(path: Path | str) -> str:
    """Read an image file into a ``data:image/<type>;base64,...`` URI."""
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        raise ValueError(f"Not an image file: {path}")
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


class PropertyUploadForm:
    """
    State for one upload form.

    Validation runs IDLE -> VALIDATING -> VALID | INVALID. Changing the photo
    or the coordinates drops any previous verdict back to IDLE, and submission
    is only allowed in VALID.
    """

    def __init__(self, validator: LocationValidator):
        self.validator = validator
        self.photo_data_uri: Optional[str] = None
        self.latitude: Optional[float] = None
        self.longitude: Optional[float] = None
        self.state = ValidationState.IDLE
        self.result: Optional[ValidationResult] = None
        self._attempt = 0

    def _reset_validation(self) -> None:
        self.state = ValidationState.IDLE
        self.result = None

    def set_photo(self, photo_data_uri: Optional[str]) -> None:
        if photo_data_uri != self.photo_data_uri:
            self._reset_validation()
        self.photo_data_uri = photo_data_uri

    def set_photo_file(self, path: Path | str) -> None:
        self.set_photo(encode_photo(path))

    def set_coordinates(self, latitude: Optional[float], longitude: Optional[float]) -> None:
        if (latitude, longitude) != (self.latitude, self.longitude):
            self._reset_validation()
        self.latitude = latitude
        self.longitude = longitude

    @property
    def has_inputs(self) -> bool:
        return bool(self.photo_data_uri) and self.latitude is not None and self.longitude is not None

    @property
    def can_submit(self) -> bool:
        return (
            self.state == ValidationState.VALID
            and self.result is not None
            and self.result.is_valid_location
        )

    async def validate_location(self) -> ValidationResult:
        """Run the location check for the current photo and coordinates.

        Missing input is reported without leaving IDLE.
        """
        if self.state == ValidationState.VALIDATING:
            raise ValidationInProgressError("Location validation is already running")

        if not self.has_inputs:
            return await self.validator.validate(self.latitude, self.longitude, self.photo_data_uri)

        photo, lat, lng = self.photo_data_uri, self.latitude, self.longitude
        self._attempt += 1
        attempt = self._attempt
        self.state = ValidationState.VALIDATING
        self.result = None
        try:
            result = await self.validator.validate(lat, lng, photo)
        finally:
            # Only the latest attempt owns the state
            if attempt == self._attempt and self.state == ValidationState.VALIDATING:
                self.state = ValidationState.IDLE

        # Superseded, or inputs changed while we waited: the verdict is for stale data
        if attempt != self._attempt or (photo, lat, lng) != (
            self.photo_data_uri, self.latitude, self.longitude
        ):
            return result

        self.result = result
        self.state = ValidationState.VALID if result.is_valid_location else ValidationState.INVALID
        return result

    def submit(self, values: PropertyUpload) -> Listing:
        """Turn the form into a listing; blocked unless the location is validated."""
        if not self.can_submit:
            raise SubmissionBlockedError("Please validate the location before submitting.")

        if (values.latitude, values.longitude) != (self.latitude, self.longitude):
            self._reset_validation()
            raise SubmissionBlockedError(
                "Coordinates changed since the location was validated. Please validate again."
            )

        listing = Listing(
            id=uuid.uuid4().hex,
            title=values.title,
            description=values.description,
            address=values.address,
            type=values.type,
            price=values.price,
            bedrooms=values.bedrooms,
            bathrooms=values.bathrooms,
            area=values.area,
            coordinates=Coordinates(lat=values.latitude, lng=values.longitude),
            image_url=self.photo_data_uri,
            features=values.features,
        )
        console.print(f"[green]Property listed: {listing.title}[/]")

        self.photo_data_uri = None
        self.latitude = None
        self.longitude = None
        self._reset_validation()
        return listing
