"""Check that an uploaded photo plausibly shows the place at the given coordinates."""

import asyncio
import base64
import binascii
import re
from typing import Callable, Optional

from rich.console import Console

from property_finder.config.settings import MAX_TOOL_ROUNDS
from property_finder.llm.client import ModelHandle
from property_finder.llm.errors import classify_error, user_message
from property_finder.llm.extractor import parse_verdict
from property_finder.models.listing import (
    LocationVerdict,
    ValidationErrorKind,
    ValidationResult,
)

console = Console()

Geocoder = Callable[[float, float], str]

DATA_URI_RE = re.compile(r"^data:(image/[\w.+-]+);base64,(.+)$", re.DOTALL)

GEOCODE_TOOL_NAME = "get_formatted_address"

GEOCODE_TOOL = {
    "type": "function",
    "function": {
        "name": GEOCODE_TOOL_NAME,
        "description": "Returns the formatted street address of a latitude/longitude pair.",
        "parameters": {
            "type": "object",
            "required": ["latitude", "longitude"],
            "properties": {
                "latitude": {"type": "number", "description": "The latitude of the location."},
                "longitude": {"type": "number", "description": "The longitude of the location."},
            },
        },
    },
}

SYSTEM_PROMPT = """You are an expert real estate assistant. A seller uploads a photo of a property \
together with its location (latitude and longitude). Decide whether the photographed scene \
plausibly matches the address at that location: climate and vegetation, architecture, urban or \
rural surroundings, road layout and signage.

You may call the get_formatted_address tool to look up the address of a coordinate pair.

Respond with ONLY a JSON object in the following format:
{"isValidLocation": true or false, "formattedAddress": "the formatted address"}"""

USER_PROMPT = """Latitude: {latitude}
Longitude: {longitude}
Address from geocoding: {address}

Does the attached photo plausibly show a property at this address?"""


class InvalidInputError(ValueError):
    """Raised for input that must be rejected before any external call."""


def decode_photo_data_uri(photo_data_uri: str) -> str:
    """Return the base64 payload of an image data URI.

    Raises:
        InvalidInputError: if the value is not ``data:image/<type>;base64,<data>``
            or the payload is not valid base64.
    """
    match = DATA_URI_RE.match(photo_data_uri.strip())
    if not match:
        raise InvalidInputError(
            "Invalid photo data URI format. Expected 'data:image/<type>;base64,<data>'."
        )
    payload = match.group(2).strip()
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInputError("Photo data is not valid base64.")
    return payload


def check_coordinates(latitude: float, longitude: float) -> None:
    if not -90 <= latitude <= 90:
        raise InvalidInputError("Latitude must be between -90 and 90.")
    if not -180 <= longitude <= 180:
        raise InvalidInputError("Longitude must be between -180 and 180.")


class LocationValidator:
    """Validate property locations with a geocoder and a multimodal model.

    Stateless: every call re-runs geocoding and the model, nothing is cached,
    and concurrent calls are not arbitrated.
    """

    def __init__(self, model: ModelHandle, geocoder: Geocoder):
        self.model = model
        self.geocoder = geocoder

    async def validate(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        photo_data_uri: Optional[str],
    ) -> ValidationResult:
        """Validate one upload attempt. Never raises; failures come back invalid."""
        if not photo_data_uri or latitude is None or longitude is None:
            return ValidationResult.failure(
                ValidationErrorKind.MISSING_INPUT,
                user_message(ValidationErrorKind.MISSING_INPUT),
            )

        try:
            check_coordinates(latitude, longitude)
            image = decode_photo_data_uri(photo_data_uri)
        except InvalidInputError as e:
            return ValidationResult.failure(
                ValidationErrorKind.INVALID_INPUT_FORMAT,
                user_message(ValidationErrorKind.INVALID_INPUT_FORMAT, str(e)),
            )

        if not self.model.available:
            console.print(f"[red]Location validation skipped: {self.model.reason}[/]")
            return ValidationResult.failure(
                ValidationErrorKind.MODEL_UNAVAILABLE,
                user_message(ValidationErrorKind.MODEL_UNAVAILABLE, self.model.reason),
            )

        try:
            address = await self._geocode(latitude, longitude)
            verdict = await self._ask_model(latitude, longitude, address, image)
        except Exception as e:
            kind, message = classify_error(e)
            console.print(f"[red]Location validation failed ({kind.value}): {e}[/]")
            return ValidationResult.failure(kind, message)

        if verdict is None:
            console.print(
                f"[yellow]Model returned no structured output for {latitude}, {longitude}[/]"
            )
            return ValidationResult.failure(
                ValidationErrorKind.NO_STRUCTURED_OUTPUT,
                user_message(ValidationErrorKind.NO_STRUCTURED_OUTPUT),
            )

        return ValidationResult(
            is_valid_location=verdict.is_valid_location,
            formatted_address=verdict.formatted_address,
        )

    async def _geocode(self, latitude: float, longitude: float) -> str:
        return await asyncio.to_thread(self.geocoder, latitude, longitude)

    async def _run_tool(self, name: str, arguments: dict) -> str:
        if name != GEOCODE_TOOL_NAME:
            return f"Unknown tool: {name}"
        try:
            latitude = float(arguments["latitude"])
            longitude = float(arguments["longitude"])
        except (KeyError, TypeError, ValueError):
            return f"Invalid arguments for {name}: expected numeric latitude and longitude, got {arguments}"
        return await self._geocode(latitude, longitude)

    async def _ask_model(
        self, latitude: float, longitude: float, address: str, image: str
    ) -> Optional[LocationVerdict]:
        """Run the chat, answering tool calls, until the model gives a final answer."""
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": USER_PROMPT.format(
                    latitude=latitude, longitude=longitude, address=address
                ),
                "images": [image],
            },
        ]
        schema = LocationVerdict.model_json_schema()

        for round_no in range(MAX_TOOL_ROUNDS + 1):
            # Last round drops the tool so the model has to answer
            tools = [GEOCODE_TOOL] if round_no < MAX_TOOL_ROUNDS else None
            response = await self.model.client.chat(
                model=self.model.model,
                messages=messages,
                tools=tools,
                format=schema,
                options={"temperature": 0.1},
            )
            message = response.message

            if not message.tool_calls:
                return parse_verdict(message.content or "")

            messages.append(message)
            for call in message.tool_calls:
                result = await self._run_tool(call.function.name, call.function.arguments)
                console.print(f"[dim]Tool {call.function.name} -> {result}[/]")
                messages.append(
                    {"role": "tool", "content": result, "tool_name": call.function.name}
                )

        return None
