"""Pull the structured location verdict out of a model response."""

import json
import re
from typing import Optional

from pydantic import ValidationError

from property_finder.models.listing import LocationVerdict

TRUE_STRINGS = {"true", "yes", "valid", "1"}
FALSE_STRINGS = {"false", "no", "invalid", "0"}


def extract_json_from_response(response: str) -> Optional[dict]:
    """Try to extract a JSON object from an LLM response with robust parsing."""
    if not response or not response.strip():
        return None

    # Try direct parse first
    try:
        result = json.loads(response)
        return result if isinstance(result, dict) else None
    except json.JSONDecodeError:
        pass

    # Outermost braces, in case the model wrapped the JSON in prose
    json_match = re.search(r"\{[\s\S]*\}", response)
    if json_match:
        try:
            result = json.loads(json_match.group())
            if isinstance(result, dict):
                return result
        except json.JSONDecodeError:
            pass

    cleaned = response.strip()

    # Remove markdown code blocks
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    cleaned = cleaned.strip()

    # Remove trailing commas before closing braces
    cleaned = re.sub(r",(\s*[}\]])", r"\1", cleaned)

    json_match = re.search(r"\{[\s\S]*\}", cleaned)
    if json_match:
        cleaned = json_match.group()

    try:
        result = json.loads(cleaned)
        return result if isinstance(result, dict) else None
    except json.JSONDecodeError:
        pass

    # Single-to-double quote conversion, last resort
    try:
        cleaned_quotes = re.sub(r"'([^']*)'(\s*:)", r'"\1"\2', cleaned)
        cleaned_quotes = re.sub(r":\s*'([^']*)'(\s*[,}\]])", r': "\1"\2', cleaned_quotes)
        result = json.loads(cleaned_quotes)
        return result if isinstance(result, dict) else None
    except json.JSONDecodeError:
        return None


def _normalize_verdict_fields(data: dict) -> dict:
    """Coerce the loosely-typed values small models tend to produce."""
    data = dict(data)

    # snake_case keys show up despite the schema
    if "isValidLocation" not in data and "is_valid_location" in data:
        data["isValidLocation"] = data.pop("is_valid_location")
    if "formattedAddress" not in data and "formatted_address" in data:
        data["formattedAddress"] = data.pop("formatted_address")

    value = data.get("isValidLocation")
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            data["isValidLocation"] = True
        elif lowered in FALSE_STRINGS:
            data["isValidLocation"] = False

    address = data.get("formattedAddress")
    if isinstance(address, list):
        data["formattedAddress"] = ", ".join(str(part) for part in address if part)

    return data


def parse_verdict(response: str) -> Optional[LocationVerdict]:
    """Parse a model response into a LocationVerdict, or None if it doesn't fit."""
    data = extract_json_from_response(response)
    if data is None:
        return None

    try:
        return LocationVerdict.model_validate(_normalize_verdict_fields(data))
    except ValidationError:
        return None
