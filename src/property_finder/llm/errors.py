"""Map failures from the geocoder and the model onto validation error kinds."""

import asyncio

import httpx
import ollama
from geopy.exc import (
    GeocoderAuthenticationFailure,
    GeocoderInsufficientPrivileges,
    GeocoderQuotaExceeded,
    GeocoderTimedOut,
)

from property_finder.models.listing import ValidationErrorKind

# Substring rules, checked in order against the lowercased error message.
# Provider messages change without notice; keep every rule here.
MESSAGE_RULES: list[tuple[ValidationErrorKind, tuple[str, ...]]] = [
    (
        ValidationErrorKind.AUTH_OR_QUOTA,
        ("api key", "api_key", "permission", "quota", "billing", "unauthorized"),
    ),
    (ValidationErrorKind.TIMEOUT, ("deadline", "timeout", "timed out")),
    (ValidationErrorKind.CONTENT_FILTERED, ("safety", "content filter")),
]

USER_MESSAGES = {
    ValidationErrorKind.MISSING_INPUT: (
        "Please upload a photo and enter latitude and longitude before validating the location."
    ),
    ValidationErrorKind.INVALID_INPUT_FORMAT: "Invalid input: {detail}",
    ValidationErrorKind.MODEL_UNAVAILABLE: (
        "AI Error: Location validation is not available ({detail}). "
        "Please check your server configuration."
    ),
    ValidationErrorKind.NO_STRUCTURED_OUTPUT: (
        "Error: AI model returned no output for location validation."
    ),
    ValidationErrorKind.AUTH_OR_QUOTA: (
        "AI Error: The API key for the AI service might be invalid, missing permissions "
        "or out of quota. Please check your server configuration."
    ),
    ValidationErrorKind.TIMEOUT: (
        "The location check took too long to respond. Please try again later."
    ),
    ValidationErrorKind.CONTENT_FILTERED: (
        "The photo was rejected by the AI service's content policy. "
        "Please upload a different photo of the property."
    ),
    ValidationErrorKind.UNKNOWN: "AI Error: {detail}",
}


def user_message(kind: ValidationErrorKind, detail: str = "") -> str:
    """User-facing text for an error kind."""
    return USER_MESSAGES[kind].format(detail=detail)


def _kind_from_type(exc: BaseException):
    if isinstance(exc, (GeocoderTimedOut, httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ValidationErrorKind.TIMEOUT
    if isinstance(
        exc,
        (GeocoderQuotaExceeded, GeocoderAuthenticationFailure, GeocoderInsufficientPrivileges),
    ):
        return ValidationErrorKind.AUTH_OR_QUOTA
    if isinstance(exc, ollama.ResponseError) and exc.status_code in (401, 403, 429):
        return ValidationErrorKind.AUTH_OR_QUOTA
    return None


def classify_error(exc: BaseException) -> tuple[ValidationErrorKind, str]:
    """
    Classify a failure raised while validating a location.

    Known exception types win; otherwise the message is matched against
    MESSAGE_RULES. Anything unmatched is UNKNOWN and keeps the raw message.

    Returns:
        Tuple of (kind, user-facing message).
    """
    raw = str(exc) or exc.__class__.__name__

    kind = _kind_from_type(exc)
    if kind is None:
        lowered = raw.lower()
        for rule_kind, needles in MESSAGE_RULES:
            if any(needle in lowered for needle in needles):
                kind = rule_kind
                break
        else:
            kind = ValidationErrorKind.UNKNOWN

    return kind, user_message(kind, raw)
