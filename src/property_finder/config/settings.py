"""Configuration for listing search, location validation and output."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# === LISTING VOCABULARY ===
ALL_FEATURES = (
    "Attached Washroom",
    "Garden",
    "Balcony",
    "Swimming Pool",
    "Gym Access",
    "Pet Friendly",
    "Furnished",
    "Air Conditioning",
    "Security System",
    "Parking",
)

LISTING_TYPES = ("sale", "rent")
ACCESSIBILITY_MODES = ("vehicle", "narrow_way", "unspecified")

# === GEO CONFIG ===
EARTH_RADIUS_KM = 6371
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "property_finder")
GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", "10"))

# IP-based viewer location lookup (free, no API key required)
VIEWER_LOCATION_URL = os.getenv("VIEWER_LOCATION_URL", "https://ipapi.co/json/")
VIEWER_LOCATION_TIMEOUT = 10.0

# === LLM CONFIG ===
OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2-vision")  # must accept images
OLLAMA_API_KEY = os.getenv("OLLAMA_API_KEY")  # only for hosted endpoints
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "120"))
MAX_TOOL_ROUNDS = 3  # tool call round-trips before forcing a final answer

# === OUTPUT ===
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "output"))
HTML_FILENAME = "listings.html"

# Map display
MAP_DEFAULT_ZOOM = 4


@dataclass(frozen=True)
class Settings:
    """Snapshot of the runtime configuration handed to factories."""

    ollama_host: str = OLLAMA_HOST
    ollama_model: str = OLLAMA_MODEL
    ollama_api_key: Optional[str] = OLLAMA_API_KEY
    llm_timeout: float = LLM_TIMEOUT
    geocoder_user_agent: str = GEOCODER_USER_AGENT
    geocoder_timeout: float = GEOCODER_TIMEOUT
    viewer_location_url: str = VIEWER_LOCATION_URL
    output_dir: Path = OUTPUT_DIR


def load_settings(**overrides) -> Settings:
    """Read settings from the current environment, with explicit overrides on top.

    Unset variables fall back to the module defaults above.
    """
    values = dict(
        ollama_host=os.getenv("OLLAMA_HOST", OLLAMA_HOST),
        ollama_model=os.getenv("OLLAMA_MODEL", OLLAMA_MODEL),
        ollama_api_key=os.getenv("OLLAMA_API_KEY", OLLAMA_API_KEY),
        llm_timeout=float(os.getenv("LLM_TIMEOUT", LLM_TIMEOUT)),
        geocoder_user_agent=os.getenv("GEOCODER_USER_AGENT", GEOCODER_USER_AGENT),
        geocoder_timeout=float(os.getenv("GEOCODER_TIMEOUT", GEOCODER_TIMEOUT)),
        viewer_location_url=os.getenv("VIEWER_LOCATION_URL", VIEWER_LOCATION_URL),
        output_dir=Path(os.getenv("OUTPUT_DIR", OUTPUT_DIR)),
    )
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
