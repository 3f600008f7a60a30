"""AI location validation using Ollama."""

from property_finder.llm.client import AvailableModel, UnavailableModel, create_model_handle
from property_finder.llm.errors import classify_error
from property_finder.llm.validator import LocationValidator

__all__ = [
    "AvailableModel",
    "UnavailableModel",
    "create_model_handle",
    "classify_error",
    "LocationValidator",
]
