"""Handle to the multimodal model, built once at startup and passed around."""

from dataclasses import dataclass
from typing import Union

import ollama
from rich.console import Console

from property_finder.config.settings import Settings, load_settings

console = Console()


@dataclass(frozen=True)
class AvailableModel:
    """A configured Ollama client plus the model name to use."""

    client: ollama.AsyncClient
    model: str

    @property
    def available(self) -> bool:
        return True


@dataclass(frozen=True)
class UnavailableModel:
    """Stand-in when the model could not be configured."""

    reason: str

    @property
    def available(self) -> bool:
        return False


ModelHandle = Union[AvailableModel, UnavailableModel]


def create_model_handle(settings: Settings = None) -> ModelHandle:
    """Build the model handle from settings.

    Never raises: a missing host/model or a client that can't be constructed
    yields an UnavailableModel carrying the reason.
    """
    settings = settings or load_settings()

    if not settings.ollama_host or not settings.ollama_model:
        reason = "OLLAMA_HOST and OLLAMA_MODEL must both be set"
        console.print(f"[bold red]AI location validation disabled: {reason}[/]")
        return UnavailableModel(reason)

    headers = {}
    if settings.ollama_api_key:
        headers["Authorization"] = f"Bearer {settings.ollama_api_key}"

    try:
        client = ollama.AsyncClient(
            host=settings.ollama_host,
            timeout=settings.llm_timeout,
            headers=headers or None,
        )
    except Exception as e:
        console.print(f"[bold red]Failed to initialize Ollama client: {e}[/]")
        return UnavailableModel(f"client initialization failed: {e}")

    console.print(
        f"[dim]Using model {settings.ollama_model} at {settings.ollama_host}[/]"
    )
    return AvailableModel(client=client, model=settings.ollama_model)

