"""Property listing search with proximity sorting and AI location validation."""

__version__ = "0.1.0"
