"""ollama-refresh: check locally cached Ollama models against the registry."""

__version__ = "0.1.0"
