"""Terminal emulator core: escape-sequence interpreter, shell runner, widget UI and Ollama client."""

__version__ = "0.1.0"