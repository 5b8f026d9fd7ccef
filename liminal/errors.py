"""Exception hierarchy used throughout the terminal."""

from __future__ import annotations

from typing import ClassVar


class LiminalError(Exception):
    """Base class for every error raised by the package."""

    label: ClassVar[str] = ""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        if self.label:
            return f"{self.label}: {self.message}"
        return self.message


class TerminalError(LiminalError):
    """Failure inside the terminal emulation layer."""

    label = "Terminal error"


class RendererError(LiminalError):
    """Failure while rendering a frame."""

    label = "Renderer error"


class ShellError(LiminalError):
    """Failure while managing the shell process."""

    label = "Shell process error"


class AiError(LiminalError):
    """Failure while talking to the Ollama server."""

    label = "AI/Ollama error"


class ConfigError(LiminalError):
    """Failure while loading, parsing or saving configuration."""

    label = "Configuration error"


class WindowError(LiminalError):
    """Failure while creating a window."""

    label = "Window creation error"


class WgpuError(LiminalError):
    """Failure in the GPU layer."""

    label = "WGPU error"