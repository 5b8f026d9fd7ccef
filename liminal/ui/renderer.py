"""Frame bookkeeping for the UI layer and the window renderer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..config import RendererConfig
from ..errors import RendererError

if TYPE_CHECKING:
    from ..terminal import Terminal
    from .manager import UiManager

logger = logging.getLogger(__name__)

Color = tuple[float, float, float, float]


@dataclass
class UiRenderer:
    """Tracks the begin/end pairing of UI frames."""

    in_frame: bool = False
    frames: int = 0

    def begin_frame(self) -> None:
        if self.in_frame:
            raise RendererError("Frame already in progress")
        self.in_frame = True

    def end_frame(self) -> None:
        if not self.in_frame:
            raise RendererError("No frame in progress")
        self.in_frame = False
        self.frames += 1


@dataclass
class Renderer:
    """Draws the terminal and UI onto the window surface."""

    config: RendererConfig = field(default_factory=RendererConfig)
    width: int = 1024
    height: int = 768
    clear_color: Color = field(init=False)
    frames_rendered: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.clear_color = self.config.background_color

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def render(self, terminal: Terminal, ui_manager: UiManager) -> None:
        logger.debug("Rendering frame with background color: %s", self.clear_color)
        self.frames_rendered += 1