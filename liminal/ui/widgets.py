"""Widgets drawn by the UI layer, and the renderer interface they draw through."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .events import Blur, Click, DoubleClick, Drag, Focus, KeyPress, RightClick, Scroll, TextInput

Color = tuple[float, float, float, float]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float

    def contains_point(self, x: float, y: float) -> bool:
        """True if the point lies inside the rectangle, edges included."""
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


@dataclass(frozen=True)
class Size:
    width: int
    height: int


class WidgetType(enum.Enum):
    TERMINAL_BLOCK = "terminal_block"
    BUTTON = "button"
    TEXT_INPUT = "text_input"
    AI_PANEL = "ai_panel"
    STATUS_BAR = "status_bar"
    SCROLL_VIEW = "scroll_view"


@dataclass(frozen=True)
class WidgetHover:
    """Tells a widget whether the pointer is over it."""

    hovering: bool


WidgetEvent = (
    Click | DoubleClick | RightClick | WidgetHover | Drag | Scroll | KeyPress | TextInput | Focus | Blur
)


class Widget(ABC):
    """A positioned UI element; layout assigns its ``bounds``."""

    bounds: Rect

    @abstractmethod
    def render(self, renderer: WidgetRenderer) -> None:
        """Draw the widget through ``renderer``."""

    @abstractmethod
    def handle_event(self, event: WidgetEvent) -> None:
        """React to an event routed to this widget."""

    @abstractmethod
    def preferred_size(self) -> Size:
        """The size the widget would like to be laid out at."""

    @abstractmethod
    def widget_type(self) -> WidgetType:
        """The kind of widget this is."""


class CommandStatus(enum.Enum):
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass
class TerminalBlock(Widget):
    """One command together with its output, collapsible by clicking."""

    command: str
    output: str
    timestamp: datetime = field(default_factory=_now)
    status: CommandStatus = CommandStatus.SUCCESS
    bounds: Rect = field(default_factory=lambda: Rect(0.0, 0.0, 800.0, 200.0))
    is_expanded: bool = True
    is_hovered: bool = False
    ai_suggestions: list[str] = field(default_factory=list)

    def add_ai_suggestion(self, suggestion: str) -> None:
        self.ai_suggestions.append(suggestion)

    def toggle_expansion(self) -> None:
        self.is_expanded = not self.is_expanded

    def render(self, renderer: WidgetRenderer) -> None:
        renderer.render_terminal_block(self)

    def handle_event(self, event: WidgetEvent) -> None:
        match event:
            case Click():
                self.toggle_expansion()
            case WidgetHover(hovering=hovering):
                self.is_hovered = hovering

    def preferred_size(self) -> Size:
        return Size(800, 200 if self.is_expanded else 50)

    def widget_type(self) -> WidgetType:
        return WidgetType.TERMINAL_BLOCK


class ButtonStyle(enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    DANGER = "danger"
    AI = "ai"


@dataclass
class Button(Widget):
    text: str
    style: ButtonStyle
    bounds: Rect = field(default_factory=lambda: Rect(0.0, 0.0, 100.0, 32.0))
    is_hovered: bool = False
    is_pressed: bool = False
    on_click: Callable[[], None] | None = None

    def render(self, renderer: WidgetRenderer) -> None:
        renderer.render_button(self)

    def handle_event(self, event: WidgetEvent) -> None:
        match event:
            case Click():
                if self.on_click is not None:
                    self.on_click()
            case WidgetHover(hovering=hovering):
                self.is_hovered = hovering

    def preferred_size(self) -> Size:
        return Size(100, 32)

    def widget_type(self) -> WidgetType:
        return WidgetType.BUTTON


class AIRole(enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class AIMessage:
    role: AIRole
    content: str
    timestamp: datetime = field(default_factory=_now)


@dataclass
class AIPanel(Widget):
    """Conversation panel for the AI assistant; hidden until toggled."""

    bounds: Rect = field(default_factory=lambda: Rect(0.0, 0.0, 400.0, 600.0))
    is_visible: bool = False
    conversation: list[AIMessage] = field(default_factory=list)
    input_text: str = ""
    is_thinking: bool = False

    def add_message(self, role: AIRole, content: str) -> None:
        self.conversation.append(AIMessage(role, content))

    def toggle_visibility(self) -> None:
        self.is_visible = not self.is_visible

    def render(self, renderer: WidgetRenderer) -> None:
        if self.is_visible:
            renderer.render_ai_panel(self)

    def handle_event(self, event: WidgetEvent) -> None:
        match event:
            case TextInput(text=text):
                self.input_text = text
            case KeyPress(key="Enter") if self.input_text:
                self.add_message(AIRole.USER, self.input_text)
                self.input_text = ""
                self.is_thinking = True

    def preferred_size(self) -> Size:
        return Size(400, 600)

    def widget_type(self) -> WidgetType:
        return WidgetType.AI_PANEL


@dataclass(frozen=True)
class TextStyle:
    font_size: float = 14.0
    color: Color = (1.0, 1.0, 1.0, 1.0)
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class RectStyle:
    fill_color: Color = (0.2, 0.2, 0.2, 1.0)
    border_color: Color = (0.4, 0.4, 0.4, 1.0)
    border_width: float = 1.0
    border_radius: float = 4.0


class WidgetRenderer(ABC):
    """Drawing backend that widgets render themselves through."""

    @abstractmethod
    def render_terminal_block(self, block: TerminalBlock) -> None:
        """Draw a terminal block."""

    @abstractmethod
    def render_button(self, button: Button) -> None:
        """Draw a button."""

    @abstractmethod
    def render_ai_panel(self, panel: AIPanel) -> None:
        """Draw the AI panel."""

    @abstractmethod
    def render_text(self, text: str, bounds: Rect, style: TextStyle) -> None:
        """Draw text inside ``bounds``."""

    @abstractmethod
    def render_rect(self, bounds: Rect, style: RectStyle) -> None:
        """Draw a filled, bordered rectangle."""