"""Owner of the widget tree: layout, theme and event routing."""

from __future__ import annotations

from dataclasses import dataclass, field

from .events import (
    Blur,
    Click,
    DoubleClick,
    Drag,
    Focus,
    Hover,
    KeyPress,
    Resize,
    RightClick,
    Scroll,
    TextInput,
    UiEvent,
)
from .layout import LayoutEngine
from .styling import Theme
from .widgets import Size, TerminalBlock, Widget, WidgetHover


@dataclass
class UiManager:
    """Holds the widgets on screen and routes UI events to them."""

    widgets: list[Widget] = field(default_factory=list)
    layout_engine: LayoutEngine = field(default_factory=LayoutEngine)
    theme: Theme = field(default_factory=Theme)
    size: Size = field(default_factory=lambda: Size(1024, 768))
    focused_widget: int | None = None

    def add_widget(self, widget: Widget) -> None:
        self.widgets.append(widget)

    def create_terminal_block(self, output: str, command: str) -> TerminalBlock:
        """Add a block showing ``command`` and its ``output``; returns the block."""
        block = TerminalBlock(command, output)
        self.add_widget(block)
        return block

    def layout(self) -> None:
        self.layout_engine.calculate_layout(self.widgets, self.size)

    def render_data(self) -> list[Widget]:
        """The widgets to draw, in drawing order."""
        return list(self.widgets)

    def _widget_at(self, x: float, y: float) -> Widget | None:
        return next((w for w in self.widgets if w.bounds.contains_point(x, y)), None)

    def _focused(self) -> Widget | None:
        index = self.focused_widget
        if index is not None and 0 <= index < len(self.widgets):
            return self.widgets[index]
        return None

    def handle_event(self, event: UiEvent) -> None:
        """Route a UI event to the widget it concerns."""
        match event:
            case Click(x=x, y=y):
                for index, widget in enumerate(self.widgets):
                    if widget.bounds.contains_point(x, y):
                        self.focused_widget = index
                        widget.handle_event(event)
                        break
            case DoubleClick(x=x, y=y) | RightClick(x=x, y=y) | Scroll(x=x, y=y):
                target = self._widget_at(x, y)
                if target is not None:
                    target.handle_event(event)
            case Hover(x=x, y=y):
                for widget in self.widgets:
                    widget.handle_event(WidgetHover(widget.bounds.contains_point(x, y)))
            case Drag(start_x=start_x, start_y=start_y):
                target = self._widget_at(start_x, start_y)
                if target is not None:
                    target.handle_event(event)
            case KeyPress() | TextInput():
                target = self._focused()
                if target is not None:
                    target.handle_event(event)
            case Resize(width=width, height=height):
                self.size = Size(width, height)
                self.layout()
            case Focus():
                pass
            case Blur():
                self.focused_widget = None
            case _:
                raise TypeError(f"unsupported UI event: {event!r}")