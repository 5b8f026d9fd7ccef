"""Pixel-based layout of widgets inside a container."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Sequence
from dataclasses import dataclass, field

from .widgets import Rect, Size, Widget


class LayoutType(enum.Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    ABSOLUTE = "absolute"
    FLEX = "flex"


@dataclass(frozen=True)
class Grid:
    """A fixed grid of ``columns`` by ``rows`` equally sized cells."""

    columns: int
    rows: int

    def __post_init__(self) -> None:
        if self.columns < 1 or self.rows < 1:
            raise ValueError("a grid needs at least one column and one row")


Layout = LayoutType | Grid


@dataclass(frozen=True)
class Padding:
    top: float = 8.0
    right: float = 8.0
    bottom: float = 8.0
    left: float = 8.0

    @classmethod
    def all(cls, value: float) -> Padding:
        return cls(value, value, value, value)

    @classmethod
    def symmetric(cls, vertical: float, horizontal: float) -> Padding:
        return cls(vertical, horizontal, vertical, horizontal)


class Alignment(enum.Enum):
    START = "start"
    CENTER = "center"
    END = "end"
    STRETCH = "stretch"


@dataclass(frozen=True)
class LayoutConstraints:
    min_width: float | None = None
    max_width: float | None = None
    min_height: float | None = None
    max_height: float | None = None
    flex_grow: float = 0.0
    flex_shrink: float = 1.0
    align_self: Alignment = Alignment.STRETCH


@dataclass
class LayoutEngine:
    """Places widgets by assigning their ``bounds``."""

    layout_type: Layout = LayoutType.VERTICAL
    padding: Padding = field(default_factory=Padding)
    spacing: float = 8.0

    def with_layout_type(self, layout_type: Layout) -> LayoutEngine:
        return dataclasses.replace(self, layout_type=layout_type)

    def with_padding(self, padding: Padding) -> LayoutEngine:
        return dataclasses.replace(self, padding=padding)

    def with_spacing(self, spacing: float) -> LayoutEngine:
        return dataclasses.replace(self, spacing=spacing)

    @classmethod
    def terminal_layout(cls) -> LayoutEngine:
        """Vertical stack used for terminal blocks."""
        return cls(LayoutType.VERTICAL, Padding.symmetric(16.0, 20.0), 12.0)

    @classmethod
    def ai_panel_layout(cls) -> LayoutEngine:
        """Vertical stack used for the AI side panel."""
        return cls(LayoutType.VERTICAL, Padding.all(16.0), 8.0)

    @classmethod
    def toolbar_layout(cls) -> LayoutEngine:
        """Horizontal row used for toolbars and button groups."""
        return cls(LayoutType.HORIZONTAL, Padding.symmetric(8.0, 12.0), 6.0)

    def _available(self, container: Size) -> tuple[float, float]:
        pad = self.padding
        return (
            container.width - pad.left - pad.right,
            container.height - pad.top - pad.bottom,
        )

    def calculate_layout(self, widgets: Sequence[Widget], container_size: Size) -> None:
        """Assign bounds to every widget according to the layout type."""
        match self.layout_type:
            case LayoutType.VERTICAL:
                self._vertical(widgets, container_size)
            case LayoutType.HORIZONTAL:
                self._horizontal(widgets, container_size)
            case Grid(columns=columns, rows=rows):
                self._grid(widgets, container_size, columns, rows)
            case LayoutType.ABSOLUTE:
                pass  # widgets keep the bounds they were given
            case LayoutType.FLEX:
                self._flex(widgets, container_size)

    def _vertical(self, widgets: Sequence[Widget], container: Size) -> None:
        width, _ = self._available(container)
        y = self.padding.top
        for widget in widgets:
            height = float(widget.preferred_size().height)
            widget.bounds = Rect(self.padding.left, y, width, height)
            y += height + self.spacing

    def _horizontal(self, widgets: Sequence[Widget], container: Size) -> None:
        _, height = self._available(container)
        x = self.padding.left
        for widget in widgets:
            width = float(widget.preferred_size().width)
            widget.bounds = Rect(x, self.padding.top, width, height)
            x += width + self.spacing

    def _grid(self, widgets: Sequence[Widget], container: Size, columns: int, rows: int) -> None:
        width, height = self._available(container)
        cell_width = (width - (columns - 1) * self.spacing) / columns
        cell_height = (height - (rows - 1) * self.spacing) / rows
        for index, widget in enumerate(widgets):
            row, col = divmod(index, columns)
            if row >= rows:
                break
            widget.bounds = Rect(
                self.padding.left + col * (cell_width + self.spacing),
                self.padding.top + row * (cell_height + self.spacing),
                cell_width,
                cell_height,
            )

    def _flex(self, widgets: Sequence[Widget], container: Size) -> None:
        if not widgets:
            return
        width, height = self._available(container)
        preferred = [float(widget.preferred_size().width) for widget in widgets]
        total = sum(preferred)
        total_spacing = (len(widgets) - 1) * self.spacing
        scale = (width - total_spacing) / total if total else 0.0
        x = self.padding.left
        for widget, preferred_width in zip(widgets, preferred):
            scaled = preferred_width * scale
            widget.bounds = Rect(x, self.padding.top, scaled, height)
            x += scaled + self.spacing