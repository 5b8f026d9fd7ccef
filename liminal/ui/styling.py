"""Themes, design tokens and simple animations."""

from __future__ import annotations

import dataclasses
import enum
import time
from dataclasses import dataclass, field

from ..errors import ConfigError

Color = tuple[float, float, float, float]

MISSING_COLOR: Color = (1.0, 0.0, 1.0, 1.0)


class EasingFunction(enum.Enum):
    LINEAR = "linear"
    EASE_IN = "ease_in"
    EASE_OUT = "ease_out"
    EASE_IN_OUT = "ease_in_out"


@dataclass(frozen=True)
class CubicBezier:
    """Custom cubic bezier easing; evaluated with a smoothstep approximation."""

    x1: float
    y1: float
    x2: float
    y2: float


Easing = EasingFunction | CubicBezier


def apply_easing(easing: Easing, t: float) -> float:
    """Map linear progress ``t`` in [0, 1] through an easing curve."""
    match easing:
        case EasingFunction.LINEAR:
            return t
        case EasingFunction.EASE_IN:
            return t * t
        case EasingFunction.EASE_OUT:
            return 1.0 - (1.0 - t) * (1.0 - t)
        case EasingFunction.EASE_IN_OUT:
            if t < 0.5:
                return 2.0 * t * t
            return 1.0 - 2.0 * (1.0 - t) * (1.0 - t)
        case CubicBezier():
            return t * t * (3.0 - 2.0 * t)
    raise TypeError(f"unknown easing: {easing!r}")


@dataclass(frozen=True)
class ColorScheme:
    primary_bg: Color = (0.1, 0.1, 0.1, 1.0)
    secondary_bg: Color = (0.15, 0.15, 0.15, 1.0)
    tertiary_bg: Color = (0.2, 0.2, 0.2, 1.0)

    primary_text: Color = (1.0, 1.0, 1.0, 1.0)
    secondary_text: Color = (0.8, 0.8, 0.8, 1.0)
    muted_text: Color = (0.6, 0.6, 0.6, 1.0)

    accent_primary: Color = (0.3, 0.6, 1.0, 1.0)
    accent_secondary: Color = (0.6, 0.4, 1.0, 1.0)
    accent_success: Color = (0.2, 0.8, 0.4, 1.0)
    accent_warning: Color = (1.0, 0.7, 0.2, 1.0)
    accent_error: Color = (1.0, 0.3, 0.3, 1.0)

    terminal_bg: Color = (0.05, 0.05, 0.05, 1.0)
    terminal_text: Color = (0.9, 0.9, 0.9, 1.0)
    terminal_cursor: Color = (0.3, 0.6, 1.0, 1.0)
    terminal_selection: Color = (0.3, 0.6, 1.0, 0.3)

    border_primary: Color = (0.25, 0.25, 0.25, 1.0)
    border_secondary: Color = (0.35, 0.35, 0.35, 1.0)
    shadow: Color = (0.0, 0.0, 0.0, 0.5)
    overlay: Color = (0.0, 0.0, 0.0, 0.7)

    ai_user_bubble: Color = (0.3, 0.6, 1.0, 0.1)
    ai_assistant_bubble: Color = (0.25, 0.25, 0.25, 1.0)
    ai_thinking: Color = (0.6, 0.4, 1.0, 0.8)


@dataclass(frozen=True)
class Typography:
    font_family_primary: str = "Inter"
    font_family_mono: str = "JetBrains Mono"
    font_family_ui: str = "SF Pro Display"

    text_xs: float = 12.0
    text_sm: float = 14.0
    text_base: float = 16.0
    text_lg: float = 18.0
    text_xl: float = 20.0
    text_2xl: float = 24.0
    text_3xl: float = 30.0

    leading_tight: float = 1.25
    leading_normal: float = 1.5
    leading_relaxed: float = 1.75


@dataclass(frozen=True)
class SpacingScale:
    xs: float = 4.0
    sm: float = 8.0
    base: float = 16.0
    lg: float = 24.0
    xl: float = 32.0
    xxl: float = 48.0


@dataclass(frozen=True)
class AnimationConfig:
    duration_fast: float = 150.0
    duration_normal: float = 300.0
    duration_slow: float = 500.0

    easing_ease_in: Easing = EasingFunction.EASE_IN
    easing_ease_out: Easing = EasingFunction.EASE_OUT
    easing_ease_in_out: Easing = EasingFunction.EASE_IN_OUT


@dataclass(frozen=True)
class ShadowStyle:
    offset_x: float
    offset_y: float
    blur_radius: float
    spread_radius: float
    color: Color


@dataclass(frozen=True)
class EffectConfig:
    shadow_sm: ShadowStyle = ShadowStyle(0.0, 1.0, 2.0, 0.0, (0.0, 0.0, 0.0, 0.1))
    shadow_md: ShadowStyle = ShadowStyle(0.0, 4.0, 8.0, 0.0, (0.0, 0.0, 0.0, 0.15))
    shadow_lg: ShadowStyle = ShadowStyle(0.0, 10.0, 20.0, 0.0, (0.0, 0.0, 0.0, 0.2))
    border_radius_sm: float = 4.0
    border_radius_md: float = 8.0
    border_radius_lg: float = 12.0
    blur_sm: float = 4.0
    blur_md: float = 8.0
    blur_lg: float = 16.0


_NAMED_COLORS = frozenset(
    {
        "primary_bg",
        "secondary_bg",
        "tertiary_bg",
        "primary_text",
        "secondary_text",
        "muted_text",
        "accent_primary",
        "accent_secondary",
        "accent_success",
        "accent_warning",
        "accent_error",
        "terminal_bg",
        "terminal_text",
        "terminal_cursor",
        "ai_user_bubble",
        "ai_assistant_bubble",
    }
)


@dataclass(frozen=True)
class Theme:
    """A complete visual theme; the default is the dark theme."""

    name: str = "Dark"
    colors: ColorScheme = field(default_factory=ColorScheme)
    typography: Typography = field(default_factory=Typography)
    spacing: SpacingScale = field(default_factory=SpacingScale)
    animations: AnimationConfig = field(default_factory=AnimationConfig)
    effects: EffectConfig = field(default_factory=EffectConfig)

    @classmethod
    def dark(cls) -> Theme:
        return cls()

    @classmethod
    def light(cls) -> Theme:
        dark = cls.dark()
        colors = dataclasses.replace(
            dark.colors,
            primary_bg=(1.0, 1.0, 1.0, 1.0),
            secondary_bg=(0.95, 0.95, 0.95, 1.0),
            tertiary_bg=(0.9, 0.9, 0.9, 1.0),
            primary_text=(0.1, 0.1, 0.1, 1.0),
            secondary_text=(0.3, 0.3, 0.3, 1.0),
            muted_text=(0.5, 0.5, 0.5, 1.0),
            terminal_bg=(0.98, 0.98, 0.98, 1.0),
            terminal_text=(0.1, 0.1, 0.1, 1.0),
        )
        return dataclasses.replace(dark, name="Light", colors=colors)

    def color(self, name: str) -> Color:
        """Look up a named color; unknown names give magenta."""
        if name in _NAMED_COLORS:
            return getattr(self.colors, name)
        return MISSING_COLOR


def _builtin_themes() -> dict[str, Theme]:
    return {"Dark": Theme.dark(), "Light": Theme.light()}


@dataclass
class ThemeManager:
    """Holds the available themes and the one in use."""

    current_theme: Theme = field(default_factory=Theme.dark)
    available_themes: dict[str, Theme] = field(default_factory=_builtin_themes)

    def switch_theme(self, theme_name: str) -> None:
        try:
            self.current_theme = self.available_themes[theme_name]
        except KeyError:
            raise ConfigError(f"Theme '{theme_name}' not found") from None

    def add_theme(self, theme: Theme) -> None:
        self.available_themes[theme.name] = theme

    def list_themes(self) -> list[str]:
        return list(self.available_themes)


@dataclass
class AnimationState:
    """Interpolates a value over ``duration`` milliseconds."""

    from_value: float
    to_value: float
    duration: float
    easing: Easing
    start_time: float = field(default_factory=time.monotonic)
    current_value: float = field(init=False)
    is_complete: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.current_value = self.from_value

    def update(self, now: float | None = None) -> None:
        """Advance to ``now`` (a ``time.monotonic()`` reading; defaults to the current time)."""
        if now is None:
            now = time.monotonic()
        elapsed_ms = int((now - self.start_time) * 1000)
        if self.duration <= 0:
            progress = 1.0
        else:
            progress = min(max(elapsed_ms / self.duration, 0.0), 1.0)

        if progress >= 1.0:
            self.current_value = self.to_value
            self.is_complete = True
        else:
            eased = apply_easing(self.easing, progress)
            self.current_value = self.from_value + (self.to_value - self.from_value) * eased