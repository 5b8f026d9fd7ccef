"""Low-level window input and the high-level UI events built from it."""

from __future__ import annotations

import dataclasses
import enum
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

DOUBLE_CLICK_MS = 300
LINE_SCROLL_PIXELS = 10.0


@dataclass(frozen=True)
class Modifiers:
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    cmd: bool = False


class MouseButton(enum.Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


class ElementState(enum.Enum):
    PRESSED = "pressed"
    RELEASED = "released"


class KeyCode(enum.Enum):
    """Physical key codes, valued by their conventional names."""

    ENTER = "Enter"
    SPACE = "Space"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    TAB = "Tab"
    ESCAPE = "Escape"
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    ARROW_LEFT = "ArrowLeft"
    ARROW_RIGHT = "ArrowRight"
    HOME = "Home"
    END = "End"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"

    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"
    F8 = "F8"
    F9 = "F9"
    F10 = "F10"
    F11 = "F11"
    F12 = "F12"

    KEY_A = "KeyA"
    KEY_B = "KeyB"
    KEY_C = "KeyC"
    KEY_D = "KeyD"
    KEY_E = "KeyE"
    KEY_F = "KeyF"
    KEY_G = "KeyG"
    KEY_H = "KeyH"
    KEY_I = "KeyI"
    KEY_J = "KeyJ"
    KEY_K = "KeyK"
    KEY_L = "KeyL"
    KEY_M = "KeyM"
    KEY_N = "KeyN"
    KEY_O = "KeyO"
    KEY_P = "KeyP"
    KEY_Q = "KeyQ"
    KEY_R = "KeyR"
    KEY_S = "KeyS"
    KEY_T = "KeyT"
    KEY_U = "KeyU"
    KEY_V = "KeyV"
    KEY_W = "KeyW"
    KEY_X = "KeyX"
    KEY_Y = "KeyY"
    KEY_Z = "KeyZ"

    DIGIT_0 = "Digit0"
    DIGIT_1 = "Digit1"
    DIGIT_2 = "Digit2"
    DIGIT_3 = "Digit3"
    DIGIT_4 = "Digit4"
    DIGIT_5 = "Digit5"
    DIGIT_6 = "Digit6"
    DIGIT_7 = "Digit7"
    DIGIT_8 = "Digit8"
    DIGIT_9 = "Digit9"

    CONTROL_LEFT = "ControlLeft"
    CONTROL_RIGHT = "ControlRight"
    ALT_LEFT = "AltLeft"
    ALT_RIGHT = "AltRight"
    SHIFT_LEFT = "ShiftLeft"
    SHIFT_RIGHT = "ShiftRight"
    SUPER_LEFT = "SuperLeft"
    SUPER_RIGHT = "SuperRight"

    CAPS_LOCK = "CapsLock"
    INSERT = "Insert"


_NAMED_KEYS = frozenset(
    {
        KeyCode.ENTER, KeyCode.SPACE, KeyCode.BACKSPACE, KeyCode.DELETE, KeyCode.TAB,
        KeyCode.ESCAPE, KeyCode.ARROW_UP, KeyCode.ARROW_DOWN, KeyCode.ARROW_LEFT,
        KeyCode.ARROW_RIGHT, KeyCode.HOME, KeyCode.END, KeyCode.PAGE_UP, KeyCode.PAGE_DOWN,
        KeyCode.F1, KeyCode.F2, KeyCode.F3, KeyCode.F4, KeyCode.F5, KeyCode.F6,
        KeyCode.F7, KeyCode.F8, KeyCode.F9, KeyCode.F10, KeyCode.F11, KeyCode.F12,
    }
)

_MODIFIER_KEYS: dict[KeyCode, str] = {
    KeyCode.CONTROL_LEFT: "ctrl",
    KeyCode.CONTROL_RIGHT: "ctrl",
    KeyCode.ALT_LEFT: "alt",
    KeyCode.ALT_RIGHT: "alt",
    KeyCode.SHIFT_LEFT: "shift",
    KeyCode.SHIFT_RIGHT: "shift",
    KeyCode.SUPER_LEFT: "cmd",
    KeyCode.SUPER_RIGHT: "cmd",
}


def key_name(code: KeyCode) -> str | None:
    """Name a key as the UI sees it; letters and digits become the character itself."""
    if code in _NAMED_KEYS:
        return code.value
    if code.value.startswith("Key"):
        return code.value[-1].lower()
    if code.value.startswith("Digit"):
        return code.value[-1]
    return None


# Window-level input events.


@dataclass(frozen=True)
class CursorMoved:
    x: float
    y: float


@dataclass(frozen=True)
class MouseInput:
    state: ElementState
    button: MouseButton


@dataclass(frozen=True)
class LineDelta:
    x: float
    y: float


@dataclass(frozen=True)
class PixelDelta:
    x: float
    y: float


@dataclass(frozen=True)
class MouseWheel:
    delta: LineDelta | PixelDelta


@dataclass(frozen=True)
class KeyboardInput:
    key: KeyCode
    state: ElementState


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class Focused:
    focused: bool


WindowEvent = CursorMoved | MouseInput | MouseWheel | KeyboardInput | Resized | Focused


# High-level UI events.


@dataclass(frozen=True)
class Click:
    x: float
    y: float


@dataclass(frozen=True)
class DoubleClick:
    x: float
    y: float


@dataclass(frozen=True)
class RightClick:
    x: float
    y: float


@dataclass(frozen=True)
class Hover:
    x: float
    y: float


@dataclass(frozen=True)
class Drag:
    start_x: float
    start_y: float
    x: float
    y: float


@dataclass(frozen=True)
class Scroll:
    x: float
    y: float
    delta_x: float
    delta_y: float


@dataclass(frozen=True)
class KeyPress:
    key: str
    modifiers: Modifiers = field(default_factory=Modifiers)


@dataclass(frozen=True)
class TextInput:
    text: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Focus:
    pass


@dataclass(frozen=True)
class Blur:
    pass


UiEvent = (
    Click | DoubleClick | RightClick | Hover | Drag | Scroll | KeyPress | TextInput | Resize | Focus | Blur
)


@dataclass
class EventHandler:
    """Turns window input into UI events, tracking mouse, clicks and modifiers."""

    clock: Callable[[], float] = time.monotonic
    mouse_position: tuple[float, float] = (0.0, 0.0)
    mouse_pressed: bool = False
    click_count: int = 0
    drag_start: tuple[float, float] | None = None
    modifiers: Modifiers = field(default_factory=Modifiers)
    last_click_time: float = field(init=False)

    def __post_init__(self) -> None:
        self.last_click_time = self.clock()

    def handle_window_event(self, event: WindowEvent) -> UiEvent | None:
        match event:
            case CursorMoved(x=x, y=y):
                self.mouse_position = (x, y)
                if not self.mouse_pressed:
                    return Hover(x, y)
                if self.drag_start is None:
                    return None
                start_x, start_y = self.drag_start
                return Drag(start_x, start_y, x, y)
            case MouseInput(state=state, button=button):
                return self._mouse_input(state, button)
            case MouseWheel(delta=LineDelta(x=dx, y=dy)):
                x, y = self.mouse_position
                return Scroll(x, y, dx * LINE_SCROLL_PIXELS, dy * LINE_SCROLL_PIXELS)
            case MouseWheel(delta=PixelDelta(x=dx, y=dy)):
                x, y = self.mouse_position
                return Scroll(x, y, dx, dy)
            case KeyboardInput(key=key, state=state):
                return self._keyboard_input(key, state)
            case Resized(width=width, height=height):
                return Resize(width, height)
            case Focused(focused=focused):
                return Focus() if focused else Blur()
        return None

    def _mouse_input(self, state: ElementState, button: MouseButton) -> UiEvent | None:
        x, y = self.mouse_position
        match state, button:
            case ElementState.PRESSED, MouseButton.LEFT:
                self.mouse_pressed = True
                self.drag_start = self.mouse_position
                now = self.clock()
                if int((now - self.last_click_time) * 1000) < DOUBLE_CLICK_MS:
                    self.click_count += 1
                else:
                    self.click_count = 1
                self.last_click_time = now
                if self.click_count == 2:
                    self.click_count = 0
                    return DoubleClick(x, y)
                return Click(x, y)
            case ElementState.RELEASED, MouseButton.LEFT:
                self.mouse_pressed = False
                self.drag_start = None
                return None
            case ElementState.PRESSED, MouseButton.RIGHT:
                return RightClick(x, y)
        return None

    def _keyboard_input(self, key: KeyCode, state: ElementState) -> UiEvent | None:
        if state is not ElementState.PRESSED:
            return None
        flag = _MODIFIER_KEYS.get(key)
        if flag is not None:
            self.modifiers = dataclasses.replace(self.modifiers, **{flag: True})
        name = key_name(key)
        if name is None:
            return None
        return KeyPress(name, self.modifiers)


class UiEventHandler(ABC):
    """A consumer of UI events taking part in dispatch."""

    @abstractmethod
    def handle_event(self, event: UiEvent) -> bool:
        """Handle ``event``; return True to stop it reaching later handlers."""

    @abstractmethod
    def priority(self) -> int:
        """Handlers with a higher priority receive events first."""


@dataclass
class EventDispatcher:
    handlers: list[UiEventHandler] = field(default_factory=list)

    def add_handler(self, handler: UiEventHandler) -> None:
        self.handlers.append(handler)
        self.handlers.sort(key=lambda h: h.priority(), reverse=True)

    def dispatch_event(self, event: UiEvent) -> None:
        """Offer the event to each handler in priority order until one handles it."""
        for handler in self.handlers:
            if handler.handle_event(event):
                break