from dataclasses import dataclass, field

import pytest

from liminal.ui.events import (
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
)
from liminal.ui.manager import UiManager
from liminal.ui.styling import Theme
from liminal.ui.widgets import (
    AIPanel,
    AIRole,
    Rect,
    RectStyle,
    Size,
    Widget,
    WidgetHover,
    WidgetType,
)


@dataclass
class RecordingWidget(Widget):
    bounds: Rect = field(default_factory=lambda: Rect(0.0, 0.0, 100.0, 100.0))
    events: list = field(default_factory=list)

    def render(self, renderer):
        renderer.render_rect(self.bounds, RectStyle())

    def handle_event(self, event):
        self.events.append(event)

    def preferred_size(self):
        return Size(100, 100)

    def widget_type(self):
        return WidgetType.SCROLL_VIEW


def _two_recorders():
    manager = UiManager()
    left = RecordingWidget(Rect(0.0, 0.0, 100.0, 100.0))
    right = RecordingWidget(Rect(200.0, 0.0, 100.0, 100.0))
    manager.add_widget(left)
    manager.add_widget(right)
    return manager, left, right


def test_defaults():
    manager = UiManager()
    assert manager.size == Size(1024, 768)
    assert manager.focused_widget is None
    assert manager.widgets == []
    assert manager.theme == Theme.dark()


def test_create_terminal_block():
    manager = UiManager()
    block = manager.create_terminal_block("total 0", "ls -la")
    assert manager.widgets == [block]
    assert block.command == "ls -la"
    assert block.output == "total 0"


def test_click_focuses_and_toggles_block():
    manager = UiManager()
    first = manager.create_terminal_block("a", "one")
    second = manager.create_terminal_block("b", "two")
    manager.layout()
    b = second.bounds
    manager.handle_event(Click(b.x + 1, b.y + 1))
    assert manager.focused_widget == 1
    assert second.is_expanded is False
    assert first.is_expanded is True


def test_click_outside_changes_nothing():
    manager, left, right = _two_recorders()
    manager.handle_event(Click(150.0, 50.0))
    assert manager.focused_widget is None
    assert left.events == [] and right.events == []


def test_hover_reports_to_every_widget():
    manager, left, right = _two_recorders()
    manager.handle_event(Hover(50.0, 50.0))
    assert left.events == [WidgetHover(True)]
    assert right.events == [WidgetHover(False)]


@pytest.mark.parametrize(
    "event",
    [DoubleClick(250.0, 10.0), RightClick(250.0, 10.0), Scroll(250.0, 10.0, 0.0, 10.0)],
)
def test_pointer_events_go_to_widget_under_point(event):
    manager, left, right = _two_recorders()
    manager.handle_event(event)
    assert right.events == [event]
    assert left.events == []


def test_drag_goes_to_widget_under_start():
    manager, left, right = _two_recorders()
    event = Drag(10.0, 10.0, 250.0, 10.0)
    manager.handle_event(event)
    assert left.events == [event]
    assert right.events == []


def test_keys_go_to_focused_widget():
    manager = UiManager()
    panel = AIPanel()
    manager.add_widget(panel)
    manager.handle_event(Click(1.0, 1.0))
    manager.handle_event(TextInput("ls"))
    manager.handle_event(KeyPress("Enter"))
    assert [m.content for m in panel.conversation] == ["ls"]
    assert panel.conversation[0].role is AIRole.USER
    assert panel.is_thinking is True


def test_keys_without_focus_are_dropped():
    manager, left, right = _two_recorders()
    manager.handle_event(KeyPress("a"))
    assert left.events == [] and right.events == []


def test_stale_focus_index_is_ignored():
    manager, left, right = _two_recorders()
    manager.focused_widget = 5
    manager.handle_event(TextInput("x"))
    assert left.events == [] and right.events == []


def test_resize_updates_size_and_relayouts():
    manager = UiManager()
    block = manager.create_terminal_block("out", "cmd")
    manager.handle_event(Resize(640, 480))
    pad = manager.layout_engine.padding
    assert manager.size == Size(640, 480)
    assert block.bounds.width == 640 - pad.left - pad.right


def test_blur_clears_focus_and_focus_keeps_it():
    manager, left, _ = _two_recorders()
    manager.handle_event(Click(10.0, 10.0))
    manager.handle_event(Focus())
    assert manager.focused_widget == 0
    manager.handle_event(Blur())
    assert manager.focused_widget is None


def test_render_data_is_a_copy_in_order():
    manager, left, right = _two_recorders()
    data = manager.render_data()
    assert data == [left, right]
    data.clear()
    assert manager.widgets == [left, right]


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        UiManager().handle_event("click")