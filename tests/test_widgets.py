import pytest

from liminal.ui.events import Click, KeyPress, TextInput
from liminal.ui.widgets import (
    AIPanel,
    AIRole,
    Button,
    ButtonStyle,
    CommandStatus,
    Rect,
    Size,
    TerminalBlock,
    WidgetHover,
    WidgetRenderer,
    WidgetType,
)


class RecordingRenderer(WidgetRenderer):
    def __init__(self):
        self.calls = []

    def render_terminal_block(self, block):
        self.calls.append(("block", block))

    def render_button(self, button):
        self.calls.append(("button", button))

    def render_ai_panel(self, panel):
        self.calls.append(("panel", panel))

    def render_text(self, text, bounds, style):
        self.calls.append(("text", text))

    def render_rect(self, bounds, style):
        self.calls.append(("rect", bounds))


def test_rect_contains_inside_and_edges():
    rect = Rect(10.0, 20.0, 30.0, 40.0)
    assert rect.contains_point(10.0, 20.0)
    assert rect.contains_point(40.0, 60.0)
    assert rect.contains_point(25.0, 30.0)


@pytest.mark.parametrize("x, y", [(9.9, 30.0), (40.1, 30.0), (25.0, 19.9), (25.0, 60.1)])
def test_rect_excludes_outside(x, y):
    assert not Rect(10.0, 20.0, 30.0, 40.0).contains_point(x, y)


def test_terminal_block_defaults():
    block = TerminalBlock("ls", "a b")
    assert block.status is CommandStatus.SUCCESS
    assert block.is_expanded
    assert block.bounds == Rect(0.0, 0.0, 800.0, 200.0)
    assert block.widget_type() is WidgetType.TERMINAL_BLOCK
    assert block.timestamp.tzinfo is not None


def test_terminal_block_click_toggles_and_changes_size():
    block = TerminalBlock("ls", "")
    assert block.preferred_size() == Size(800, 200)
    block.handle_event(Click(1.0, 1.0))
    assert not block.is_expanded
    assert block.preferred_size() == Size(800, 50)
    block.handle_event(Click(1.0, 1.0))
    assert block.is_expanded


def test_terminal_block_hover_and_suggestions():
    block = TerminalBlock("ls", "")
    block.handle_event(WidgetHover(True))
    assert block.is_hovered
    block.handle_event(WidgetHover(False))
    assert not block.is_hovered
    block.add_ai_suggestion("ls -la")
    assert block.ai_suggestions == ["ls -la"]


def test_terminal_block_renders_itself():
    renderer = RecordingRenderer()
    block = TerminalBlock("pwd", "/")
    block.render(renderer)
    assert renderer.calls == [("block", block)]


def test_button_click_calls_callback():
    clicks = []
    button = Button("Run", ButtonStyle.PRIMARY, on_click=lambda: clicks.append(1))
    button.handle_event(Click(0.0, 0.0))
    button.handle_event(Click(0.0, 0.0))
    assert clicks == [1, 1]
    assert button.preferred_size() == Size(100, 32)
    assert button.widget_type() is WidgetType.BUTTON


def test_button_without_callback_tracks_hover():
    button = Button("Go", ButtonStyle.SECONDARY)
    button.handle_event(Click(0.0, 0.0))
    button.handle_event(WidgetHover(True))
    assert button.is_hovered
    assert not button.is_pressed


def test_button_callback_error_propagates():
    def fail():
        raise ValueError("bad click")

    button = Button("X", ButtonStyle.DANGER, on_click=fail)
    with pytest.raises(ValueError, match="bad click"):
        button.handle_event(Click(0.0, 0.0))


def test_ai_panel_submits_input_on_enter():
    panel = AIPanel()
    panel.handle_event(TextInput("how do I list files?"))
    assert panel.input_text == "how do I list files?"
    panel.handle_event(KeyPress("Enter"))
    assert [(m.role, m.content) for m in panel.conversation] == [(AIRole.USER, "how do I list files?")]
    assert panel.input_text == ""
    assert panel.is_thinking


def test_ai_panel_ignores_enter_with_empty_input_and_other_keys():
    panel = AIPanel()
    panel.handle_event(KeyPress("Enter"))
    panel.handle_event(TextInput("hi"))
    panel.handle_event(KeyPress("a"))
    assert panel.conversation == []
    assert not panel.is_thinking
    assert panel.input_text == "hi"


def test_ai_panel_renders_only_when_visible():
    renderer = RecordingRenderer()
    panel = AIPanel()
    panel.render(renderer)
    assert renderer.calls == []
    panel.toggle_visibility()
    panel.render(renderer)
    assert renderer.calls == [("panel", panel)]
    assert panel.preferred_size() == Size(400, 600)


def test_ai_panel_add_message_keeps_order():
    panel = AIPanel()
    panel.add_message(AIRole.USER, "q")
    panel.add_message(AIRole.ASSISTANT, "a")
    assert [m.role for m in panel.conversation] == [AIRole.USER, AIRole.ASSISTANT]


def test_widget_renderer_is_abstract():
    with pytest.raises(TypeError):
        WidgetRenderer()