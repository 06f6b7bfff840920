import re

from vectorpad.tui.help import HelpEntry, HelpModel, app_help, render_centered_overlay

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def plain(text):
    return ANSI.sub("", text)


def test_toggle_shows_then_hides():
    model = HelpModel()
    model.toggle("VectorPad", app_help())
    assert model.visible
    assert model.title == "VectorPad"
    model.toggle("VectorPad", app_help())
    assert not model.visible


def test_dismiss_hides():
    model = HelpModel()
    model.toggle("VectorPad", app_help())
    model.dismiss()
    assert not model.visible
    assert model.view() == ""


def test_hidden_view_is_empty():
    assert HelpModel().view() == ""


def test_visible_without_entries_is_empty():
    model = HelpModel()
    model.toggle("VectorPad", [])
    assert model.view() == ""


def test_view_lists_entries_and_close_hint():
    model = HelpModel(width=100, height=40)
    model.toggle("VectorPad", app_help())
    text = plain(model.view())
    assert "VectorPad" in text
    assert "Next panel" in text
    assert "Toggle this help" in text
    assert "Press Ctrl+H or Esc to close" in text


def test_app_help_entries():
    entries = app_help()
    assert len(entries) == 15
    assert entries[0] == HelpEntry("Tab", "Next panel")
    assert entries[-1].key == "Ctrl+H"


def test_overlay_without_room_is_unpadded():
    assert render_centered_overlay("hello", 3, 1) == "hello\n"


def test_overlay_centres_content():
    out = render_centered_overlay("ab\ncd", 20, 10)
    lines = out.split("\n")
    content = [line for line in lines if line.strip()]
    assert [line.strip() for line in content] == ["ab", "cd"]
    blank_top = lines.index(content[0])
    blank_bottom_space = 10 - blank_top - 2
    assert abs(blank_top - blank_bottom_space) <= 1
    left = len(content[0]) - len(content[0].lstrip())
    right = 20 - left - 2
    assert abs(left - right) <= 1