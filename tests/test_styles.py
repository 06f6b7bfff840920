import re

from vectorpad.tui.styles import (
    COLOR_AMBER,
    COLOR_GREEN,
    COLOR_RED,
    STYLE_ERROR,
    STYLE_FOCUS_BORDER,
    Style,
    severity_color,
)

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def plain(text):
    return ANSI.sub("", text)


def test_plain_style_returns_text_unchanged():
    assert Style().render("hello") == "hello"


def test_colored_render_keeps_visible_text():
    out = STYLE_ERROR.render("boom")
    assert plain(out) == "boom"
    assert out.startswith("\x1b[")
    assert len(out) > len("boom")


def test_width_pads_line():
    out = Style(width=14).render("Tab")
    assert len(out) == 14
    assert out.startswith("Tab")
    assert out.strip() == "Tab"


def test_lines_padded_to_equal_width():
    lines = Style().render("a\nlonger").split("\n")
    assert len({len(line) for line in lines}) == 1
    assert lines[1] == "longer"


def test_padding_adds_rows_and_columns():
    rows = Style(padding=(1, 2, 1, 2)).render("x").split("\n")
    assert len(rows) == 3
    assert rows[1] == "  x  "
    assert rows[0].strip() == "" and rows[2].strip() == ""


def test_height_sets_minimum_rows():
    rows = Style(height=3).render("x").split("\n")
    assert len(rows) == 3
    assert rows[0] == "x"


def test_border_wraps_content():
    rows = plain(Style(border=True).render("ab\ncd")).split("\n")
    assert len(rows) == 4
    assert rows[0].startswith("╭") and rows[0].endswith("╮")
    assert rows[-1].startswith("╰") and rows[-1].endswith("╯")
    assert rows[1] == "│ab│"
    assert rows[2] == "│cd│"


def test_colored_border_strips_to_same_shape():
    rows = plain(STYLE_FOCUS_BORDER.render("xyz")).split("\n")
    assert len(rows) == 3
    assert len({len(row) for row in rows}) == 1
    assert "xyz" in rows[1]


def test_severity_color_mapping():
    assert severity_color("red") == COLOR_RED
    assert severity_color("amber") == COLOR_AMBER
    assert severity_color("green") == COLOR_GREEN
    assert severity_color("unknown") == COLOR_GREEN