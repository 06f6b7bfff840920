"""Terminal colours and text styles shared by the interface."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

COLOR_GREEN = "#00CC66"
COLOR_RED = "#FF4444"
COLOR_AMBER = "#FF8C00"
COLOR_MUTED = "#888888"
COLOR_ACCENT = "#7B68EE"
COLOR_WHITE = "#FFFFFF"
COLOR_DIM = "#555555"
COLOR_CYAN = "#00CCCC"
COLOR_STALE = "#333333"

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")
_RESET = "\x1b[0m"


def _strip_ansi(text: str) -> str:
    return _ANSI_PATTERN.sub("", text)


def _visible_width(text: str) -> int:
    """Width in columns of the widest line, ignoring escape sequences."""
    return max((len(_strip_ansi(line)) for line in text.split("\n")), default=0)


def _visible_height(text: str) -> int:
    return text.count("\n") + 1


def _color_params(color: str, background: bool) -> str:
    base = 48 if background else 38
    if color.startswith("#") and len(color) == 7:
        red, green, blue = (int(color[index:index + 2], 16) for index in (1, 3, 5))
        return f"{base};2;{red};{green};{blue}"
    return f"{base};5;{int(color)}"


def _paint(params: str, text: str) -> str:
    return f"\x1b[{params}m{text}{_RESET}" if params else text


@dataclass(frozen=True)
class Style:
    """How a block of text is drawn: colours, weight, size, padding and border."""

    foreground: Optional[str] = None
    background: Optional[str] = None
    bold: bool = False
    width: int = 0
    height: int = 0
    padding: tuple[int, int, int, int] = (0, 0, 0, 0)
    border: bool = False
    border_foreground: Optional[str] = None

    def _sgr(self) -> str:
        params = []
        if self.bold:
            params.append("1")
        if self.foreground:
            params.append(_color_params(self.foreground, background=False))
        if self.background:
            params.append(_color_params(self.background, background=True))
        return ";".join(params)

    def render(self, text: str) -> str:
        """Draw ``text`` with this style; every output line has the same width."""
        top, right, bottom, left = self.padding
        lines = text.split("\n")
        inner = max((len(_strip_ansi(line)) for line in lines), default=0)
        if self.width:
            inner = max(inner, self.width - left - right)
        lines = [line + " " * (inner - len(_strip_ansi(line))) for line in lines]

        full = inner + left + right
        lines = [" " * left + line + " " * right for line in lines]
        blank = " " * full
        lines = [blank] * top + lines + [blank] * bottom
        if self.height > len(lines):
            lines += [blank] * (self.height - len(lines))

        sgr = self._sgr()
        lines = [_paint(sgr, line) for line in lines]

        if self.border:
            edge = _color_params(self.border_foreground, False) if self.border_foreground else ""
            rule = "─" * full
            lines = (
                [_paint(edge, "╭" + rule + "╮")]
                + [_paint(edge, "│") + line + _paint(edge, "│") for line in lines]
                + [_paint(edge, "╰" + rule + "╯")]
            )
        return "\n".join(lines)


STYLE_HEADER = Style(bold=True, foreground=COLOR_WHITE)
STYLE_MUTED = Style(foreground=COLOR_MUTED)
STYLE_SELECTED = Style(background=COLOR_ACCENT, foreground=COLOR_WHITE)
STYLE_WARNING = Style(foreground=COLOR_AMBER, bold=True)
STYLE_ERROR = Style(foreground=COLOR_RED, bold=True)
STYLE_SUCCESS = Style(foreground=COLOR_GREEN)
STYLE_LOCKED = Style(foreground=COLOR_CYAN, bold=True)
STYLE_FOCUS_BORDER = Style(border=True, border_foreground=COLOR_ACCENT)
STYLE_INACTIVE_BORDER = Style(border=True, border_foreground=COLOR_DIM)
STYLE_PANEL_TITLE = Style(bold=True, foreground=COLOR_ACCENT, padding=(0, 0, 0, 1))
STYLE_DIM = Style(foreground=COLOR_DIM)

STYLE_STASH_FRESH = Style(foreground=COLOR_WHITE)
STYLE_STASH_RECENT = Style(foreground=COLOR_MUTED)
STYLE_STASH_AGING = Style(foreground=COLOR_DIM)
STYLE_STASH_STALE = Style(foreground=COLOR_STALE)


def severity_color(severity: str) -> str:
    """The colour for an ambiguity warning severity."""
    if severity == "red":
        return COLOR_RED
    if severity == "amber":
        return COLOR_AMBER
    return COLOR_GREEN