"""The help overlay listing key bindings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from vectorpad.tui.styles import (
    COLOR_ACCENT,
    COLOR_MUTED,
    COLOR_WHITE,
    Style,
    _visible_height,
    _visible_width,
)

HELP_BORDER_STYLE = Style(border=True, border_foreground=COLOR_ACCENT, padding=(1, 2, 1, 2))
HELP_TITLE_STYLE = Style(foreground=COLOR_ACCENT, bold=True)
HELP_KEY_STYLE = Style(foreground=COLOR_WHITE, bold=True, width=14)
HELP_DESC_STYLE = Style(foreground=COLOR_MUTED)


@dataclass(frozen=True)
class HelpEntry:
    key: str
    desc: str


def render_centered_overlay(content: str, width: int, height: int) -> str:
    """Pad ``content`` with blank lines and spaces so it sits centred on screen."""
    pad_left = max((width - _visible_width(content)) // 2, 0)
    pad_top = max((height - _visible_height(content)) // 2, 0)
    indent = " " * pad_left
    return "\n" * pad_top + "".join(f"{indent}{line}\n" for line in content.split("\n"))


@dataclass
class HelpModel:
    """A toggleable, centred list of key bindings."""

    visible: bool = False
    title: str = ""
    entries: list[HelpEntry] = field(default_factory=list)
    width: int = 0
    height: int = 0

    def toggle(self, title: str, entries: Iterable[HelpEntry]) -> None:
        if self.visible:
            self.visible = False
            return
        self.visible = True
        self.title = title
        self.entries = list(entries)

    def dismiss(self) -> None:
        self.visible = False

    def view(self) -> str:
        if not self.visible or not self.entries:
            return ""
        body = HELP_TITLE_STYLE.render(self.title) + "\n\n"
        body += "".join(
            f"{HELP_KEY_STYLE.render(entry.key)} {HELP_DESC_STYLE.render(entry.desc)}\n"
            for entry in self.entries
        )
        body += "\nPress Ctrl+H or Esc to close"
        return render_centered_overlay(HELP_BORDER_STYLE.render(body), self.width, self.height)


def app_help() -> list[HelpEntry]:
    """The key bindings shown in the application's help."""
    return [
        HelpEntry("Tab", "Next panel"),
        HelpEntry("Shift+Tab", "Previous panel"),
        HelpEntry("Ctrl+Y", "Copy vector to clipboard"),
        HelpEntry("Ctrl+L", "Launch (copy + mark sent)"),
        HelpEntry("Ctrl+S", "Stash current vector"),
        HelpEntry("Ctrl+R", "Recall stash into editor"),
        HelpEntry("Ctrl+E", "Extract essence from stash"),
        HelpEntry("Ctrl+K", "Yank from stash"),
        HelpEntry("Ctrl+P", "Put yanked into editor"),
        HelpEntry("Ctrl+D", "Declare scope"),
        HelpEntry("Ctrl+B", "Decompose into sub-vectors"),
        HelpEntry("Ctrl+X", "Prune stash entry"),
        HelpEntry("↑/k ↓/j", "Navigate stash"),
        HelpEntry("Ctrl+C", "Quit"),
        HelpEntry("Ctrl+H", "Toggle this help"),
    ]