"""A minimal multi-line text area and the scope declaration overlay built on it."""

from __future__ import annotations

from vectorpad.tui.help import render_centered_overlay
from vectorpad.tui.styles import STYLE_DIM, STYLE_MUTED, STYLE_PANEL_TITLE

_PROMPT = "┃ "
_CURSOR = "█"
_IGNORED_KEYS = frozenset(
    {
        "up", "down", "left", "right", "esc", "tab", "shift+tab",
        "home", "end", "pgup", "pgdown", "delete", "insert",
    }
)
_MODIFIER_PREFIXES = ("ctrl+", "alt+", "shift+")


class TextArea:
    """Editable text with the cursor kept at the end."""

    def __init__(
        self, placeholder: str = "", width: int = 60, height: int = 10, char_limit: int = 0
    ) -> None:
        self.placeholder = placeholder
        self.width = width
        self.height = height
        self.char_limit = char_limit
        self.focused = False
        self._value = ""

    @property
    def value(self) -> str:
        return self._value

    def set_value(self, text: str) -> None:
        self._value = ""
        self._insert(text)

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def _insert(self, text: str) -> None:
        if self.char_limit > 0:
            text = text[: max(self.char_limit - len(self._value), 0)]
        self._value += text

    def handle_key(self, key: str) -> None:
        """Apply one key press or pasted text; ignored while unfocused."""
        if not self.focused:
            return
        if key == "enter":
            self._insert("\n")
        elif key == "backspace":
            self._value = self._value[:-1]
        elif key == "space":
            self._insert(" ")
        elif key in _IGNORED_KEYS or key.startswith(_MODIFIER_PREFIXES):
            return
        else:
            text = key.replace("\r\n", "\n").replace("\r", "\n")
            if text and all(char == "\n" or char.isprintable() for char in text):
                self._insert(text)

    def _clip(self, line: str) -> str:
        return line[: self.width] if self.width > 0 else line

    def view(self) -> str:
        if self._value:
            rows = [self._clip(line) for line in self._value.split("\n")]
            if self.focused:
                rows[-1] += _CURSOR
            if self.height > 0:
                rows = rows[-self.height:]
        elif self.placeholder:
            rows = [self._clip(line) for line in self.placeholder.split("\n")]
            if self.height > 0:
                rows = rows[: self.height]
            rows = [STYLE_DIM.render(line) for line in rows]
            if self.focused and rows:
                rows[0] = _CURSOR + rows[0]
        else:
            rows = [_CURSOR if self.focused else ""]
        rows += [""] * (self.height - len(rows))
        return "\n".join(_PROMPT + row for row in rows)


class ScopeOverlay:
    """The overlay in which a scope declaration is typed."""

    def __init__(self) -> None:
        self.visible = False
        self.textarea = TextArea(
            placeholder="scope: 18 repos\noperation: cleanup\ntargets: README.md",
            width=50,
            height=4,
        )

    def show(self) -> None:
        self.visible = True
        self.textarea.focus()

    def dismiss(self) -> None:
        self.visible = False
        self.textarea.blur()

    def value(self) -> str:
        return self.textarea.value

    def update(self, key: str) -> None:
        self.textarea.handle_key(key)

    def view(self, width: int, height: int) -> str:
        if not self.visible:
            return ""
        body = (
            STYLE_PANEL_TITLE.render("DECLARE SCOPE")
            + "\n"
            + STYLE_MUTED.render(" Format: key: value (one per line)")
            + "\n"
            + STYLE_MUTED.render(" Keys: scope, operation, targets, files")
            + "\n\n"
            + self.textarea.view()
            + "\n\n"
            + STYLE_DIM.render(" Enter: apply  Esc: cancel")
        )
        return render_centered_overlay(body, width, height)