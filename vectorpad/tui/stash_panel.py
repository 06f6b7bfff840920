"""The stash panel: a scrollable list of clustered idea stacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from vectorpad.stash.model import AgeTier, Source, Stack, Uniqueness
from vectorpad.tui.styles import (
    STYLE_MUTED,
    STYLE_PANEL_TITLE,
    STYLE_SELECTED,
    STYLE_STASH_AGING,
    STYLE_STASH_FRESH,
    STYLE_STASH_RECENT,
    STYLE_STASH_STALE,
    Style,
)

SYMBOL_VERDICT = "◆"
SYMBOL_HIGH = "●"
SYMBOL_MEDIUM = "○"
SYMBOL_LOW = "◌"


def format_stack_line(stack: Stack, max_width: int) -> str:
    """One list row: dominant uniqueness symbol, label and item count."""
    line = f" {uniqueness_symbols(stack)} {stack.label} {len(stack.items)}"
    if max_width > 0 and len(line) > max_width:
        line = line[:max_width]
    return line


def uniqueness_symbols(stack: Stack) -> str:
    """◆ verdict, ● mostly novel, ○ mostly overlapping, ◌ mostly near-duplicate."""
    if not stack.items:
        return SYMBOL_LOW
    if any(item.source == Source.VERDICT for item in stack.items):
        return SYMBOL_VERDICT

    high = sum(1 for item in stack.items if item.uniqueness == Uniqueness.HIGH)
    medium = sum(1 for item in stack.items if item.uniqueness == Uniqueness.MEDIUM)
    low = len(stack.items) - high - medium

    if high >= medium and high >= low:
        return SYMBOL_HIGH
    if medium >= low:
        return SYMBOL_MEDIUM
    return SYMBOL_LOW


def age_tier_from_duration(elapsed: timedelta) -> AgeTier:
    if elapsed < timedelta(hours=24):
        return AgeTier.FRESH
    if elapsed < timedelta(days=7):
        return AgeTier.RECENT
    if elapsed < timedelta(days=30):
        return AgeTier.AGING
    return AgeTier.STALE


def stack_age(stack: Stack, now: datetime) -> AgeTier:
    """Age of a stack's most recent activity; empty stacks are stale."""
    if not stack.items:
        return AgeTier.STALE
    latest = max([stack.updated, *(item.created for item in stack.items)])
    return age_tier_from_duration(now - latest)


def age_to_style(tier: AgeTier) -> Style:
    return {
        AgeTier.FRESH: STYLE_STASH_FRESH,
        AgeTier.RECENT: STYLE_STASH_RECENT,
        AgeTier.AGING: STYLE_STASH_AGING,
    }.get(tier, STYLE_STASH_STALE)


@dataclass
class StashPanel:
    """Cursor and scroll state over the loaded stacks."""

    stacks: list[Stack] = field(default_factory=list)
    cursor: int = 0
    scroll_offset: int = 0
    width: int = 0
    height: int = 0

    def load_stacks(self, stacks: list[Stack]) -> None:
        self.stacks = list(stacks)
        if self.cursor >= len(self.stacks):
            self.cursor = max(0, len(self.stacks) - 1)

    def visible_rows(self) -> int:
        return max(self.height - 3, 1)

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
        if self.cursor < self.scroll_offset:
            self.scroll_offset = self.cursor

    def move_down(self) -> None:
        if self.cursor < len(self.stacks) - 1:
            self.cursor += 1
        visible = self.visible_rows()
        if self.cursor >= self.scroll_offset + visible:
            self.scroll_offset = self.cursor - visible + 1

    def selected_stack(self) -> Optional[Stack]:
        if not self.stacks or self.cursor >= len(self.stacks):
            return None
        return self.stacks[self.cursor]

    def view(self, focused: bool) -> str:
        parts = [STYLE_PANEL_TITLE.render("STASH"), "\n"]
        if not self.stacks:
            parts.append(STYLE_MUTED.render(" no stashed ideas"))
            return "".join(parts)

        now = datetime.now(timezone.utc)
        end = min(self.scroll_offset + self.visible_rows(), len(self.stacks))
        for index in range(self.scroll_offset, end):
            stack = self.stacks[index]
            line = format_stack_line(stack, self.width - 4)
            if index == self.cursor and focused:
                parts.append(STYLE_SELECTED.render(line))
            else:
                parts.append(age_to_style(stack_age(stack, now)).render(line))
            parts.append("\n")

        if self.scroll_offset > 0:
            parts.append(STYLE_MUTED.render(" ↑ more") + "\n")
        if end < len(self.stacks):
            parts.append(STYLE_MUTED.render(" ↓ more") + "\n")
        return "".join(parts)