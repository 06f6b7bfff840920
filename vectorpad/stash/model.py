"""Data model for stashed ideas: items, stacks and the on-disk stash file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional, TypeVar

CURRENT_VERSION = 1

UNCLUSTERED_STACK_ID = "unclustered"
UNCLUSTERED_STACK_LABEL = "Unclustered"

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_FRESH_WINDOW = timedelta(hours=24)
_RECENT_WINDOW = timedelta(days=7)
_AGING_WINDOW = timedelta(days=30)

_TIME_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


class Uniqueness(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Source(str, Enum):
    CLI = "cli"
    PASTE = "paste"
    VERDICT = "verdict"


class AgeTier(str, Enum):
    FRESH = "fresh"
    RECENT = "recent"
    AGING = "aging"
    STALE = "stale"


class ItemType(str, Enum):
    """Classifies the nature of a stashed idea."""

    INSIGHT = "insight"
    QUESTION = "question"
    PATTERN = "pattern"
    CONSTRAINT = "constraint"
    VERDICT = "verdict"


_E = TypeVar("_E", bound=Enum)


def _enum_or_none(enum_cls: type[_E], value: Any) -> Optional[_E]:
    if value is None or value == "":
        return None
    return enum_cls(value)


def _enum_text(value: Optional[Enum]) -> str:
    return "" if value is None else str(value.value)


def _format_time(value: datetime) -> str:
    """Format a timestamp as RFC 3339, trimming trailing fractional zeros."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_time(text: str) -> datetime:
    """Parse an RFC 3339 timestamp; raises ValueError when malformed."""
    match = _TIME_PATTERN.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
    )


def _time_from(data: dict, key: str) -> datetime:
    value = data.get(key)
    if not value:
        return ZERO_TIME
    return _parse_time(value)


def compute_age_tier(created: datetime, now: datetime) -> AgeTier:
    """Classify how old an item created at ``created`` is relative to ``now``."""
    if now < created:
        return AgeTier.FRESH
    elapsed = now - created
    if elapsed < _FRESH_WINDOW:
        return AgeTier.FRESH
    if elapsed < _RECENT_WINDOW:
        return AgeTier.RECENT
    if elapsed < _AGING_WINDOW:
        return AgeTier.AGING
    return AgeTier.STALE


@dataclass
class Item:
    """A single stashed idea."""

    id: str = ""
    text: str = ""
    created: datetime = ZERO_TIME
    uniqueness: Optional[Uniqueness] = None
    source: Optional[Source] = None
    title: str = ""
    type: Optional[ItemType] = None
    project: str = ""
    tags: list[str] = field(default_factory=list)
    refs: list[str] = field(default_factory=list)
    claim_id: str = ""
    embedding: list[float] = field(default_factory=list)

    def age_tier(self, now: datetime) -> AgeTier:
        return compute_age_tier(self.created, now)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape; the embedding is never included."""
        data: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "created": _format_time(self.created),
            "uniqueness": _enum_text(self.uniqueness),
            "source": _enum_text(self.source),
        }
        if self.title:
            data["title"] = self.title
        if self.type is not None:
            data["type"] = self.type.value
        if self.project:
            data["project"] = self.project
        if self.tags:
            data["tags"] = list(self.tags)
        if self.refs:
            data["refs"] = list(self.refs)
        if self.claim_id:
            data["claim_id"] = self.claim_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        return cls(
            id=data.get("id") or "",
            text=data.get("text") or "",
            created=_time_from(data, "created"),
            uniqueness=_enum_or_none(Uniqueness, data.get("uniqueness")),
            source=_enum_or_none(Source, data.get("source")),
            title=data.get("title") or "",
            type=_enum_or_none(ItemType, data.get("type")),
            project=data.get("project") or "",
            tags=list(data.get("tags") or []),
            refs=list(data.get("refs") or []),
            claim_id=data.get("claim_id") or "",
        )


@dataclass
class Stack:
    """A labelled group of related items."""

    id: str = ""
    label: str = ""
    created: datetime = ZERO_TIME
    updated: datetime = ZERO_TIME
    items: list[Item] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "created": _format_time(self.created),
            "updated": _format_time(self.updated),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Stack":
        return cls(
            id=data.get("id") or "",
            label=data.get("label") or "",
            created=_time_from(data, "created"),
            updated=_time_from(data, "updated"),
            items=[Item.from_dict(entry) for entry in data.get("items") or []],
        )


@dataclass
class StashFile:
    """The persisted stash: a versioned list of stacks."""

    stacks: list[Stack] = field(default_factory=list)
    version: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "stacks": [stack.to_dict() for stack in self.stacks],
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StashFile":
        return cls(
            stacks=[Stack.from_dict(entry) for entry in data.get("stacks") or []],
            version=int(data.get("version") or 0),
        )