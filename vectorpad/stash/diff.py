"""Field-level comparison of two stashed verdicts."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any

from vectorpad.stash.model import Item, ItemType


@dataclass
class FieldChange:
    """One top-level field that differs between two verdicts."""

    field: str
    old: str
    new: str


@dataclass
class VerdictDiff:
    """The differences between two verdict items."""

    id1: str
    id2: str
    title1: str = ""
    title2: str = ""
    changes: list[FieldChange] = field(default_factory=list)

    def render(self) -> str:
        """Format the diff as human-readable text."""
        lines = [f"Comparing {self.id1} → {self.id2}", ""]
        if not self.changes:
            lines.append("  (no differences)")
            return "\n".join(lines) + "\n"
        for change in self.changes:
            if change.old == "":
                lines.append(f"  + {change.field}: {change.new}")
            elif change.new == "":
                lines.append(f"  - {change.field}: {change.old}")
            else:
                lines.append(f"  ~ {change.field}:")
                lines.append(f"    v1: {change.old}")
                lines.append(f"    v2: {change.new}")
        return "\n".join(lines) + "\n"


def extract_verdict_json(text: str) -> str:
    """Return the JSON part of a ``verdict: <title>\\n\\n<json>`` text."""
    head, separator, tail = text.partition("\n\n")
    if not separator:
        return text
    return tail.strip()


def diff_verdicts(a: Item, b: Item) -> VerdictDiff:
    """Compare two verdict items; raises ValueError for non-verdicts or bad JSON."""
    if a.type != ItemType.VERDICT or b.type != ItemType.VERDICT:
        raise ValueError("both items must be verdicts")

    first = _parse_verdict(a.text, 1)
    second = _parse_verdict(b.text, 2)

    changes = []
    for key in sorted(first.keys() | second.keys()):
        old = _format_value(first.get(key))
        new = _format_value(second.get(key))
        if old != new:
            changes.append(FieldChange(field=key, old=old, new=new))

    return VerdictDiff(
        id1=_display_id(a),
        id2=_display_id(b),
        title1=a.title,
        title2=b.title,
        changes=changes,
    )


def _parse_verdict(text: str, position: int) -> dict[str, Any]:
    try:
        parsed = json.loads(extract_verdict_json(text))
    except ValueError as exc:
        raise ValueError(f"parse verdict {position}: {exc}") from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"parse verdict {position}: not a JSON object")
    return parsed


def _display_id(item: Item) -> str:
    return item.claim_id or item.id


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if isinstance(value, int):
            return str(value)
        if math.isfinite(value) and value == int(value):
            return str(int(value))
        return f"{value:.2f}"
    if isinstance(value, list):
        return ", ".join(_format_value(entry) for entry in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return str(value)