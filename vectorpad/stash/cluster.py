"""Group stashed items into stacks by token overlap."""

from __future__ import annotations

import re
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime
from itertools import combinations

from vectorpad.stash.model import (
    UNCLUSTERED_STACK_ID,
    UNCLUSTERED_STACK_LABEL,
    Item,
    Stack,
    Uniqueness,
)

_CLUSTER_SIMILARITY_THRESHOLD = 0.40
_UNIQUENESS_LOW_THRESHOLD = 0.75
_UNIQUENESS_MEDIUM_THRESHOLD = 0.40
_STACK_LABEL_TOKEN_LIMIT = 2
_SHARED_TOKEN_OCCURRENCE_MINIMUM = 2

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")
_STOP_WORDS = frozenset(
    """a an and as at be by can for from i if in into is it not of on or our
    that the this to we will with you your""".split()
)


def tokenize(text: str) -> set[str]:
    """Lower-cased alphanumeric tokens of ``text`` without stop words."""
    return {
        token
        for token in _TOKEN_PATTERN.findall(text.lower())
        if token not in _STOP_WORDS
    }


def jaccard_similarity(left: set[str], right: set[str]) -> float:
    if not left and not right:
        return 0.0
    union = len(left | right)
    if union == 0:
        return 0.0
    return len(left & right) / union


def flatten_items(stacks: Iterable[Stack]) -> list[Item]:
    return [item for stack in stacks for item in stack.items]


def cluster(stacks: Iterable[Stack], now: datetime) -> list[Stack]:
    """Re-cluster all items of ``stacks``."""
    return cluster_items(flatten_items(stacks), now)


def _item_key(item: Item) -> tuple:
    return (item.created, item.id, item.text)


def cluster_items(items: Sequence[Item], now: datetime) -> list[Stack]:
    """Cluster items into labelled stacks plus a trailing unclustered stack."""
    if not items:
        return []

    ordered = sorted(items, key=_item_key)
    token_sets = [tokenize(item.text) for item in ordered]

    parent = list(range(len(ordered)))

    def find(index: int) -> int:
        root = index
        while parent[root] != root:
            root = parent[root]
        while parent[index] != root:
            parent[index], index = root, parent[index]
        return root

    for (left, left_tokens), (right, right_tokens) in combinations(enumerate(token_sets), 2):
        if jaccard_similarity(left_tokens, right_tokens) > _CLUSTER_SIMILARITY_THRESHOLD:
            left_root, right_root = find(left), find(right)
            if left_root != right_root:
                parent[right_root] = left_root

    components: dict[int, list[int]] = defaultdict(list)
    for index in range(len(ordered)):
        components[find(index)].append(index)
    component_indices = sorted(
        (sorted(indices) for indices in components.values()),
        key=lambda indices: _item_key(ordered[indices[0]]),
    )

    clustered: list[Stack] = []
    unclustered: list[Item] = []
    for indices in component_indices:
        if len(indices) == 1:
            unclustered.append(replace(ordered[indices[0]], uniqueness=Uniqueness.HIGH))
            continue
        members = _apply_uniqueness_scores(sorted((ordered[i] for i in indices), key=_item_key))
        created, updated = _stack_bounds(members, now)
        clustered.append(
            Stack(
                label=_build_stack_label([token_sets[i] for i in indices]),
                created=created,
                updated=updated,
                items=members,
            )
        )

    clustered.sort(key=lambda stack: (stack.label, stack.created))
    _apply_stack_ids(clustered)

    if unclustered:
        unclustered.sort(key=_item_key)
        created, updated = _stack_bounds(unclustered, now)
        clustered.append(
            Stack(
                id=UNCLUSTERED_STACK_ID,
                label=UNCLUSTERED_STACK_LABEL,
                created=created,
                updated=updated,
                items=unclustered,
            )
        )
    return clustered


def _build_stack_label(token_sets: Sequence[set[str]]) -> str:
    counts = Counter(token for tokens in token_sets for token in tokens)
    weighted = [
        (token, count)
        for token, count in counts.items()
        if count >= _SHARED_TOKEN_OCCURRENCE_MINIMUM
    ] or list(counts.items())
    if not weighted:
        return "Cluster"
    weighted.sort(key=lambda pair: (-pair[1], pair[0]))
    return " ".join(
        _title_token(token) for token, _ in weighted[:_STACK_LABEL_TOKEN_LIMIT]
    )


def _title_token(token: str) -> str:
    return token[:1].upper() + token[1:]


def _slugify(label: str) -> str:
    return "-".join(_TOKEN_PATTERN.findall(label.lower()))


def _apply_stack_ids(stacks: list[Stack]) -> None:
    seen: Counter[str] = Counter()
    for stack in stacks:
        base = _slugify(stack.label) or "stack"
        count = seen[base]
        stack.id = base if count == 0 else f"{base}-{count + 1}"
        seen[base] = count + 1


def _stack_bounds(items: Sequence[Item], now: datetime) -> tuple[datetime, datetime]:
    if not items:
        return now, now
    created_times = [item.created for item in items]
    return min(created_times), max(created_times)


def _apply_uniqueness_scores(items: list[Item]) -> list[Item]:
    if len(items) <= 1:
        return [replace(item, uniqueness=Uniqueness.HIGH) for item in items]
    token_sets = [tokenize(item.text) for item in items]
    scored = []
    for index, item in enumerate(items):
        max_similarity = max(
            (
                jaccard_similarity(token_sets[index], other_tokens)
                for other, other_tokens in enumerate(token_sets)
                if other != index
            ),
            default=0.0,
        )
        scored.append(replace(item, uniqueness=_uniqueness_from_similarity(max(max_similarity, 0.0))))
    return scored


def _uniqueness_from_similarity(similarity: float) -> Uniqueness:
    if similarity >= _UNIQUENESS_LOW_THRESHOLD:
        return Uniqueness.LOW
    if similarity >= _UNIQUENESS_MEDIUM_THRESHOLD:
        return Uniqueness.MEDIUM
    return Uniqueness.HIGH