"""Cosine similarity between embeddings and its classification."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from vectorpad.stash.model import Item

_THRESHOLD_NEAR_DUPLICATE = 0.90
_THRESHOLD_SAME_IDEA = 0.80
_THRESHOLD_RELATED = 0.65


class SimilarityLevel(str, Enum):
    """How close two items are."""

    NEAR_DUPLICATE = "near_duplicate"
    SAME_IDEA = "same_idea"
    RELATED = "related"
    DIFFERENT = "different"


@dataclass
class SimilarResult:
    """An item paired with its similarity score to a query."""

    item: Item
    score: float
    level: SimilarityLevel


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity; 0 for empty, mismatched or zero-magnitude vectors."""
    if len(a) != len(b) or not a:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    mag_a = sum(x * x for x in a)
    mag_b = sum(y * y for y in b)
    if mag_a == 0 or mag_b == 0:
        return 0.0
    return dot / (math.sqrt(mag_a) * math.sqrt(mag_b))


def threshold_related() -> float:
    """Minimum score classified as related."""
    return _THRESHOLD_RELATED


def classify_similarity(score: float) -> SimilarityLevel:
    if score >= _THRESHOLD_NEAR_DUPLICATE:
        return SimilarityLevel.NEAR_DUPLICATE
    if score >= _THRESHOLD_SAME_IDEA:
        return SimilarityLevel.SAME_IDEA
    if score >= _THRESHOLD_RELATED:
        return SimilarityLevel.RELATED
    return SimilarityLevel.DIFFERENT