from __future__ import annotations
import re
from functools import lru_cache
from typing import FrozenSet, Iterable

_whitespace_pattern = re.compile(r"\s+")

# Words that say nothing about the object itself ("my lost wallet").
FILLER_WORDS = frozenset({"a", "an", "the", "my", "lost", "found"})


@lru_cache(maxsize=8192)
def normalize_text(s: str | None) -> str:
    """Lower-case, trim and collapse internal whitespace."""
    if not s:
        return ""
    return _whitespace_pattern.sub(" ", s.strip().lower())


@lru_cache(maxsize=8192)
def word_set(s: str | None) -> FrozenSet[str]:
    normalized = normalize_text(s)
    if not normalized:
        return frozenset()
    return frozenset(normalized.split(" "))


def content_words(s: str | None) -> FrozenSet[str]:
    """Word set with filler words removed."""
    return word_set(s) - FILLER_WORDS


def normalize_keywords(keywords: Iterable[str] | None) -> FrozenSet[str]:
    if not keywords:
        return frozenset()
    return frozenset(k for k in (normalize_text(k) for k in keywords) if k)


def jaccard(set1: FrozenSet[str] | set, set2: FrozenSet[str] | set) -> float:
    """Intersection over union; 0.0 when both sets are empty."""
    union = len(set1 | set2)
    return len(set1 & set2) / union if union > 0 else 0.0


def same_label(a: str | None, b: str | None) -> bool:
    """Case-insensitive equality of two optional labels (colour, brand, category)."""
    if a is None or b is None:
        return False
    na, nb = normalize_text(str(a)), normalize_text(str(b))
    return bool(na) and na == nb


__all__ = [
    "FILLER_WORDS",
    "normalize_text",
    "word_set",
    "content_words",
    "normalize_keywords",
    "jaccard",
    "same_label",
]
