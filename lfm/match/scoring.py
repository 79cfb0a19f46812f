from __future__ import annotations
"""Weighted similarity scoring between a source item and a candidate item.

This module defines the scoring configuration and a pure scoring function that
evaluates one lost/found pair. It does NOT look anything up; callers pass
already-fetched items.

Design goals:
- Weighted additive scoring over independent factors (weights sum to 1.0)
- Missing data degrades a factor to 0 instead of raising
- Transparent per-factor breakdown for diagnostics
- Keep pure / side-effect free for easy unit testing
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Tuple

from ..models import Item, Location
from ..utils.normalization import (
    normalize_text,
    word_set,
    content_words,
    normalize_keywords,
    jaccard,
    same_label,
)

# Factor names used as keys in breakdown maps
TITLE = "title"
CATEGORY = "category"
DESCRIPTION = "description"
KEYWORDS = "keywords"
LOCATION = "location"
TIME = "time"
COLOR = "color"
BRAND = "brand"

FACTORS: Tuple[str, ...] = (TITLE, CATEGORY, DESCRIPTION, KEYWORDS, LOCATION, TIME, COLOR, BRAND)

# --- Scoring Configuration -------------------------------------------------

@dataclass(frozen=True)
class ScoringConfig:
    """Weights, thresholds and bonuses for scoring and composition.

    Identical items with every factor present reach 1.0:
       title 0.35 + category 0.20 + description 0.10 + keywords 0.10
       + location 0.10 + time 0.10 + color 0.025 + brand 0.025 = 1.00
    Without colour and brand the same pair tops out at 0.95.

    Composition adds a flat relationship bonus and a trust bonus on top of the
    raw score and clamps to [0, 1]:
       SAME_ORGANIZATION +0.20, SAME_ENTERPRISE +0.15, SAME_NETWORK +0.08
       average reporter trust >= 85: +0.05
    """
    # factor weights
    weight_title: float = 0.35
    weight_category: float = 0.20
    weight_description: float = 0.10
    weight_keywords: float = 0.10
    weight_location: float = 0.10
    weight_time: float = 0.10
    weight_color: float = 0.025
    weight_brand: float = 0.025
    # title
    title_contains_score: float = 0.9
    title_partial_bonus: float = 0.1
    title_partial_bonus_cap: float = 0.3
    title_partial_min_length: int = 3
    # description
    description_contains_score: float = 0.8
    # location
    location_same_room: float = 1.0
    location_same_building: float = 0.8
    # (max distance km, score) checked in order
    location_distance_bands: Tuple[Tuple[float, float], ...] = ((0.1, 0.6), (0.5, 0.3), (1.0, 0.1))
    # time proximity: (max hours exclusive, score) checked in order
    time_bands: Tuple[Tuple[int, float], ...] = ((24, 1.0), (72, 0.7), (168, 0.4), (336, 0.2))
    # base filter applied before composition
    min_raw_score: float = 0.30
    # relationship bonuses
    bonus_same_organization: float = 0.20
    bonus_same_enterprise: float = 0.15
    bonus_same_network: float = 0.08
    bonus_cross_network: float = 0.0
    # trust
    high_trust_threshold: float = 85.0
    high_trust_bonus: float = 0.05
    default_trust: float = 50.0
    low_trust_threshold: float = 50.0
    # verification
    high_value_threshold: float = 500.0
    # compare category and keywords case-insensitively (colour and brand always are)
    fold_case: bool = False

    def __post_init__(self):
        total = sum(self.weights().values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0 (got {total:.4f})")

    def weights(self) -> Dict[str, float]:
        return {
            TITLE: self.weight_title,
            CATEGORY: self.weight_category,
            DESCRIPTION: self.weight_description,
            KEYWORDS: self.weight_keywords,
            LOCATION: self.weight_location,
            TIME: self.weight_time,
            COLOR: self.weight_color,
            BRAND: self.weight_brand,
        }

# --- Dataclasses -----------------------------------------------------------

@dataclass(frozen=True)
class ScoreBreakdown:
    """Raw score plus per-factor similarity (0-1) and weighted contribution."""
    raw_score: float
    factors: Dict[str, float]
    contributions: Dict[str, float]
    notes: List[str] = field(default_factory=list)

    def passes(self, cfg: ScoringConfig) -> bool:
        return self.raw_score >= cfg.min_raw_score

    def to_dict(self) -> Dict[str, float]:
        """Per-factor similarity values keyed by factor name."""
        return dict(self.factors)


@dataclass
class CandidateEvaluation:
    source_id: Optional[str]
    candidate_id: Optional[str]
    score: ScoreBreakdown

# --- Factor scores ---------------------------------------------------------

def title_similarity(title1: Optional[str], title2: Optional[str], cfg: ScoringConfig = ScoringConfig()) -> float:
    """Similarity of two titles (symmetric).

    Exact (case/whitespace-insensitive) -> 1.0, containment -> 0.9, otherwise
    Jaccard of content words plus a partial-word bonus, e.g. "iphone" vs
    "iphone17".
    """
    t1 = normalize_text(title1)
    t2 = normalize_text(title2)
    if not t1 or not t2:
        return 0.0
    if t1 == t2:
        return 1.0
    if t1 in t2 or t2 in t1:
        return cfg.title_contains_score

    words1 = content_words(t1)
    words2 = content_words(t2)
    if not words1 or not words2:
        return 0.0

    overlap = jaccard(words1, words2)

    bonus = 0.0
    min_len = cfg.title_partial_min_length
    for w1 in words1:
        if len(w1) < min_len:
            continue
        for w2 in words2:
            if len(w2) >= min_len and (w1 in w2 or w2 in w1):
                bonus += cfg.title_partial_bonus
    bonus = min(bonus, cfg.title_partial_bonus_cap)

    return min(overlap + bonus, 1.0)


def description_similarity(text1: Optional[str], text2: Optional[str], cfg: ScoringConfig = ScoringConfig()) -> float:
    t1 = normalize_text(text1)
    t2 = normalize_text(text2)
    if not t1 or not t2:
        return 0.0
    if t1 == t2:
        return 1.0
    if t1 in t2 or t2 in t1:
        return cfg.description_contains_score
    return jaccard(word_set(t1), word_set(t2))


def keyword_similarity(keywords1, keywords2, cfg: ScoringConfig = ScoringConfig()) -> float:
    """Jaccard of the two keyword sets; exact strings unless ``cfg.fold_case``."""
    if cfg.fold_case:
        set1, set2 = normalize_keywords(keywords1), normalize_keywords(keywords2)
    else:
        set1, set2 = frozenset(keywords1 or ()), frozenset(keywords2 or ())
    if not set1 or not set2:
        return 0.0
    return jaccard(set1, set2)


def category_match(category1: Optional[str], category2: Optional[str], cfg: ScoringConfig = ScoringConfig()) -> float:
    if category1 is None or category2 is None:
        return 0.0
    if cfg.fold_case:
        return 1.0 if same_label(category1, category2) else 0.0
    return 1.0 if category1 == category2 else 0.0


def location_similarity(loc1: Optional[Location], loc2: Optional[Location], cfg: ScoringConfig = ScoringConfig()) -> float:
    if loc1 is None or loc2 is None:
        return 0.0

    if loc1.building and loc1.building == loc2.building:
        if loc1.room is not None and loc1.room == loc2.room:
            return cfg.location_same_room
        return cfg.location_same_building

    distance = loc1.distance_km(loc2)
    if distance is None:
        return 0.0
    for max_km, score in cfg.location_distance_bands:
        if distance < max_km:
            return score
    return 0.0


def time_proximity(date1: Optional[datetime], date2: Optional[datetime], cfg: ScoringConfig = ScoringConfig()) -> float:
    if date1 is None or date2 is None:
        return 0.0
    try:
        diff_hours = int(abs((date1 - date2).total_seconds()) // 3600)
    except TypeError:
        # naive vs aware datetimes cannot be compared
        return 0.0
    for max_hours, score in cfg.time_bands:
        if diff_hours < max_hours:
            return score
    return 0.0

# --- Core Scoring Logic ----------------------------------------------------

def evaluate_pair(source: Item, candidate: Item, cfg: ScoringConfig) -> ScoreBreakdown:
    """Compute the weighted similarity breakdown for two items."""
    notes: List[str] = []

    factors: Dict[str, float] = {
        TITLE: title_similarity(source.title, candidate.title, cfg),
        CATEGORY: category_match(source.category, candidate.category, cfg),
        DESCRIPTION: description_similarity(source.description, candidate.description, cfg),
        KEYWORDS: keyword_similarity(source.keywords, candidate.keywords, cfg),
        LOCATION: location_similarity(source.location, candidate.location, cfg),
        TIME: time_proximity(source.reported_date, candidate.reported_date, cfg),
        COLOR: 1.0 if same_label(source.primary_color, candidate.primary_color) else 0.0,
        BRAND: 1.0 if same_label(source.brand, candidate.brand) else 0.0,
    }

    weights = cfg.weights()
    contributions = {name: factors[name] * weights[name] for name in FACTORS}
    raw_score = min(max(sum(contributions.values()), 0.0), 1.0)

    for name in FACTORS:
        if factors[name] >= 1.0:
            notes.append(f"{name}_exact")
        elif factors[name] > 0.0:
            notes.append(f"{name}:{factors[name]:.2f}")

    return ScoreBreakdown(
        raw_score=raw_score,
        factors=factors,
        contributions=contributions,
        notes=notes,
    )

# --- Batch Evaluation Helper -----------------------------------------------

def evaluate_against_candidates(source: Item, candidates: List[Item], cfg: ScoringConfig) -> Optional[CandidateEvaluation]:
    """Return the best CandidateEvaluation passing the base filter, or None."""
    best: Tuple[Optional[CandidateEvaluation], float] = (None, 0.0)
    for candidate in candidates:
        breakdown = evaluate_pair(source, candidate, cfg)
        if not breakdown.passes(cfg):
            continue
        if best[0] is None or breakdown.raw_score > best[1]:
            best = (
                CandidateEvaluation(source_id=source.item_id, candidate_id=candidate.item_id, score=breakdown),
                breakdown.raw_score,
            )
    return best[0]

__all__ = [
    "ScoringConfig",
    "ScoreBreakdown",
    "CandidateEvaluation",
    "FACTORS",
    "title_similarity",
    "description_similarity",
    "keyword_similarity",
    "category_match",
    "location_similarity",
    "time_proximity",
    "evaluate_pair",
    "evaluate_against_candidates",
]
