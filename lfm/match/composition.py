"""Score composition and transfer complexity classification.

Both operate on the closed set of relationship tiers. Each tier is handled
explicitly; an unknown value raises instead of silently falling through.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .relationship import RelationshipTier
from .scoring import ScoringConfig


class TransferComplexity(str, Enum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def level(self) -> int:
        return _COMPLEXITY_LEVEL[self]


_COMPLEXITY_LEVEL = {
    TransferComplexity.NONE: 0,
    TransferComplexity.LOW: 1,
    TransferComplexity.MEDIUM: 2,
    TransferComplexity.HIGH: 3,
}


class ScoreLevel(str, Enum):
    """Display band for a composite score."""
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    LOW = "LOW"

    @classmethod
    def from_score(cls, score: float) -> ScoreLevel:
        if score >= 0.80:
            return cls.EXCELLENT
        if score >= 0.60:
            return cls.GOOD
        if score >= 0.40:
            return cls.FAIR
        return cls.LOW


@dataclass(frozen=True)
class Composition:
    """Composite score with each bonus recorded as it was added.

    ``tier_bonus`` and ``trust_bonus`` are the nominal bonuses added before
    clamping; ``clamped`` tells whether the sum had to be cut back to 1.0.
    """
    raw_score: float
    tier_bonus: float
    trust_bonus: float
    score: float

    @property
    def clamped(self) -> bool:
        return self.raw_score + self.tier_bonus + self.trust_bonus > self.score


# --- Score composer --------------------------------------------------------

def tier_bonus(tier: RelationshipTier, cfg: ScoringConfig) -> float:
    if tier is RelationshipTier.SAME_ORGANIZATION:
        return cfg.bonus_same_organization
    if tier is RelationshipTier.SAME_ENTERPRISE:
        return cfg.bonus_same_enterprise
    if tier is RelationshipTier.SAME_NETWORK:
        return cfg.bonus_same_network
    if tier is RelationshipTier.CROSS_NETWORK:
        return cfg.bonus_cross_network
    raise ValueError(f"Unknown relationship tier: {tier!r}")


def trust_bonus(avg_trust: float, cfg: ScoringConfig) -> float:
    return cfg.high_trust_bonus if avg_trust >= cfg.high_trust_threshold else 0.0


def average_trust(source_trust: Optional[float], candidate_trust: Optional[float], default: float = 50.0) -> float:
    """Arithmetic mean of both reporters' trust; absent values count as ``default``."""
    a = default if source_trust is None else source_trust
    b = default if candidate_trust is None else candidate_trust
    return (a + b) / 2


def compose_score(raw_score: float, tier: RelationshipTier, avg_trust: float, cfg: ScoringConfig) -> Composition:
    """Add the relationship and trust bonuses to a raw score, clamped to [0, 1]."""
    t_bonus = tier_bonus(tier, cfg)
    tr_bonus = trust_bonus(avg_trust, cfg)
    score = min(max(raw_score + t_bonus + tr_bonus, 0.0), 1.0)
    return Composition(raw_score=raw_score, tier_bonus=t_bonus, trust_bonus=tr_bonus, score=score)


# --- Transfer complexity classifier ---------------------------------------

def classify_transfer(tier: RelationshipTier) -> Tuple[TransferComplexity, str]:
    """Map a relationship tier to transfer complexity and estimated lead time."""
    if tier is RelationshipTier.SAME_ORGANIZATION:
        return TransferComplexity.NONE, "Immediate"
    if tier is RelationshipTier.SAME_ENTERPRISE:
        return TransferComplexity.LOW, "1-2 business days"
    if tier is RelationshipTier.SAME_NETWORK:
        return TransferComplexity.MEDIUM, "2-3 business days"
    if tier is RelationshipTier.CROSS_NETWORK:
        return TransferComplexity.HIGH, "3-5 business days"
    raise ValueError(f"Unknown relationship tier: {tier!r}")


__all__ = [
    "TransferComplexity",
    "ScoreLevel",
    "Composition",
    "tier_bonus",
    "trust_bonus",
    "average_trust",
    "compose_score",
    "classify_transfer",
]
