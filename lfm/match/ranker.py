"""Match ranking: score, compose, classify and order candidates for one item.

This module provides the MatchRanker that coordinates candidate selection,
similarity scoring, relationship resolution, score composition and transfer
classification, plus small helpers to filter and re-sort ranked results.

Lookups against the directory and the trust service never abort a call:
failures fall back to CROSS_NETWORK and a neutral trust of 50.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config_types import MatchingConfig
from ..errors import InvalidItemError
from ..interface import DirectoryResolver, TrustLookup
from ..models import Item
from ..utils.deadline import Deadline
from .candidate_selector import CandidateSelector
from .composition import (
    Composition,
    ScoreLevel,
    TransferComplexity,
    average_trust,
    classify_transfer,
    compose_score,
)
from .relationship import RelationshipTier, enterprise_of, resolve_relationship
from .scope import ScopeConfig
from .scoring import ScoreBreakdown, ScoringConfig, evaluate_pair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """One ranked candidate for a source item. Built fresh on every call."""
    source_item_id: str
    matched_item: Item
    composite_score: float
    breakdown: ScoreBreakdown
    composition: Composition
    relationship_tier: RelationshipTier
    transfer_complexity: TransferComplexity
    estimated_transfer_time: str
    requires_verification: bool
    verification_reasons: Tuple[str, ...]
    source_trust: float
    matched_trust: float
    matched_enterprise_id: Optional[str] = None

    @property
    def matched_item_id(self) -> Optional[str]:
        return self.matched_item.item_id

    @property
    def raw_score(self) -> float:
        return self.breakdown.raw_score

    @property
    def score_level(self) -> ScoreLevel:
        return ScoreLevel.from_score(self.composite_score)

    @property
    def match_reason(self) -> str:
        """Label for the raw similarity, before any bonus."""
        raw = self.raw_score
        if raw >= 0.8:
            return "Very High Match"
        if raw >= 0.6:
            return "High Match"
        if raw >= 0.4:
            return "Moderate Match"
        return "Possible Match"

    @property
    def is_cross_enterprise(self) -> bool:
        return self.relationship_tier.is_cross_enterprise

    @property
    def transfer_required(self) -> bool:
        return self.transfer_complexity is not TransferComplexity.NONE

    @property
    def has_trusted_users(self) -> bool:
        return self.source_trust >= 70 and self.matched_trust >= 70

    @property
    def trust_assessment(self) -> str:
        avg = (self.source_trust + self.matched_trust) / 2
        if avg >= 85:
            return "High Trust"
        if avg >= 70:
            return "Good Trust"
        if avg >= 50:
            return "Fair Trust"
        return "Low Trust"

    @property
    def effective_score(self) -> float:
        """Composite score weighted by the relationship tier's priority."""
        return self.composite_score * self.relationship_tier.priority_multiplier

    @property
    def verification_reason(self) -> Optional[str]:
        return "; ".join(self.verification_reasons) if self.verification_reasons else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the service layer."""
        return {
            "sourceItemId": self.source_item_id,
            "matchedItemId": self.matched_item_id,
            "compositeScore": round(self.composite_score, 4),
            "rawScore": round(self.raw_score, 4),
            "breakdown": {name: round(value, 4) for name, value in self.breakdown.factors.items()},
            "tierBonus": self.composition.tier_bonus,
            "trustBonus": self.composition.trust_bonus,
            "relationshipTier": self.relationship_tier.value,
            "transferComplexity": self.transfer_complexity.value,
            "estimatedTransferTime": self.estimated_transfer_time,
            "requiresVerification": self.requires_verification,
            "verificationReasons": list(self.verification_reasons),
            "scoreLevel": self.score_level.value,
            "sourceTrust": self.source_trust,
            "matchedTrust": self.matched_trust,
        }


def rank_key(result: MatchResult) -> Tuple[float, int, str]:
    """Score descending, then simpler transfer first, then matched item id."""
    return (-result.composite_score, result.transfer_complexity.level, result.matched_item_id or "")


class MatchRanker:
    """Find and rank matches for a single source item.

    Example usage:
        ranker = MatchRanker(directory=DirectorySnapshot(...), trust=TrustSnapshot(...))
        results = ranker.find_matches(lost_item, candidates)
        results = ranker.match_within_network(lost_item, candidates, "net-boston")
    """

    def __init__(
        self,
        directory: Optional[DirectoryResolver] = None,
        trust: Optional[TrustLookup] = None,
        scoring_config: Optional[ScoringConfig] = None,
        matching_config: Optional[MatchingConfig] = None,
    ):
        self.directory = directory
        self.trust = trust
        self.scoring_config = scoring_config or ScoringConfig()
        self.matching_config = matching_config or MatchingConfig()
        self.selector = CandidateSelector(directory)

    # --- core -------------------------------------------------------------

    def find_matches(
        self,
        source: Item,
        candidates: Iterable[Item],
        scope: Optional[ScopeConfig] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[MatchResult]:
        """Rank every eligible candidate in scope for ``source``.

        Raises:
            InvalidItemError: if the source has no id or no type
        """
        validate_source(source)
        scope = scope or ScopeConfig.system()

        pool = self.selector.restrict_to_scope(candidates, scope)
        pool = self.selector.eligible(source, pool)
        pool = self.selector.token_prescore(source, pool, self.matching_config.max_candidates_per_item)
        if not pool:
            logger.debug(f"No eligible candidates for item {source.item_id} in scope {scope.scope_id}")
            return []

        threshold = scope.threshold(self.matching_config)
        source_trust = self.trust_of(source.reporter_id)
        debug_logging = logger.isEnabledFor(logging.DEBUG)

        results: List[MatchResult] = []
        scanned = 0
        for candidate in pool:
            if deadline is not None and deadline.expired():
                logger.warning(
                    f"Matching for item {source.item_id} stopped after {scanned}/{len(pool)} candidates (deadline reached)"
                )
                break
            scanned += 1
            try:
                result = self._evaluate(source, candidate, source_trust, threshold)
            except Exception as e:
                logger.warning(f"Skipping candidate {candidate.item_id} for item {source.item_id}: {e}")
                continue

            if debug_logging and result is not None:
                logger.debug(
                    f"item={source.item_id} vs candidate={candidate.item_id} "
                    f"raw={result.raw_score:.3f} final={result.composite_score:.3f} "
                    f"tier={result.relationship_tier.value} notes={result.breakdown.notes}"
                )
            if result is not None:
                results.append(result)

        results.sort(key=rank_key)
        return results

    def _evaluate(self, source: Item, candidate: Item, source_trust: float, threshold: float) -> Optional[MatchResult]:
        cfg = self.scoring_config
        breakdown = evaluate_pair(source, candidate, cfg)
        if not breakdown.passes(cfg):
            return None

        tier = resolve_relationship(source, candidate, self.directory)
        matched_trust = self.trust_of(candidate.reporter_id)
        composition = compose_score(
            breakdown.raw_score,
            tier,
            average_trust(source_trust, matched_trust, cfg.default_trust),
            cfg,
        )
        if composition.score < threshold:
            return None

        complexity, lead_time = classify_transfer(tier)
        reasons = self.verification_reasons(candidate, source_trust, matched_trust, complexity)

        return MatchResult(
            source_item_id=source.item_id,  # type: ignore[arg-type]
            matched_item=candidate,
            composite_score=composition.score,
            breakdown=breakdown,
            composition=composition,
            relationship_tier=tier,
            transfer_complexity=complexity,
            estimated_transfer_time=lead_time,
            requires_verification=bool(reasons),
            verification_reasons=tuple(reasons),
            source_trust=source_trust,
            matched_trust=matched_trust,
            matched_enterprise_id=enterprise_of(candidate, self.directory),
        )

    def verification_reasons(
        self,
        candidate: Item,
        source_trust: float,
        matched_trust: float,
        complexity: TransferComplexity,
    ) -> List[str]:
        """Human-readable reasons a match needs manual verification (empty if none)."""
        cfg = self.scoring_config
        reasons: List[str] = []
        value = _value_of(candidate)
        if value >= cfg.high_value_threshold:
            reasons.append(f"High-value item (${value:.0f})")
        if source_trust < cfg.low_trust_threshold:
            reasons.append("Low source user trust score")
        if matched_trust < cfg.low_trust_threshold:
            reasons.append("Low matched user trust score")
        if complexity is TransferComplexity.HIGH:
            reasons.append("High complexity transfer")
        return reasons

    def trust_of(self, user_id: Optional[str]) -> float:
        """Trust score of a reporter; the neutral default on any failure."""
        default = self.scoring_config.default_trust
        if self.trust is None or not user_id:
            return default
        try:
            score = self.trust.score_of(user_id)
        except Exception as e:
            logger.warning(f"Trust lookup failed for user {user_id}: {e}")
            return default
        if score is None:
            return default
        try:
            return float(score)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric trust score {score!r} for user {user_id}")
            return default

    # --- scope conveniences ----------------------------------------------

    def match_across_enterprises(self, source: Item, candidates: Iterable[Item], deadline: Optional[Deadline] = None) -> List[MatchResult]:
        return self.find_matches(source, candidates, ScopeConfig.system(), deadline)

    def match_within_organization(
        self, source: Item, candidates: Iterable[Item], organization_id: Optional[str] = None, deadline: Optional[Deadline] = None
    ) -> List[MatchResult]:
        organization_id = organization_id or source.organization_id
        if not organization_id:
            return []
        return self.find_matches(source, candidates, ScopeConfig.organization(organization_id), deadline)

    def match_within_enterprise(
        self, source: Item, candidates: Iterable[Item], enterprise_id: Optional[str] = None, deadline: Optional[Deadline] = None
    ) -> List[MatchResult]:
        enterprise_id = enterprise_id or enterprise_of(source, self.directory)
        if not enterprise_id:
            return []
        return self.find_matches(source, candidates, ScopeConfig.enterprise(enterprise_id), deadline)

    def match_within_network(
        self, source: Item, candidates: Iterable[Item], network_id: str, deadline: Optional[Deadline] = None
    ) -> List[MatchResult]:
        if not network_id:
            return []
        return self.find_matches(source, candidates, ScopeConfig.network(network_id), deadline)

    def match_specific_enterprises(
        self, source: Item, candidates: Iterable[Item], enterprise_ids: Iterable[str], deadline: Optional[Deadline] = None
    ) -> List[MatchResult]:
        enterprise_ids = [e for e in enterprise_ids if e]
        if not enterprise_ids:
            return []
        return self.find_matches(source, candidates, ScopeConfig.enterprises(enterprise_ids), deadline)


def validate_source(source: Item) -> None:
    if source is None:
        raise InvalidItemError("item")
    if not source.item_id:
        raise InvalidItemError("item_id")
    if source.item_type is None:
        raise InvalidItemError("item_type", source.item_id)


def _value_of(item: Item) -> float:
    try:
        return float(item.estimated_value or 0.0)
    except (TypeError, ValueError):
        return 0.0

# --- Filtering & ranking helpers -------------------------------------------

def filter_by_min_score(results: Iterable[MatchResult], threshold: float) -> List[MatchResult]:
    return [r for r in results if r.composite_score >= threshold]


def filter_by_enterprise(results: Iterable[MatchResult], enterprise_id: str) -> List[MatchResult]:
    return [r for r in results if r.matched_enterprise_id == enterprise_id]


def filter_by_tier(results: Iterable[MatchResult], tier: RelationshipTier) -> List[MatchResult]:
    return [r for r in results if r.relationship_tier is tier]


def filter_cross_enterprise_only(results: Iterable[MatchResult]) -> List[MatchResult]:
    return [r for r in results if r.is_cross_enterprise]


def filter_by_score_level(results: Iterable[MatchResult], level: ScoreLevel) -> List[MatchResult]:
    return [r for r in results if r.score_level is level]


def sort_by_score(results: Iterable[MatchResult]) -> List[MatchResult]:
    return sorted(results, key=rank_key)


def sort_by_transfer_complexity(results: Iterable[MatchResult]) -> List[MatchResult]:
    """Simplest transfer first; score order within the same complexity."""
    return sorted(results, key=lambda r: (r.transfer_complexity.level,) + rank_key(r))


def top_matches(results: Iterable[MatchResult], limit: int) -> List[MatchResult]:
    if limit <= 0:
        return []
    return sorted(results, key=rank_key)[:limit]


__all__ = [
    "MatchResult",
    "MatchRanker",
    "rank_key",
    "validate_source",
    "filter_by_min_score",
    "filter_by_enterprise",
    "filter_by_tier",
    "filter_cross_enterprise_only",
    "filter_by_score_level",
    "sort_by_score",
    "sort_by_transfer_complexity",
    "top_matches",
]
