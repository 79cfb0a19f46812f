"""Matching package: similarity scoring, relationship tiers, composition and ranking."""

from .scoring import (
    ScoringConfig,
    ScoreBreakdown,
    CandidateEvaluation,
    evaluate_pair,
    evaluate_against_candidates,
)
from .relationship import RelationshipTier, resolve_relationship
from .composition import (
    TransferComplexity,
    ScoreLevel,
    Composition,
    compose_score,
    classify_transfer,
    average_trust,
)
from .scope import ScopeKind, ScopeConfig
from .candidate_selector import CandidateSelector
from .ranker import MatchResult, MatchRanker

__all__ = [
    "ScoringConfig",
    "ScoreBreakdown",
    "CandidateEvaluation",
    "evaluate_pair",
    "evaluate_against_candidates",
    "RelationshipTier",
    "resolve_relationship",
    "TransferComplexity",
    "ScoreLevel",
    "Composition",
    "compose_score",
    "classify_transfer",
    "average_trust",
    "ScopeKind",
    "ScopeConfig",
    "CandidateSelector",
    "MatchResult",
    "MatchRanker",
]
