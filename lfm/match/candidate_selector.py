"""Candidate selection utilities for the matching engine.

This module provides helper functions to filter and pre-score candidate
items before full similarity scoring. Type/status eligibility is a hard rule;
scope restriction narrows the pool to one organization, enterprise, network
or enterprise list; token pre-scoring is an optional cap for very large pools.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple, Iterable

from rapidfuzz import fuzz

from ..interface import DirectoryResolver
from ..models import Item, ItemStatus, ItemType
from ..utils.normalization import normalize_text
from .relationship import enterprise_of, network_of
from .scope import ScopeConfig, ScopeKind

logger = logging.getLogger(__name__)


class CandidateSelector:
    """Helper for selecting and pre-scoring candidate items for matching.

    It provides:

    1. Eligibility filtering (opposite type, not CLAIMED, not the source itself)
    2. Scope restriction using the organization/enterprise/network directory
    3. Token-based pre-scoring to cap very large pools

    Example usage:
        selector = CandidateSelector(directory)

        candidates = selector.restrict_to_scope(all_items, ScopeConfig.network("net-1"))
        candidates = selector.eligible(lost_item, candidates)
        top_candidates = selector.token_prescore(lost_item, candidates, max_candidates=500)
    """

    def __init__(self, directory: Optional[DirectoryResolver] = None):
        self.directory = directory

    @staticmethod
    def is_eligible(source: Item, candidate: Item) -> bool:
        """Lost items only match found items (and vice versa); claimed items never match."""
        if candidate.item_type is None or candidate.item_type == source.item_type:
            return False
        if candidate.status == ItemStatus.CLAIMED:
            return False
        if candidate.item_id is not None and candidate.item_id == source.item_id:
            return False
        return True

    def eligible(self, source: Item, candidates: Iterable[Item]) -> List[Item]:
        return [c for c in candidates if self.is_eligible(source, c)]

    def in_scope(self, item: Item, scope: ScopeConfig) -> bool:
        """Whether an item belongs to a scope. Unresolvable items fall outside non-system scopes."""
        if scope.kind is ScopeKind.SYSTEM:
            return True
        if scope.kind is ScopeKind.ORGANIZATION:
            return item.organization_id is not None and item.organization_id in scope.ids
        enterprise_id = enterprise_of(item, self.directory)
        if scope.kind in (ScopeKind.ENTERPRISE, ScopeKind.ENTERPRISES):
            return enterprise_id is not None and enterprise_id in scope.ids
        if scope.kind is ScopeKind.NETWORK:
            network_id = network_of(enterprise_id, self.directory)
            return network_id is not None and network_id in scope.ids
        raise ValueError(f"Unknown scope kind: {scope.kind!r}")

    def restrict_to_scope(self, items: Iterable[Item], scope: ScopeConfig) -> List[Item]:
        if scope.kind is ScopeKind.SYSTEM:
            return list(items)
        return [item for item in items if self.in_scope(item, scope)]

    @staticmethod
    def bucket_by_type(items: Iterable[Item]) -> Dict[ItemType, List[Item]]:
        """Pre-bucket a pool by item type, dropping CLAIMED items.

        Batch callers build the buckets once and hand each source only the
        opposite-type bucket, halving the pairwise scan.
        """
        buckets: Dict[ItemType, List[Item]] = {ItemType.LOST: [], ItemType.FOUND: []}
        for item in items:
            if item.item_type is None or item.status == ItemStatus.CLAIMED:
                continue
            buckets[item.item_type].append(item)
        return buckets

    def token_prescore(
        self,
        source: Item,
        candidates: List[Item],
        max_candidates: Optional[int] = None
    ) -> List[Item]:
        """Pre-score candidates with rapidfuzz and return the top N.

        Uses ``token_set_ratio`` over title, category and keywords to quickly
        estimate match quality. If the pool is already within the cap (or no
        cap is set) it is returned unchanged, preserving order.

        Args:
            source: Item being matched
            candidates: Eligible candidate items
            max_candidates: Maximum number of candidates to return

        Returns:
            List of top-scoring candidates, highest pre-score first
        """
        if not max_candidates or len(candidates) <= max_candidates:
            return candidates

        source_text = self._prescore_text(source)
        scored: List[Tuple[float, int, Item]] = []
        for index, candidate in enumerate(candidates):
            similarity = fuzz.token_set_ratio(source_text, self._prescore_text(candidate))
            scored.append((similarity, index, candidate))

        # Stable on ties: input order
        scored.sort(key=lambda x: (-x[0], x[1]))
        logger.debug(
            f"Pre-scored {len(candidates)} candidates for item {source.item_id}, keeping {max_candidates}"
        )
        return [c for _, _, c in scored[:max_candidates]]

    @staticmethod
    def _prescore_text(item: Item) -> str:
        parts = [item.title or "", str(item.category or "")]
        parts.extend(sorted(item.keywords))
        return normalize_text(" ".join(parts))


__all__ = ["CandidateSelector"]
