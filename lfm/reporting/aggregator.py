"""Batch match reporting across a scope.

Runs the MatchRanker for every open item in a scope and rolls the results up
into counts, an average score, a relationship-tier distribution and a top-N
list. The candidate pool is fetched once per call and bucketed by item type.
"""

from __future__ import annotations
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..config_types import ReportingConfig
from ..errors import InvalidItemError
from ..interface import ItemStore
from ..match.candidate_selector import CandidateSelector
from ..match.ranker import MatchRanker, MatchResult, rank_key
from ..match.relationship import RelationshipTier
from ..match.scope import ScopeConfig
from ..models import Item, ItemType
from ..utils.deadline import Deadline
from ..utils.logging_helpers import log_progress, format_summary
from .formatting import format_report_summary, summary_row

logger = logging.getLogger(__name__)


def _empty_distribution() -> Dict[RelationshipTier, int]:
    return {tier: 0 for tier in RelationshipTier}


@dataclass
class MatchReport:
    """Results of a report run over one scope."""
    scope_id: str
    scope_name: Optional[str] = None
    generated_at: Optional[datetime] = None
    items_analyzed: int = 0
    matches_found: int = 0
    same_enterprise_matches: int = 0
    cross_enterprise_matches: int = 0
    items_with_matches: int = 0
    items_without_matches: int = 0
    average_score: float = 0.0
    top_matches: List[MatchResult] = field(default_factory=list)
    tier_distribution: Dict[RelationshipTier, int] = field(default_factory=_empty_distribution)
    truncated: bool = False

    def summary(self) -> str:
        return format_report_summary(self)

    def summary_row(self) -> List[Any]:
        return summary_row(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scopeId": self.scope_id,
            "scopeName": self.scope_name,
            "generatedAt": self.generated_at.isoformat() if self.generated_at else None,
            "itemsAnalyzed": self.items_analyzed,
            "matchesFound": self.matches_found,
            "sameEnterpriseMatches": self.same_enterprise_matches,
            "crossEnterpriseMatches": self.cross_enterprise_matches,
            "itemsWithMatches": self.items_with_matches,
            "itemsWithoutMatches": self.items_without_matches,
            "averageScore": round(self.average_score, 4),
            "topMatches": [m.to_dict() for m in self.top_matches],
            "tierDistribution": {tier.value: count for tier, count in self.tier_distribution.items()},
            "truncated": self.truncated,
        }


class ReportAggregator:
    """Run the ranker over many items and aggregate the outcome.

    Example usage:
        aggregator = ReportAggregator(store, MatchRanker(directory, trust))
        report = aggregator.generate_report(ScopeConfig.enterprise("ent-university"))
        print(report.summary())
    """

    def __init__(
        self,
        store: ItemStore,
        ranker: MatchRanker,
        reporting_config: Optional[ReportingConfig] = None,
    ):
        self.store = store
        self.ranker = ranker
        self.config = reporting_config or ReportingConfig()
        self.selector = CandidateSelector(ranker.directory)

    # --- reports ----------------------------------------------------------

    def generate_report(self, scope: ScopeConfig, deadline: Optional[Deadline] = None) -> MatchReport:
        """Match every open item in ``scope`` against the whole system and summarize.

        An empty scope yields a zero-valued report rather than an error.
        """
        start = time.time()
        report = MatchReport(
            scope_id=scope.scope_id,
            scope_name=scope.display_name,
            generated_at=datetime.now(timezone.utc),
        )

        sources = self._open_items(scope)
        if not sources:
            logger.info(f"No open items in scope {scope.scope_id}; empty report")
            return report

        total_score = 0.0
        best_per_item: List[MatchResult] = []

        for source, matches in self._scan(sources, deadline):
            report.items_analyzed += 1
            if not matches:
                continue
            report.matches_found += len(matches)
            for match in matches:
                total_score += match.composite_score
                if match.is_cross_enterprise:
                    report.cross_enterprise_matches += 1
                else:
                    report.same_enterprise_matches += 1
            best_per_item.append(matches[0])

        report.truncated = report.items_analyzed < len(sources)
        report.items_with_matches = len(best_per_item)
        report.items_without_matches = report.items_analyzed - report.items_with_matches
        report.average_score = total_score / report.matches_found if report.matches_found else 0.0

        best_per_item.sort(key=rank_key)
        report.top_matches = best_per_item[: self.config.top_matches]
        for match in best_per_item:
            report.tier_distribution[match.relationship_tier] += 1

        logger.info(
            format_summary(
                analyzed=report.items_analyzed,
                matched=report.items_with_matches,
                unmatched=report.items_without_matches,
                duration_seconds=time.time() - start,
                scope_name=report.scope_name or report.scope_id,
            )
        )
        return report

    def find_best_matches_across_system(self, limit: int, deadline: Optional[Deadline] = None) -> List[MatchResult]:
        """Best match for each of a bounded sample of open LOST items, top ``limit`` overall.

        Intended for dashboards: only the first ``system_sample_size`` open
        lost items are scanned.
        """
        if limit <= 0:
            return []
        pool = self.store.find_candidates(ScopeConfig.system())
        sample = [i for i in pool if i.is_open and i.item_type is ItemType.LOST]
        sample = sample[: self.config.system_sample_size]

        best: List[MatchResult] = []
        for _, matches in self._scan(sample, deadline, pool=pool):
            if matches:
                best.append(matches[0])
        best.sort(key=rank_key)
        return best[:limit]

    def find_all_potential_matches(self, scope: ScopeConfig, deadline: Optional[Deadline] = None) -> Dict[str, List[MatchResult]]:
        """Ranked matches for every open item in scope that has at least one."""
        found: Dict[str, List[MatchResult]] = {}
        for source, matches in self._scan(self._open_items(scope), deadline):
            if matches:
                found[source.item_id] = matches  # type: ignore[index]
        logger.info(f"Found matches for {len(found)} items in scope {scope.scope_id}")
        return found

    def find_unmatched_items(self, scope: ScopeConfig, deadline: Optional[Deadline] = None) -> List[Item]:
        """Open items in scope without any match anywhere in the system."""
        return [source for source, matches in self._scan(self._open_items(scope), deadline) if not matches]

    # --- internals --------------------------------------------------------

    def _open_items(self, scope: ScopeConfig) -> List[Item]:
        return [item for item in self.store.find_candidates(scope) if item.is_open]

    def _scan(
        self,
        sources: List[Item],
        deadline: Optional[Deadline],
        pool: Optional[List[Item]] = None,
    ) -> Iterator[Tuple[Item, List[MatchResult]]]:
        """Yield (source, ranked matches) for each source until the deadline fires."""
        if not sources:
            return
        if pool is None:
            pool = self.store.find_candidates(ScopeConfig.system())
        buckets = self.selector.bucket_by_type(pool)

        start = time.time()
        processed = 0
        matched = 0
        last_progress_log = 0
        interval = self.ranker.matching_config.progress_interval

        for source in sources:
            if deadline is not None and deadline.expired():
                logger.warning(f"Report scan stopped after {processed}/{len(sources)} items (deadline reached)")
                return
            processed += 1
            matches = self._match_one(source, buckets, deadline)
            if matches:
                matched += 1
            yield source, matches

            if self.config.progress_enabled and processed - last_progress_log >= interval:
                log_progress(
                    processed=processed,
                    total=len(sources),
                    matched=matched,
                    unmatched=processed - matched,
                    elapsed_seconds=time.time() - start,
                    item_name="items",
                )
                last_progress_log = processed

    def _match_one(
        self,
        source: Item,
        buckets: Dict[ItemType, List[Item]],
        deadline: Optional[Deadline],
    ) -> List[MatchResult]:
        opposite = ItemType.FOUND if source.item_type is ItemType.LOST else ItemType.LOST
        candidates = buckets.get(opposite, []) if source.item_type is not None else []
        try:
            return self.ranker.find_matches(source, candidates, ScopeConfig.system(), deadline)
        except InvalidItemError as e:
            logger.warning(f"Skipping item in batch: {e}")
            return []


__all__ = ["MatchReport", "ReportAggregator"]
