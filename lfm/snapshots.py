"""Immutable in-memory implementations of the collaborator interfaces.

Callers resolve the directory and trust data once (from whatever store they
use) and pass these read-only snapshots into each matching call, so the
engine itself never caches or mutates lookup state.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from .interface import DirectoryResolver, ItemStore, TrustLookup
from .match.candidate_selector import CandidateSelector
from .match.scope import ScopeConfig
from .models import Item


class DirectorySnapshot(DirectoryResolver):
    """Organization -> enterprise and enterprise -> network maps."""

    def __init__(
        self,
        organizations: Mapping[str, str] | None = None,
        networks: Mapping[str, Optional[str]] | None = None,
    ):
        self._organizations = MappingProxyType(dict(organizations or {}))
        self._networks = MappingProxyType(dict(networks or {}))

    def enterprise_of(self, organization_id: str) -> Optional[str]:
        return self._organizations.get(organization_id)

    def network_of(self, enterprise_id: str) -> Optional[str]:
        return self._networks.get(enterprise_id)


class TrustSnapshot(TrustLookup):
    """Trust scores by user id; unknown users get the neutral default."""

    def __init__(self, scores: Mapping[str, float] | None = None, default: float = 50.0):
        self._scores = MappingProxyType(dict(scores or {}))
        self.default = default

    def score_of(self, user_id: str) -> float:
        return float(self._scores.get(user_id, self.default))


class ItemSnapshot(ItemStore):
    """Fixed item list filtered by scope with the help of a directory."""

    def __init__(self, items: Iterable[Item], directory: Optional[DirectoryResolver] = None):
        self._items: Tuple[Item, ...] = tuple(items)
        self.directory = directory

    def find_candidates(self, scope: ScopeConfig) -> List[Item]:
        return CandidateSelector(self.directory).restrict_to_scope(self._items, scope)

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["DirectorySnapshot", "TrustSnapshot", "ItemSnapshot"]
