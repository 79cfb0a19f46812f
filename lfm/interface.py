from __future__ import annotations
"""Collaborator interfaces consumed by the matching engine.

The engine never talks to storage, the organization directory or the trust
ledger directly. Service-layer code passes implementations of these
interfaces; immutable in-memory snapshots live in :mod:`lfm.snapshots` and
test doubles in ``tests/mocks``.

Implementations must be read-only from the engine's point of view and, when
shared between threads, safe for concurrent reads.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

from .models import Item

if TYPE_CHECKING:  # pragma: no cover
    from .match.scope import ScopeConfig


class ItemStore(ABC):
    @abstractmethod
    def find_candidates(self, scope: ScopeConfig) -> List[Item]:
        """Return every item belonging to the given scope (any type or status)."""


class DirectoryResolver(ABC):
    @abstractmethod
    def enterprise_of(self, organization_id: str) -> Optional[str]:
        """Enterprise that owns an organization, or None if unknown."""

    @abstractmethod
    def network_of(self, enterprise_id: str) -> Optional[str]:
        """Network an enterprise belongs to, or None if it has none."""


class TrustLookup(ABC):
    @abstractmethod
    def score_of(self, user_id: str) -> float:
        """Trust score 0-100 for a reporter. May raise; callers substitute 50.0."""


__all__ = ["ItemStore", "DirectoryResolver", "TrustLookup"]
