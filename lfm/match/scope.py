"""Matching scopes: which candidates are eligible and which minimum score applies."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Iterable

from ..config_types import MatchingConfig


class ScopeKind(str, Enum):
    SYSTEM = "SYSTEM"
    ORGANIZATION = "ORGANIZATION"
    ENTERPRISE = "ENTERPRISE"
    NETWORK = "NETWORK"
    ENTERPRISES = "ENTERPRISES"

    @property
    def is_cross_enterprise(self) -> bool:
        """Scopes that deliberately span several enterprises."""
        return self in (ScopeKind.NETWORK, ScopeKind.ENTERPRISES)

    @property
    def is_same_enterprise(self) -> bool:
        return self in (ScopeKind.ORGANIZATION, ScopeKind.ENTERPRISE)


@dataclass(frozen=True)
class ScopeConfig:
    """Scope of a matching or report call.

    ``ids`` holds the organization, enterprise or network id (one element) or
    the enterprise list for ``ENTERPRISES``. ``min_score`` overrides the
    threshold otherwise derived from the scope kind.
    """
    kind: ScopeKind = ScopeKind.SYSTEM
    ids: Tuple[str, ...] = ()
    min_score: Optional[float] = None
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.kind, ScopeKind):
            object.__setattr__(self, "kind", ScopeKind(str(self.kind).upper()))
        if not isinstance(self.ids, tuple):
            object.__setattr__(self, "ids", tuple(self.ids))
        if self.kind is not ScopeKind.SYSTEM and not self.ids:
            raise ValueError(f"Scope {self.kind.value} requires at least one id")
        if self.kind in (ScopeKind.ORGANIZATION, ScopeKind.ENTERPRISE, ScopeKind.NETWORK) and len(self.ids) != 1:
            raise ValueError(f"Scope {self.kind.value} takes exactly one id")
        if self.min_score is not None and not 0.0 <= self.min_score <= 1.0:
            raise ValueError(f"min_score must be within [0, 1] (got {self.min_score})")

    # --- constructors ------------------------------------------------------

    @classmethod
    def system(cls, min_score: Optional[float] = None) -> ScopeConfig:
        return cls(ScopeKind.SYSTEM, (), min_score)

    @classmethod
    def organization(cls, organization_id: str, min_score: Optional[float] = None) -> ScopeConfig:
        return cls(ScopeKind.ORGANIZATION, (organization_id,), min_score)

    @classmethod
    def enterprise(cls, enterprise_id: str, min_score: Optional[float] = None) -> ScopeConfig:
        return cls(ScopeKind.ENTERPRISE, (enterprise_id,), min_score)

    @classmethod
    def network(cls, network_id: str, min_score: Optional[float] = None) -> ScopeConfig:
        return cls(ScopeKind.NETWORK, (network_id,), min_score)

    @classmethod
    def enterprises(cls, enterprise_ids: Iterable[str], min_score: Optional[float] = None) -> ScopeConfig:
        return cls(ScopeKind.ENTERPRISES, tuple(enterprise_ids), min_score)

    # --- derived values ----------------------------------------------------

    @property
    def scope_id(self) -> str:
        if self.kind is ScopeKind.SYSTEM:
            return "system"
        return ",".join(self.ids)

    @property
    def display_name(self) -> str:
        return self.name or f"{self.kind.value.title()} {self.scope_id}"

    def threshold(self, matching: MatchingConfig) -> float:
        """Minimum composite score for results in this scope."""
        if self.min_score is not None:
            return self.min_score
        if self.kind.is_cross_enterprise:
            return matching.min_cross_enterprise_score
        if self.kind.is_same_enterprise:
            return matching.min_same_enterprise_score
        return matching.default_min_score


__all__ = ["ScopeKind", "ScopeConfig"]
