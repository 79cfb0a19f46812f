"""Relationship tier between the custodians of two items.

The tier is resolved from organization and enterprise identifiers and, for
items in different enterprises, from the enterprise -> network directory.
Directory failures resolve to the most conservative tier.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Optional

from ..interface import DirectoryResolver
from ..models import Item

logger = logging.getLogger(__name__)


class RelationshipTier(str, Enum):
    """Closed set of custodian relationships, most specific first."""
    SAME_ORGANIZATION = "SAME_ORGANIZATION"
    SAME_ENTERPRISE = "SAME_ENTERPRISE"
    SAME_NETWORK = "SAME_NETWORK"
    CROSS_NETWORK = "CROSS_NETWORK"

    @property
    def specificity(self) -> int:
        """3 for SAME_ORGANIZATION down to 0 for CROSS_NETWORK."""
        return _SPECIFICITY[self]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def priority_multiplier(self) -> float:
        return _PRIORITY[self]

    @property
    def is_cross_enterprise(self) -> bool:
        return self in (RelationshipTier.SAME_NETWORK, RelationshipTier.CROSS_NETWORK)


_SPECIFICITY = {
    RelationshipTier.SAME_ORGANIZATION: 3,
    RelationshipTier.SAME_ENTERPRISE: 2,
    RelationshipTier.SAME_NETWORK: 1,
    RelationshipTier.CROSS_NETWORK: 0,
}

_PRIORITY = {
    RelationshipTier.SAME_ORGANIZATION: 1.0,
    RelationshipTier.SAME_ENTERPRISE: 0.9,
    RelationshipTier.SAME_NETWORK: 0.7,
    RelationshipTier.CROSS_NETWORK: 0.5,
}


def enterprise_of(item: Item, directory: Optional[DirectoryResolver]) -> Optional[str]:
    """Enterprise id of an item, falling back to the directory via its organization."""
    if item.enterprise_id:
        return item.enterprise_id
    if directory is None or not item.organization_id:
        return None
    try:
        return directory.enterprise_of(item.organization_id)
    except Exception as e:
        logger.warning(f"Enterprise lookup failed for organization {item.organization_id}: {e}")
        return None


def network_of(enterprise_id: Optional[str], directory: Optional[DirectoryResolver]) -> Optional[str]:
    """Network id of an enterprise; None when unknown or the lookup fails."""
    if enterprise_id is None or directory is None:
        return None
    try:
        return directory.network_of(enterprise_id)
    except Exception as e:
        logger.warning(f"Network lookup failed for enterprise {enterprise_id}: {e}")
        return None


def resolve_relationship(source: Item, candidate: Item, directory: Optional[DirectoryResolver]) -> RelationshipTier:
    """Resolve the relationship tier, evaluated from most to least specific."""
    if source.organization_id and source.organization_id == candidate.organization_id:
        return RelationshipTier.SAME_ORGANIZATION

    source_ent = enterprise_of(source, directory)
    candidate_ent = enterprise_of(candidate, directory)
    if source_ent and source_ent == candidate_ent:
        return RelationshipTier.SAME_ENTERPRISE

    source_net = network_of(source_ent, directory)
    candidate_net = network_of(candidate_ent, directory)
    if source_net and source_net == candidate_net:
        return RelationshipTier.SAME_NETWORK

    return RelationshipTier.CROSS_NETWORK


__all__ = ["RelationshipTier", "resolve_relationship", "enterprise_of", "network_of"]
