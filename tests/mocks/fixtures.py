from __future__ import annotations
from datetime import datetime
from typing import Any

import pytest

from lfm.match.ranker import MatchRanker
from lfm.models import Item, ItemStatus, ItemType, Location
from lfm.snapshots import DirectorySnapshot, TrustSnapshot

DAY0 = datetime(2026, 3, 2, 9, 0)

SNELL_101 = Location("Snell Library", "101", 42.3386, -71.0880)
PARK_STREET = Location("Park Street Station", None, 42.3564, -71.0624)
LOGAN_TERMINAL_B = Location("Logan Terminal B", None, 42.3656, -71.0096)

ORGANIZATIONS = {
    "org-neu-library": "ent-neu",
    "org-neu-security": "ent-neu",
    "org-mbta-park": "ent-mbta",
    "org-logan-t1": "ent-logan",
    "org-bpd": "ent-bpd",
}

NETWORKS = {
    "ent-neu": "net-boston",
    "ent-mbta": "net-boston",
    "ent-logan": "net-airports",
    "ent-bpd": None,
}

TRUST_SCORES = {
    "u-alice": 90.0,
    "u-bob": 90.0,
    "u-carol": 40.0,
    "u-erin": 85.0,
}


def make_item(item_id: str = "L1", item_type: ItemType = ItemType.LOST, **overrides: Any) -> Item:
    """Build a BAGS item reported at Snell Library on DAY0 unless overridden."""
    data: dict[str, Any] = {
        "status": ItemStatus.OPEN,
        "category": "BAGS",
        "title": "Blue Nike Backpack",
        "location": SNELL_101,
        "reported_date": DAY0,
        "estimated_value": 50.0,
        "organization_id": "org-neu-library",
        "enterprise_id": "ent-neu",
        "reporter_id": "u-alice",
    }
    data.update(overrides)
    return Item(item_id=item_id, item_type=item_type, **data)


@pytest.fixture
def directory():
    return DirectorySnapshot(ORGANIZATIONS, NETWORKS)


@pytest.fixture
def trust():
    return TrustSnapshot(TRUST_SCORES)


@pytest.fixture
def ranker(directory, trust):
    return MatchRanker(directory=directory, trust=trust)


@pytest.fixture
def lost_backpack():
    return make_item("L1", ItemType.LOST, primary_color="Blue")


@pytest.fixture
def found_backpack():
    return make_item("F1", ItemType.FOUND, title="Backpack blue nike", reporter_id="u-bob")
