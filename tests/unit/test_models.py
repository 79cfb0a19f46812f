"""Unit tests for the item domain model."""
from datetime import datetime

import pytest

from lfm.models import Item, ItemCategory, ItemStatus, ItemType, Location


def test_item_coerces_enum_strings():
    item = Item("L1", "lost", status="pending_claim", category=ItemCategory.BAGS, keywords=["nike", "blue"])

    assert item.item_type is ItemType.LOST
    assert item.status is ItemStatus.PENDING_CLAIM
    assert item.category == "BAGS"
    assert item.keywords == frozenset({"nike", "blue"})


@pytest.mark.parametrize("status,is_open", [
    (ItemStatus.OPEN, True),
    (ItemStatus.PENDING_CLAIM, True),
    (ItemStatus.VERIFIED, False),
    (ItemStatus.CLAIMED, False),
    (ItemStatus.CANCELLED, False),
    (ItemStatus.EXPIRED, False),
])
def test_open_statuses(status, is_open):
    assert Item("L1", ItemType.LOST, status=status).is_open is is_open


def test_from_dict_accepts_camel_case():
    item = Item.from_dict({
        "itemId": 42,
        "type": "found",
        "title": "Black iPhone",
        "keywords": ["apple", None],
        "location": {"building": "Snell Library", "roomNumber": "101", "latitude": 42.3, "longitude": -71.0},
        "reportedDate": "2026-03-02T09:00:00",
        "primaryColor": "Black",
        "estimatedValue": "899.99",
        "organizationId": "org-1",
        "enterpriseId": "ent-1",
        "reporterId": "u-1",
    })

    assert item.item_id == "42"
    assert item.item_type is ItemType.FOUND
    assert item.status is ItemStatus.OPEN
    assert item.keywords == frozenset({"apple"})
    assert item.location == Location("Snell Library", "101", 42.3, -71.0)
    assert item.reported_date == datetime(2026, 3, 2, 9, 0)
    assert item.estimated_value == pytest.approx(899.99)
    assert item.reporter_id == "u-1"


def test_from_dict_missing_fields():
    item = Item.from_dict({"item_id": "L1"})

    assert item.item_type is None
    assert item.location is None
    assert item.keywords == frozenset()
    assert item.estimated_value == 0.0


def test_to_dict_is_json_friendly():
    item = Item("L1", ItemType.LOST, keywords={"b", "a"}, reported_date=datetime(2026, 3, 2, 9, 0))
    data = item.to_dict()

    assert data["item_type"] == "LOST"
    assert data["status"] == "OPEN"
    assert data["keywords"] == ["a", "b"]
    assert data["reported_date"] == "2026-03-02T09:00:00"


class TestLocation:

    def test_distance_same_building(self):
        assert Location("Snell Library", "101").distance_km(Location("Snell Library", "202")) == 0.0

    def test_distance_scaled_degrees(self):
        a = Location("A", None, 42.0, -71.0)
        b = Location("B", None, 42.003, -71.004)
        assert a.distance_km(b) == pytest.approx(0.005 * 111.0)

    def test_distance_without_coordinates(self):
        assert Location("A", None, 42.0, -71.0).distance_km(Location("B")) is None
        assert not Location("B").has_coordinates

    def test_from_dict_empty(self):
        assert Location.from_dict(None) is None
        assert Location.from_dict({}) is None
