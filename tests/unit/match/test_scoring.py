"""Unit tests for the weighted similarity scorer."""
from datetime import timedelta

import pytest

from lfm.match.scoring import (
    ScoringConfig,
    category_match,
    description_similarity,
    evaluate_against_candidates,
    evaluate_pair,
    keyword_similarity,
    location_similarity,
    time_proximity,
    title_similarity,
)
from lfm.models import Item, ItemType, Location

from tests.mocks.fixtures import DAY0, SNELL_101, make_item

CFG = ScoringConfig()


class TestTitleSimilarity:

    def test_exact_ignores_case_and_whitespace(self):
        assert title_similarity("  Blue  Backpack ", "blue backpack") == 1.0

    def test_containment(self):
        assert title_similarity("Water Bottle", "Blue water bottle") == pytest.approx(0.9)

    def test_symmetric(self):
        a, b = "Black iPhone 13", "iphone 13 pro max black case"
        assert title_similarity(a, b) == title_similarity(b, a)

    def test_filler_words_ignored(self):
        """'my lost wallet' and 'found wallet' share the only content word."""
        assert title_similarity("My lost wallet", "found wallet") == 1.0

    def test_filler_only_titles_score_zero(self):
        assert title_similarity("my lost", "the found") == 0.0

    def test_partial_word_bonus(self):
        # no shared words, one containment pair (iphone / iphone17)
        assert title_similarity("iphone charger", "iphone17 cable") == pytest.approx(0.1)

    def test_partial_bonus_is_capped(self):
        # jaccard 1/4, four containment pairs capped at +0.3
        assert title_similarity("pen pens penny", "pen pencil") == pytest.approx(0.55)

    def test_missing_title(self):
        assert title_similarity(None, "wallet") == 0.0
        assert title_similarity("", "") == 0.0


class TestOtherFactors:

    def test_description_containment(self):
        assert description_similarity("black leather", "Black leather wallet with cards") == pytest.approx(0.8)

    def test_description_jaccard_keeps_all_words(self):
        assert description_similarity("the red one", "the blue one") == pytest.approx(0.5)

    def test_keywords_exact_jaccard(self):
        assert keyword_similarity({"nike", "blue"}, {"nike", "sport"}) == pytest.approx(1 / 3)
        assert keyword_similarity({"nike", "blue"}, {"Nike ", "sport"}) == 0.0

    def test_keywords_fold_case(self):
        cfg = ScoringConfig(fold_case=True)
        assert keyword_similarity({"nike", "blue"}, {"Nike ", "sport"}, cfg) == pytest.approx(1 / 3)

    def test_category_exact_by_default(self):
        assert category_match("BAGS", "BAGS") == 1.0
        assert category_match("BAGS", "bags") == 0.0
        assert category_match(None, "BAGS") == 0.0
        assert category_match("BAGS", " bags", ScoringConfig(fold_case=True)) == 1.0

    def test_colour_and_brand_ignore_case(self):
        a = make_item("L1", primary_color="Blue", brand="NIKE")
        b = make_item("F1", ItemType.FOUND, primary_color="blue", brand="Nike")
        factors = evaluate_pair(a, b, CFG).factors
        assert factors["color"] == 1.0
        assert factors["brand"] == 1.0

    def test_keywords_empty(self):
        assert keyword_similarity(set(), {"nike"}) == 0.0
        assert keyword_similarity(None, None) == 0.0

    def test_location_same_room_and_building(self):
        assert location_similarity(SNELL_101, Location("Snell Library", "101")) == 1.0
        assert location_similarity(SNELL_101, Location("Snell Library", "204")) == 0.8
        assert location_similarity(Location("Snell Library"), Location("Snell Library")) == 0.8

    @pytest.mark.parametrize("lat_offset,expected", [
        (0.0005, 0.6),   # ~0.06 km
        (0.003, 0.3),    # ~0.33 km
        (0.008, 0.1),    # ~0.89 km
        (0.02, 0.0),     # ~2.2 km
    ])
    def test_location_distance_bands(self, lat_offset, expected):
        other = Location("Curry Center", None, SNELL_101.latitude + lat_offset, SNELL_101.longitude)
        assert location_similarity(SNELL_101, other) == expected

    def test_location_missing_coordinates(self):
        assert location_similarity(SNELL_101, Location("Curry Center")) == 0.0
        assert location_similarity(None, SNELL_101) == 0.0

    @pytest.mark.parametrize("hours,expected", [
        (0, 1.0), (23, 1.0), (24, 0.7), (71, 0.7), (72, 0.4),
        (167, 0.4), (168, 0.2), (335, 0.2), (336, 0.0),
    ])
    def test_time_bands(self, hours, expected):
        assert time_proximity(DAY0, DAY0 + timedelta(hours=hours)) == expected

    def test_time_uses_whole_hours(self):
        assert time_proximity(DAY0, DAY0 + timedelta(hours=23, minutes=59)) == 1.0

    def test_time_missing_date(self):
        assert time_proximity(None, DAY0) == 0.0


class TestEvaluatePair:

    def test_identical_items_without_colour_and_brand(self):
        item = make_item("L1", description="Laptop inside", keywords={"nike", "blue"})
        other = make_item("F1", ItemType.FOUND, description="Laptop inside", keywords={"nike", "blue"})
        assert evaluate_pair(item, other, CFG).raw_score == pytest.approx(0.95)

    def test_identical_items_with_every_factor(self):
        extra = dict(description="Laptop inside", keywords={"nike"}, primary_color="Blue", brand="Nike")
        item = make_item("L1", **extra)
        other = make_item("F1", ItemType.FOUND, **{**extra, "primary_color": "blue"})
        breakdown = evaluate_pair(item, other, CFG)
        assert breakdown.raw_score == pytest.approx(1.0)
        assert breakdown.factors["color"] == 1.0
        assert "brand_exact" in breakdown.notes

    def test_all_null_items_score_zero(self):
        breakdown = evaluate_pair(Item("a", ItemType.LOST), Item("b", ItemType.FOUND), CFG)
        assert breakdown.raw_score == 0.0
        assert all(v == 0.0 for v in breakdown.factors.values())
        assert not breakdown.passes(CFG)

    def test_contributions_are_weighted_factors(self):
        breakdown = evaluate_pair(make_item("L1"), make_item("F1", ItemType.FOUND), CFG)
        for name, weight in CFG.weights().items():
            assert breakdown.contributions[name] == pytest.approx(breakdown.factors[name] * weight)
        assert breakdown.raw_score == pytest.approx(sum(breakdown.contributions.values()))

    def test_best_candidate_helper(self):
        source = make_item("L1")
        weak = make_item("F1", ItemType.FOUND, title="Umbrella", category="UMBRELLAS")
        strong = make_item("F2", ItemType.FOUND)
        best = evaluate_against_candidates(source, [weak, strong], CFG)
        assert best is not None and best.candidate_id == "F2"
        assert evaluate_against_candidates(source, [weak], CFG) is None


class TestScoringConfig:

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ScoringConfig(weight_title=0.5)

    def test_rebalanced_weights_accepted(self):
        cfg = ScoringConfig(weight_title=0.30, weight_category=0.25)
        assert sum(cfg.weights().values()) == pytest.approx(1.0)
