"""Reward progress tests: segment position between neighbouring tiers."""

from dataclasses import dataclass

import pytest

from photoquest.quests.progress import compute_reward_progress


@dataclass
class Tier:
    points_required: int
    icon_url: str | None = None


TIERS = [Tier(100), Tier(500), Tier(1000)]


class TestRewardProgress:
    def test_no_tiers_shows_raw_total(self):
        result = compute_reward_progress(42, [])
        assert result["percent"] == 0.0
        assert result["label"] == "42"
        assert result["prev"] is None
        assert result["next"] is None

    def test_zero_points_first_segment(self):
        result = compute_reward_progress(0, TIERS)
        assert result["percent"] == 0.0
        assert result["prev"] is None
        assert result["next"].points_required == 100
        assert result["label"] == "0/100"

    def test_halfway_to_first_tier(self):
        result = compute_reward_progress(50, TIERS)
        assert result["percent"] == pytest.approx(50.0)

    def test_crossing_threshold_resets_segment(self):
        """Exactly reaching a tier starts the next segment at 0%."""
        result = compute_reward_progress(100, TIERS)
        assert result["prev"].points_required == 100
        assert result["next"].points_required == 500
        assert result["percent"] == 0.0
        assert result["label"] == "100/500"

    def test_inside_second_segment(self):
        result = compute_reward_progress(300, TIERS)
        assert result["percent"] == pytest.approx(50.0)

    def test_last_threshold_reached_is_full(self):
        result = compute_reward_progress(1000, TIERS)
        assert result["percent"] == 100.0
        assert result["prev"] is result["next"]
        assert result["next"].points_required == 1000

    def test_beyond_last_tier(self):
        result = compute_reward_progress(1500, TIERS)
        assert result["percent"] == 100.0
        assert result["prev"].points_required == 1000
        assert result["next"].points_required == 1000
        assert result["label"] == "1000/1000"
        assert result["total"] == 1500

    def test_unsorted_tiers_are_ordered(self):
        result = compute_reward_progress(300, [Tier(1000), Tier(100), Tier(500)])
        assert result["prev"].points_required == 100
        assert result["next"].points_required == 500

    def test_equal_thresholds_count_as_full(self):
        result = compute_reward_progress(250, [Tier(200), Tier(200)])
        assert result["percent"] == 100.0

    def test_single_zero_tier(self):
        result = compute_reward_progress(0, [Tier(0)])
        assert result["percent"] == 100.0

    def test_percent_stays_in_bounds(self):
        for total in range(0, 1200, 7):
            percent = compute_reward_progress(total, TIERS)["percent"]
            assert 0.0 <= percent <= 100.0

    def test_percent_monotonic_within_segment(self):
        """Inside one segment the bar only moves forward."""
        previous = -1.0
        for total in range(100, 500):
            percent = compute_reward_progress(total, TIERS)["percent"]
            assert percent >= previous
            previous = percent
