"""Weekly quest window tests."""

from datetime import date, timedelta

from photoquest.quests.service import weekly_window_contains

TODAY = date(2026, 10, 19)


class TestWeeklyWindow:
    def test_open_window_contains_today(self):
        assert weekly_window_contains(TODAY - timedelta(days=1), TODAY + timedelta(days=1), TODAY)

    def test_bounds_are_inclusive(self):
        assert weekly_window_contains(TODAY, TODAY, TODAY)

    def test_ended_yesterday(self):
        assert not weekly_window_contains(TODAY - timedelta(days=7), TODAY - timedelta(days=1), TODAY)

    def test_starts_tomorrow(self):
        assert not weekly_window_contains(TODAY + timedelta(days=1), TODAY + timedelta(days=7), TODAY)

    def test_missing_bound_never_active(self):
        assert not weekly_window_contains(None, TODAY, TODAY)
        assert not weekly_window_contains(TODAY, None, TODAY)
        assert not weekly_window_contains(None, None, TODAY)
