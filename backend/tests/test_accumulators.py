"""Tests for grouping accumulators."""

from datetime import datetime, timedelta, timezone

from app.reports.accumulators import Accumulator, GroupTotals, elapsed_days, group_amounts, month_key


class TestElapsedDays:
    def test_whole_days(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert elapsed_days(start, start + timedelta(days=4)) == 4

    def test_partial_day_rounds_up(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert elapsed_days(start, start + timedelta(milliseconds=1)) == 1

    def test_same_instant_is_zero(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert elapsed_days(start, start) == 0


class TestAccumulator:
    def test_missing_key_gets_no_bucket(self):
        acc = Accumulator()
        assert acc.bucket(None) is None
        assert list(acc.items()) == []

    def test_bucket_created_once(self):
        acc = Accumulator()
        first = acc.bucket("a", lambda: GroupTotals(name="A"))
        first.count += 1
        again = acc.bucket("a", lambda: GroupTotals(name="other"))
        assert again is first
        assert again.name == "A"
        assert again.count == 1

    def test_first_seen_order(self):
        acc = Accumulator()
        for key in ("b", "a", "c", "a"):
            acc.bucket(key)
        assert [k for k, _ in acc.items()] == ["b", "a", "c"]


def test_add_days_tracks_min_and_max():
    totals = GroupTotals()
    for days in (5, 2, 9):
        totals.add_days(days)
    assert totals.total_days == 16
    assert totals.min_days == 2
    assert totals.max_days == 9


def test_group_amounts_skips_keyless_items():
    items = [("x", 10), (None, 99), ("y", 5), ("x", 1)]
    totals = group_amounts(items, key=lambda i: i[0], amount=lambda i: i[1])
    assert totals == {"x": 11, "y": 5}


def test_month_key_is_zero_padded():
    assert month_key(datetime(2026, 3, 9)) == "2026-03"
