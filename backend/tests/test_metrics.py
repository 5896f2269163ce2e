"""Tests for derived metric helpers."""

import pytest

from app.reports.metrics import (
    SAVINGS_BANDS,
    average,
    coefficient_of_variation,
    compared_to,
    format_money,
    grade_for,
    percent,
    pick_band,
    round1,
    round_half_up,
    score_color,
    win_rate,
)


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4

    def test_negative_half_rounds_toward_positive(self):
        assert round_half_up(-2.5) == -2

    def test_round1(self):
        assert round1(1.25) == 1.3
        assert round1(33.333) == 33.3


class TestZeroSafety:
    def test_percent_of_zero(self):
        assert percent(5, 0) == 0.0

    def test_win_rate_without_tenders(self):
        assert win_rate(0, 0) == 0.0

    def test_average_of_nothing(self):
        assert average(100, 0) == 0

    def test_compared_to_zero_baseline(self):
        assert compared_to(50, 0) == 0.0

    def test_variation_of_short_series(self):
        assert coefficient_of_variation([]) == 0.0
        assert coefficient_of_variation([100]) == 0.0


def test_win_rate():
    assert win_rate(3, 5) == pytest.approx(60.0)


def test_average_rounds_half_up():
    assert average(9, 2) == 5


def test_compared_to():
    assert compared_to(300, 200) == 50.0
    assert compared_to(100, 200) == -50.0


def test_coefficient_of_variation():
    assert coefficient_of_variation([100, 100, 100]) == 0.0
    assert coefficient_of_variation([50, 150]) == pytest.approx(50.0)


class TestBands:
    def test_first_matching_band_wins(self):
        assert pick_band(25, SAVINGS_BANDS, (0, "poor")) == (100, "excellent")
        assert pick_band(12, SAVINGS_BANDS, (0, "poor")) == (75, "good")

    def test_default_when_nothing_matches(self):
        assert pick_band(-5, SAVINGS_BANDS, (0, "poor")) == (0, "poor")

    @pytest.mark.parametrize(
        "score,grade,color",
        [(80, "excellent", "#10b981"), (79, "good", "#3b82f6"), (40, "fair", "#f59e0b"), (39, "poor", "#dc2626")],
    )
    def test_grade_and_color(self, score, grade, color):
        assert grade_for(score) == grade
        assert score_color(score) == color


def test_format_money_uses_major_units():
    assert format_money(123_456_700, "RUB") == "1 234 567 ₽"
    assert format_money(5_000, "GBP") == "50 GBP"
