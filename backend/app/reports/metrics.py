from __future__ import annotations

import math
import operator
from collections.abc import Callable, Iterable, Sequence
from typing import NamedTuple

EXCELLENT = "excellent"
GOOD = "good"
FAIR = "fair"
POOR = "poor"

CURRENCY_SYMBOLS = {"RUB": "₽", "USD": "$", "EUR": "€"}


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round1(value: float) -> float:
    """One decimal place, halves rounded up."""
    return math.floor(value * 10 + 0.5) / 10


def percent(part: float, whole: float) -> float:
    if whole == 0:
        return 0.0
    return part / whole * 100


def win_rate(won: int, total: int) -> float:
    return percent(won, total)


def average(total: float, count: int) -> int:
    if count == 0:
        return 0
    return round_half_up(total / count)


def compared_to(value: float, baseline: float) -> float:
    """Signed percentage difference from baseline, one decimal."""
    if baseline <= 0:
        return 0.0
    return round1((value - baseline) / baseline * 100)


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def coefficient_of_variation(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    if avg == 0:
        return 0.0
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / avg * 100


class Band(NamedTuple):
    test: Callable[[float, float], bool]
    threshold: float
    score: int
    status: str


def pick_band(value: float, bands: Iterable[Band], default: tuple[int, str]) -> tuple[int, str]:
    """First matching band wins."""
    for band in bands:
        if band.test(value, band.threshold):
            return band.score, band.status
    return default


SAVINGS_BANDS = (
    Band(operator.ge, 20, 100, EXCELLENT),
    Band(operator.ge, 10, 75, GOOD),
    Band(operator.ge, 5, 50, FAIR),
    Band(operator.gt, 0, 25, POOR),
)

BUDGET_BANDS = (
    Band(operator.ge, 90, 100, EXCELLENT),
    Band(operator.ge, 70, 75, GOOD),
    Band(operator.ge, 50, 50, FAIR),
)

DEBT_BANDS = (
    Band(operator.eq, 0, 100, EXCELLENT),
    Band(operator.lt, 10, 85, GOOD),
    Band(operator.lt, 25, 60, FAIR),
)

STABILITY_BANDS = (
    Band(operator.lt, 15, 100, EXCELLENT),
    Band(operator.lt, 30, 75, GOOD),
    Band(operator.lt, 50, 50, FAIR),
)


def grade_for(score: float) -> str:
    if score >= 80:
        return EXCELLENT
    if score >= 60:
        return GOOD
    if score >= 40:
        return FAIR
    return POOR


def score_color(score: float) -> str:
    if score >= 80:
        return "#10b981"
    if score >= 60:
        return "#3b82f6"
    if score >= 40:
        return "#f59e0b"
    return "#dc2626"


def format_money(minor_units: int, currency: str = "RUB") -> str:
    """Render minor units as whole currency units for display."""
    major = minor_units / 100
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{major:,.0f}".replace(",", " ") + f" {symbol}"
