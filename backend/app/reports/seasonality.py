"""Spending seasonality: by month, season, weekday and part of the month."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from app.finance.models import Direction
from app.reports.metrics import average, compared_to, format_money, mean, round_half_up
from app.reports.records import TransactionRecord
from app.reports.schemas import (
    CategoryAmount,
    DayOfMonthPattern,
    HeatmapData,
    MonthlyPattern,
    SeasonalityReport,
    SeasonPattern,
    WeekdayPattern,
)

UNCATEGORIZED = "Uncategorized"
TREND_THRESHOLD = 15
TOP_CATEGORIES = 3
PEAK_HOURS = 3
HEATMAP_CATEGORIES = 10

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
MONTH_ABBR = [name[:3] for name in MONTH_NAMES]
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

SEASONS = (
    ("winter", "Winter", [12, 1, 2], "Holidays, year-end bonuses, heating"),
    ("spring", "Spring", [3, 4, 5], "Renovation, wardrobe refresh"),
    ("summer", "Summer", [6, 7, 8], "Vacations, travel"),
    ("autumn", "Autumn", [9, 10, 11], "Back to school, preparing for winter"),
)
DAY_RANGES = (("1-10", 1, 10), ("11-20", 11, 20), ("21-31", 21, 31))


@dataclass
class _Bucket:
    total: int = 0
    count: int = 0
    years: set[int] = field(default_factory=set)
    categories: dict[str, int] = field(default_factory=dict)
    hours: dict[int, int] = field(default_factory=dict)

    def add(self, tx: TransactionRecord) -> None:
        self.total += tx.magnitude
        self.count += 1


def _category(tx: TransactionRecord) -> str:
    return tx.category_name or UNCATEGORIZED


def _weekday(tx: TransactionRecord) -> int:
    # 0 = Sunday
    return tx.occurred_at.isoweekday() % 7


def _top(counts: dict, limit: int) -> list:
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]


def _trend(value: float, baseline: float) -> str:
    if baseline <= 0:
        return "normal"
    deviation = (value - baseline) / baseline * 100
    if deviation > TREND_THRESHOLD:
        return "high"
    if deviation < -TREND_THRESHOLD:
        return "low"
    return "normal"


def analyze_seasonality(transactions: Iterable[TransactionRecord]) -> SeasonalityReport:
    expenses = [t for t in transactions if t.direction == Direction.EXPENSE]
    if not expenses:
        return SeasonalityReport()

    by_month = monthly_patterns(expenses)
    by_season = season_patterns(expenses)
    by_weekday = weekday_patterns(expenses)
    by_day_of_month = day_of_month_patterns(expenses)

    return SeasonalityReport(
        by_month=by_month,
        by_season=by_season,
        by_weekday=by_weekday,
        by_day_of_month=by_day_of_month,
        heatmap_data=heatmap(expenses),
        insights=_insights(by_month, by_season, by_weekday),
        recommendations=_recommendations(by_month, by_season, by_day_of_month),
    )


def monthly_patterns(expenses: Sequence[TransactionRecord]) -> list[MonthlyPattern]:
    buckets: dict[int, _Bucket] = {}
    for tx in expenses:
        bucket = buckets.setdefault(tx.occurred_at.month, _Bucket())
        bucket.add(tx)
        bucket.years.add(tx.occurred_at.year)
        name = _category(tx)
        bucket.categories[name] = bucket.categories.get(name, 0) + tx.magnitude

    # A month seen in two different years is averaged over both.
    averages = {month: average(b.total, len(b.years)) for month, b in buckets.items()}
    baseline = mean(list(averages.values()))

    return [
        MonthlyPattern(
            month=month,
            month_name=MONTH_NAMES[month - 1],
            average_spending=averages[month],
            transaction_count=buckets[month].count,
            compared_to_average=compared_to(averages[month], baseline),
            trend=_trend(averages[month], baseline),
            top_categories=[
                CategoryAmount(category=name, amount=amount)
                for name, amount in _top(buckets[month].categories, TOP_CATEGORIES)
            ],
        )
        for month in sorted(buckets)
    ]


def season_patterns(expenses: Sequence[TransactionRecord]) -> list[SeasonPattern]:
    rows = []
    for season, name, months, characteristics in SEASONS:
        bucket = _Bucket()
        for tx in expenses:
            if tx.occurred_at.month in months:
                bucket.add(tx)
        rows.append((season, name, months, characteristics, bucket))

    baseline = mean([average(b.total, b.count) for *_, b in rows])
    return [
        SeasonPattern(
            season=season,
            season_name=name,
            months=months,
            average_spending=average(bucket.total, bucket.count),
            transaction_count=bucket.count,
            compared_to_average=compared_to(average(bucket.total, bucket.count), baseline),
            characteristics=characteristics,
        )
        for season, name, months, characteristics, bucket in rows
    ]


def weekday_patterns(expenses: Sequence[TransactionRecord]) -> list[WeekdayPattern]:
    buckets: dict[int, _Bucket] = {}
    for tx in expenses:
        bucket = buckets.setdefault(_weekday(tx), _Bucket())
        bucket.add(tx)
        hour = tx.occurred_at.hour
        bucket.hours[hour] = bucket.hours.get(hour, 0) + 1

    baseline = mean([b.total / b.count for b in buckets.values()])
    return [
        WeekdayPattern(
            weekday=weekday,
            weekday_name=WEEKDAY_NAMES[weekday],
            average_spending=average(bucket.total, bucket.count),
            transaction_count=bucket.count,
            compared_to_average=compared_to(average(bucket.total, bucket.count), baseline),
            peak_hours=[hour for hour, _ in _top(bucket.hours, PEAK_HOURS)],
        )
        for weekday, bucket in sorted(buckets.items())
    ]


def day_of_month_patterns(expenses: Sequence[TransactionRecord]) -> list[DayOfMonthPattern]:
    buckets: dict[str, _Bucket] = {}
    for tx in expenses:
        day = tx.occurred_at.day
        for label, first, last in DAY_RANGES:
            if first <= day <= last:
                buckets.setdefault(label, _Bucket()).add(tx)
                break

    baseline = mean([b.total / b.count for b in buckets.values()])
    return [
        DayOfMonthPattern(
            day_range=label,
            average_spending=average(buckets[label].total, buckets[label].count),
            transaction_count=buckets[label].count,
            compared_to_average=compared_to(average(buckets[label].total, buckets[label].count), baseline),
        )
        for label, _, _ in DAY_RANGES
        if label in buckets
    ]


def heatmap(expenses: Sequence[TransactionRecord]) -> HeatmapData:
    """Top categories by total spend against calendar months."""
    grid: dict[str, list[int]] = {}
    for tx in expenses:
        row = grid.setdefault(_category(tx), [0] * 12)
        row[tx.occurred_at.month - 1] += tx.magnitude

    totals = {name: sum(row) for name, row in grid.items()}
    categories = [name for name, _ in _top(totals, HEATMAP_CATEGORIES)]
    data = [grid[name] for name in categories]
    return HeatmapData(
        months=MONTH_ABBR,
        categories=categories,
        data=data,
        max_value=max((value for row in data for value in row), default=0),
    )


def _insights(
    by_month: list[MonthlyPattern], by_season: list[SeasonPattern], by_weekday: list[WeekdayPattern]
) -> list[str]:
    priciest = max(by_month, key=lambda m: m.average_spending)
    cheapest = min(by_month, key=lambda m: m.average_spending)
    season = max(by_season, key=lambda s: s.average_spending)
    busiest = max(by_weekday, key=lambda w: w.transaction_count)
    return [
        f"Most expensive month: {priciest.month_name} (average {format_money(priciest.average_spending)})",
        f"Most economical month: {cheapest.month_name} (average {format_money(cheapest.average_spending)})",
        f"Most expensive season: {season.season_name} ({season.characteristics})",
        f"Most active day: {busiest.weekday_name} ({busiest.transaction_count} transactions)",
    ]


def _recommendations(
    by_month: list[MonthlyPattern], by_season: list[SeasonPattern], by_day_of_month: list[DayOfMonthPattern]
) -> list[str]:
    recommendations = []

    high = [m.month_name for m in by_month if m.trend == "high"]
    if high:
        recommendations.append(f"Spending is above average in {', '.join(high)}. Plan the budget ahead.")

    ranges = {d.day_range: d for d in by_day_of_month}
    early, late = ranges.get("1-10"), ranges.get("21-31")
    if early and late and early.average_spending > late.average_spending * 1.3:
        recommendations.append(
            f"Spending in the first ten days is {round_half_up(early.compared_to_average)}% above average. "
            "Spread expenses more evenly across the month."
        )

    season = max(by_season, key=lambda s: s.average_spending)
    recommendations.append(f"{season.season_name} is the most expensive season. Set money aside in advance.")
    return recommendations
