from __future__ import annotations

import math
from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")

MS_PER_DAY = 86_400_000


def elapsed_days(earlier: datetime, later: datetime) -> int:
    """Whole days between two timestamps, rounded up."""
    delta_ms = (later - earlier).total_seconds() * 1000
    return math.ceil(delta_ms / MS_PER_DAY)


@dataclass
class GroupTotals:
    """Running totals for one bucket of a grouping dimension."""

    name: str = ""
    color: str | None = None
    role: str | None = None
    category: str | None = None
    count: int = 0
    won: int = 0
    lost: int = 0
    active: int = 0
    amount: int = 0
    total_days: int = 0
    processed: int = 0
    min_days: int | None = None
    max_days: int | None = None

    def add_days(self, days: int) -> None:
        self.total_days += days
        self.min_days = days if self.min_days is None else min(self.min_days, days)
        self.max_days = days if self.max_days is None else max(self.max_days, days)


class Accumulator(Generic[K]):
    """Map of bucket key to GroupTotals, in first-seen order."""

    def __init__(self) -> None:
        self._buckets: dict[K, GroupTotals] = {}

    def bucket(self, key: K | None, factory: Callable[[], GroupTotals] = GroupTotals) -> GroupTotals | None:
        # Records without a key never get a synthetic "unknown" bucket.
        if key is None:
            return None
        totals = self._buckets.get(key)
        if totals is None:
            totals = factory()
            self._buckets[key] = totals
        return totals

    def items(self) -> Iterator[tuple[K, GroupTotals]]:
        return iter(self._buckets.items())


def group_amounts(
    items: Iterable[R],
    key: Callable[[R], K | None],
    amount: Callable[[R], int],
) -> dict[K, int]:
    """Fold items into key -> summed amount, skipping keyless items."""
    totals: dict[K, int] = {}
    for item in items:
        k = key(item)
        if k is None:
            continue
        totals[k] = totals.get(k, 0) + amount(item)
    return totals


def month_key(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"
