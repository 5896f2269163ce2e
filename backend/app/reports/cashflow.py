"""Payment calendar aggregation: summaries and the yearly cash-flow plan."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from app.payments.models import PaymentStatus, PaymentType, Recurrence
from app.reports.records import PaymentRecord
from app.reports.schemas import CashFlowMonth, CashFlowReport, CountAmount, FlowTotals, PaymentSummary

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

RECURRENCE_STEPS = {
    Recurrence.DAILY: relativedelta(days=1),
    Recurrence.WEEKLY: relativedelta(weeks=1),
    Recurrence.MONTHLY: relativedelta(months=1),
    Recurrence.QUARTERLY: relativedelta(months=3),
    Recurrence.YEARLY: relativedelta(years=1),
}


def _occurrences(item: PaymentRecord, date_to: date) -> Iterator[date]:
    """Dates after the first one, stepped from the anchor so month ends do not drift."""
    step = RECURRENCE_STEPS[item.recurrence_pattern]
    end = min(date_to, item.recurrence_end_date) if item.recurrence_end_date else date_to
    n = 1
    while True:
        current = item.planned_date + step * n
        if current > end:
            return
        yield current
        n += 1


def expand_recurring(items: Iterable[PaymentRecord], date_from: date, date_to: date) -> list[PaymentRecord]:
    """Items in the window, plus the future occurrences of recurring items.

    Generated occurrences are planned, unpaid and flagged ``is_occurrence``;
    the stored item keeps its own status.
    """
    expanded = []
    for item in items:
        if date_from <= item.planned_date <= date_to:
            expanded.append(item)
        if not item.is_recurring or item.recurrence_pattern is None or item.status == PaymentStatus.CANCELLED:
            continue
        for occurrence in _occurrences(item, date_to):
            if occurrence < date_from:
                continue
            expanded.append(
                item.model_copy(
                    update={
                        "planned_date": occurrence,
                        "actual_date": None,
                        "status": PaymentStatus.PLANNED,
                        "is_occurrence": True,
                    }
                )
            )
    expanded.sort(key=lambda p: p.planned_date)
    return expanded


def _flow(items: Iterable[PaymentRecord]) -> FlowTotals:
    totals = FlowTotals()
    for item in items:
        if item.payment_type == PaymentType.INCOME:
            totals.income += item.amount
        else:
            totals.expense += item.amount
    totals.balance = totals.income - totals.expense
    return totals


def _count_amount(items: list[PaymentRecord]) -> CountAmount:
    return CountAmount(count=len(items), amount=sum(p.amount for p in items))


def week_bounds(today: date) -> tuple[date, date]:
    """Sunday through Saturday around ``today``."""
    start = today - timedelta(days=today.isoweekday() % 7)
    return start, start + timedelta(days=6)


def build_payment_summary(items: Iterable[PaymentRecord], today: date, upcoming_days: int = 7) -> PaymentSummary:
    """Flows for today, this week and this month, plus overdue and upcoming counts.

    Only stored items can be overdue. A past occurrence of a recurring item
    cannot be paid on its own, so it never counts as overdue.
    """
    live = [p for p in items if p.status != PaymentStatus.CANCELLED]
    week_start, week_end = week_bounds(today)
    horizon = today + timedelta(days=upcoming_days)

    overdue = [
        p
        for p in live
        if not p.is_occurrence
        and (p.status == PaymentStatus.OVERDUE or (p.status == PaymentStatus.PLANNED and p.planned_date < today))
    ]
    upcoming = [p for p in live if p.status == PaymentStatus.PLANNED and today <= p.planned_date <= horizon]

    return PaymentSummary(
        today=_flow(p for p in live if p.planned_date == today),
        this_week=_flow(p for p in live if week_start <= p.planned_date <= week_end),
        this_month=_flow(
            p for p in live if (p.planned_date.year, p.planned_date.month) == (today.year, today.month)
        ),
        overdue=_count_amount(overdue),
        upcoming=_count_amount(upcoming),
    )


def _signed(item: PaymentRecord) -> int:
    return item.amount if item.payment_type == PaymentType.INCOME else -item.amount


def build_cash_flow(items: Iterable[PaymentRecord], year: int) -> CashFlowReport:
    """Twelve monthly buckets of planned and paid flows.

    The running balance follows the plan, carried over from every
    non-cancelled item planned before the year starts.
    """
    live = [p for p in items if p.status != PaymentStatus.CANCELLED]
    months = [CashFlowMonth(month=m, month_label=f"{MONTH_ABBR[m - 1]} {year}") for m in range(1, 13)]
    opening = sum(_signed(p) for p in live if p.planned_date.year < year)

    for item in live:
        if item.planned_date.year == year:
            bucket = months[item.planned_date.month - 1]
            if item.payment_type == PaymentType.INCOME:
                bucket.planned_income += item.amount
            else:
                bucket.planned_expense += item.amount
        paid_on = item.effective_date
        if item.status == PaymentStatus.PAID and paid_on.year == year:
            bucket = months[paid_on.month - 1]
            if item.payment_type == PaymentType.INCOME:
                bucket.paid_income += item.amount
            else:
                bucket.paid_expense += item.amount

    balance = opening
    for bucket in months:
        bucket.net = bucket.planned_income - bucket.planned_expense
        balance += bucket.net
        bucket.running_balance = balance

    return CashFlowReport(
        year=year,
        opening_balance=opening,
        closing_balance=balance,
        total_planned_income=sum(m.planned_income for m in months),
        total_planned_expense=sum(m.planned_expense for m in months),
        total_paid_income=sum(m.paid_income for m in months),
        total_paid_expense=sum(m.paid_expense for m in months),
        months=months,
    )
