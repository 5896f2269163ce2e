"""Tests for payment calendar summaries and the cash-flow plan."""

from datetime import date

from app.payments.models import PaymentStatus, PaymentType, Recurrence
from app.reports.cashflow import build_cash_flow, build_payment_summary, expand_recurring, week_bounds

from conftest import TODAY, make_payment


class TestExpandRecurring:
    def test_month_end_does_not_drift(self):
        rent = make_payment(100, date(2026, 1, 31), recurrence=Recurrence.MONTHLY)
        dates = [p.planned_date for p in expand_recurring([rent], date(2026, 1, 1), date(2026, 4, 30))]
        assert dates == [date(2026, 1, 31), date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)]

    def test_generated_occurrences_are_planned(self):
        paid = make_payment(
            100, date(2026, 1, 1), status=PaymentStatus.PAID, actual_date=date(2026, 1, 2),
            recurrence=Recurrence.QUARTERLY,
        )
        original, generated = expand_recurring([paid], date(2026, 1, 1), date(2026, 4, 30))
        assert original.status == PaymentStatus.PAID
        assert generated.planned_date == date(2026, 4, 1)
        assert generated.status == PaymentStatus.PLANNED
        assert generated.actual_date is None
        assert generated.is_occurrence
        assert not original.is_occurrence

    def test_stops_at_recurrence_end(self):
        weekly = make_payment(
            100, date(2026, 3, 1), recurrence=Recurrence.WEEKLY, recurrence_end_date=date(2026, 3, 15)
        )
        dates = [p.planned_date for p in expand_recurring([weekly], date(2026, 3, 1), date(2026, 12, 31))]
        assert dates == [date(2026, 3, 1), date(2026, 3, 8), date(2026, 3, 15)]

    def test_occurrences_before_window_skipped(self):
        yearly = make_payment(100, date(2024, 6, 1), recurrence=Recurrence.YEARLY)
        dates = [p.planned_date for p in expand_recurring([yearly], date(2026, 1, 1), date(2026, 12, 31))]
        assert dates == [date(2026, 6, 1)]

    def test_cancelled_not_expanded(self):
        cancelled = make_payment(
            100, date(2026, 1, 1), status=PaymentStatus.CANCELLED, recurrence=Recurrence.DAILY
        )
        assert len(expand_recurring([cancelled], date(2026, 1, 1), date(2026, 1, 31))) == 1

    def test_one_off_outside_window_dropped(self):
        once = make_payment(100, date(2025, 12, 31))
        assert expand_recurring([once], date(2026, 1, 1), date(2026, 1, 31)) == []


def test_week_runs_sunday_to_saturday():
    # TODAY is a Sunday
    assert week_bounds(TODAY) == (date(2026, 3, 15), date(2026, 3, 21))
    assert week_bounds(date(2026, 3, 18)) == (date(2026, 3, 15), date(2026, 3, 21))


class TestPaymentSummary:
    def test_flows(self):
        items = [
            make_payment(1_000, TODAY, payment_type=PaymentType.INCOME),
            make_payment(300, TODAY),
            make_payment(200, date(2026, 3, 20)),
            make_payment(50, date(2026, 3, 30)),
            make_payment(999, TODAY, status=PaymentStatus.CANCELLED),
        ]
        summary = build_payment_summary(items, TODAY)
        assert (summary.today.income, summary.today.expense, summary.today.balance) == (1_000, 300, 700)
        assert summary.this_week.expense == 500
        assert summary.this_month.expense == 550
        assert summary.this_month.balance == 450

    def test_overdue_and_upcoming(self):
        items = [
            make_payment(100, date(2026, 3, 10)),
            make_payment(200, date(2026, 3, 1), status=PaymentStatus.OVERDUE),
            make_payment(400, date(2026, 3, 1), status=PaymentStatus.PAID),
            make_payment(30, date(2026, 3, 22)),
            make_payment(70, date(2026, 3, 23)),
        ]
        summary = build_payment_summary(items, TODAY)
        assert (summary.overdue.count, summary.overdue.amount) == (2, 300)
        assert (summary.upcoming.count, summary.upcoming.amount) == (1, 30)

    def test_past_occurrences_of_paid_recurring_item_are_not_overdue(self):
        rent = make_payment(
            1_000, date(2025, 9, 15), status=PaymentStatus.PAID, actual_date=date(2025, 9, 15),
            recurrence=Recurrence.MONTHLY,
        )
        expanded = expand_recurring([rent], date.min, date(2026, 3, 31))
        summary = build_payment_summary(expanded, TODAY)
        assert (summary.overdue.count, summary.overdue.amount) == (0, 0)
        assert summary.today.expense == 1_000
        assert summary.upcoming.count == 1

    def test_stored_recurring_item_can_still_be_overdue(self):
        rent = make_payment(1_000, date(2026, 3, 1), recurrence=Recurrence.WEEKLY)
        summary = build_payment_summary(expand_recurring([rent], date.min, date(2026, 3, 31)), TODAY)
        assert (summary.overdue.count, summary.overdue.amount) == (1, 1_000)


class TestCashFlow:
    def test_monthly_buckets_and_running_balance(self):
        items = [
            make_payment(500, date(2025, 12, 1), payment_type=PaymentType.INCOME),
            make_payment(1_000, date(2026, 1, 10), payment_type=PaymentType.INCOME),
            make_payment(400, date(2026, 1, 20)),
            make_payment(300, date(2026, 2, 5)),
            make_payment(9_999, date(2026, 2, 6), status=PaymentStatus.CANCELLED),
        ]
        report = build_cash_flow(items, 2026)
        assert report.opening_balance == 500
        january, february = report.months[:2]
        assert (january.planned_income, january.planned_expense, january.net) == (1_000, 400, 600)
        assert january.running_balance == 1_100
        assert february.running_balance == 800
        assert report.closing_balance == 800
        assert report.months[-1].running_balance == 800
        assert len(report.months) == 12
        assert report.months[0].month_label == "Jan 2026"

    def test_paid_flows_use_actual_date(self):
        late = make_payment(
            250, date(2025, 12, 28), status=PaymentStatus.PAID, actual_date=date(2026, 1, 3)
        )
        report = build_cash_flow([late], 2026)
        assert report.months[0].paid_expense == 250
        assert report.months[0].planned_expense == 0
        assert report.total_paid_expense == 250
        assert report.opening_balance == -250

    def test_totals(self):
        items = [
            make_payment(100, date(2026, m, 1), payment_type=PaymentType.INCOME) for m in (1, 6, 12)
        ]
        report = build_cash_flow(items, 2026)
        assert report.total_planned_income == 300
        assert report.total_planned_expense == 0
        assert report.closing_balance == 300
