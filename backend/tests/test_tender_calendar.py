"""Tests for the tender calendar."""

from datetime import timedelta

from app.payments.models import PaymentStatus, PaymentType
from app.reports.tender_calendar import build_tender_calendar
from app.tenders.models import TaskPriority

from conftest import NOW, TODAY, make_payment, make_task, make_tender


class TestTenderEvents:
    def test_submission_keeps_time_of_day(self):
        tender = make_tender(customer="City Hospital", submission_deadline=NOW + timedelta(days=2))
        (event,) = build_tender_calendar([tender], now=NOW).events
        assert event.id == f"submission-{tender.id}"
        assert event.type == "submission"
        assert event.title == "Bid submission: City Hospital"
        assert event.time == "12:00"
        assert event.days_left == 2
        assert event.is_urgent

    def test_date_only_milestone_has_no_time(self):
        tender = make_tender(results_date=TODAY + timedelta(days=5))
        (event,) = build_tender_calendar([tender], now=NOW).events
        assert event.type == "results"
        assert event.time is None
        assert event.days_left == 5
        assert not event.is_urgent

    def test_unknown_customer(self):
        tender = make_tender(review_date=TODAY + timedelta(days=1))
        (event,) = build_tender_calendar([tender], now=NOW).events
        assert event.customer == "Unknown customer"
        assert event.title == "Bid review: Unknown customer"

    def test_past_event_has_no_days_left(self):
        tender = make_tender(auction_date=NOW - timedelta(days=2))
        calendar = build_tender_calendar([tender], now=NOW)
        (event,) = calendar.events
        assert event.days_left is None
        assert not event.is_urgent
        assert calendar.stats.upcoming_events == []

    def test_tender_without_dates(self):
        calendar = build_tender_calendar([make_tender()], now=NOW)
        assert calendar.events == []
        assert calendar.days == []
        assert calendar.stats.total_events == 0


class TestTaskEvents:
    def test_high_priority_is_urgent(self):
        task = make_task(due_date=NOW + timedelta(days=5), priority=TaskPriority.HIGH)
        (event,) = build_tender_calendar([], [task], now=NOW).events
        assert event.type == "task"
        assert event.task_id == task.id
        assert event.is_urgent

    def test_due_tomorrow_is_urgent(self):
        task = make_task(due_date=NOW + timedelta(hours=12))
        (event,) = build_tender_calendar([], [task], now=NOW).events
        assert event.days_left == 1
        assert event.is_urgent

    def test_task_without_due_date_skipped(self):
        assert build_tender_calendar([], [make_task()], now=NOW).events == []


class TestPaymentEvents:
    def test_open_payment_listed(self):
        payment = make_payment(
            25_000_00, TODAY + timedelta(days=3), payment_type=PaymentType.INCOME, name="Advance"
        )
        (event,) = build_tender_calendar([], [], [payment], now=NOW).events
        assert event.type == "payment"
        assert event.title == "Incoming payment: Advance"
        assert event.amount == 25_000_00
        assert not event.is_urgent

    def test_settled_payments_skipped(self):
        payments = [
            make_payment(100, status=PaymentStatus.PAID),
            make_payment(100, status=PaymentStatus.CANCELLED),
        ]
        assert build_tender_calendar([], [], payments, now=NOW).events == []

    def test_overdue_payment_is_urgent(self):
        payment = make_payment(100, TODAY - timedelta(days=2), status=PaymentStatus.OVERDUE)
        (event,) = build_tender_calendar([], [], [payment], now=NOW).events
        assert event.title == "Outgoing payment: Rent"
        assert event.is_urgent


class TestGroupingAndStats:
    def _calendar(self, upcoming_limit=10):
        tender = make_tender(
            submission_deadline=NOW + timedelta(days=2),
            results_date=TODAY + timedelta(days=2),
            auction_date=NOW - timedelta(days=1),
        )
        tasks = [make_task(due_date=NOW + timedelta(days=20))]
        payments = [make_payment(100, TODAY + timedelta(days=2))]
        return build_tender_calendar([tender], tasks, payments, now=NOW, upcoming_limit=upcoming_limit)

    def test_events_sorted_chronologically(self):
        calendar = self._calendar()
        assert [e.type for e in calendar.events] == ["auction", "results", "payment", "submission", "task"]

    def test_days_carry_type_flags(self):
        calendar = self._calendar()
        assert [d.date for d in calendar.days] == sorted(d.date for d in calendar.days)
        busy = next(d for d in calendar.days if d.date == TODAY + timedelta(days=2))
        assert busy.total_events == 3
        assert busy.has_submission and busy.has_results and busy.has_payment
        assert not busy.has_task
        assert sum(d.total_events for d in calendar.days) == len(calendar.events)

    def test_stats(self):
        stats = self._calendar().stats
        assert stats.total_events == 5
        assert (stats.submissions_count, stats.results_count) == (1, 1)
        assert (stats.tasks_count, stats.payments_count) == (1, 1)
        assert stats.urgent_count == 1
        assert len(stats.this_week_events) == 3
        assert len(stats.upcoming_events) == 4

    def test_upcoming_limit(self):
        assert len(self._calendar(upcoming_limit=2).stats.upcoming_events) == 2

    def test_serialized_keys(self):
        body = self._calendar().model_dump(mode="json", by_alias=True)
        assert "hasSubmission" in body["days"][0]
        assert "thisWeekEvents" in body["stats"]
