"""Calendar events derived from tender milestones, tasks and scheduled payments."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone

from app.payments.models import PaymentStatus, PaymentType
from app.reports.accumulators import elapsed_days
from app.reports.records import PaymentRecord, TenderRecord, TenderTaskRecord, as_utc, utc_now
from app.reports.schemas import CalendarDay, CalendarEvent, CalendarStats, TenderCalendar
from app.tenders.models import TaskPriority

UNKNOWN_CUSTOMER = "Unknown customer"
OPEN_PAYMENT_STATUSES = frozenset({PaymentStatus.PLANNED, PaymentStatus.CONFIRMED, PaymentStatus.OVERDUE})

# (event type, tender attribute, title prefix, urgent within N days)
TENDER_MILESTONES = (
    ("submission", "submission_deadline", "Bid submission", 3),
    ("results", "results_date", "Tender results", 1),
    ("auction", "auction_date", "Auction", 1),
    ("review", "review_date", "Bid review", 1),
)


def _as_moment(value: date | datetime) -> tuple[datetime, str | None]:
    """Event timestamp plus "HH:MM" when the source carries a time of day."""
    if isinstance(value, datetime):
        moment = as_utc(value)
        return moment, moment.strftime("%H:%M")
    return datetime.combine(value, time.min, tzinfo=timezone.utc), None


def _days_left(moment: datetime, now: datetime) -> int | None:
    days = elapsed_days(now, moment)
    return days if days >= 0 else None


def _is_due_within(days_left: int | None, limit: int) -> bool:
    return days_left is not None and days_left <= limit


def tender_events(tender: TenderRecord, now: datetime) -> list[CalendarEvent]:
    customer = tender.customer or UNKNOWN_CUSTOMER
    events = []
    for event_type, attr, label, urgent_days in TENDER_MILESTONES:
        value = getattr(tender, attr)
        if value is None:
            continue
        moment, clock = _as_moment(value)
        days_left = _days_left(moment, now)
        events.append(
            CalendarEvent(
                id=f"{event_type}-{tender.id}",
                date=moment.date(),
                time=clock,
                type=event_type,
                title=f"{label}: {customer}",
                description=tender.subject or "",
                tender_id=tender.id,
                tender_number=tender.purchase_number,
                customer=customer,
                nmck=tender.nmck,
                contract_price=tender.contract_price,
                status=tender.status.value,
                is_urgent=_is_due_within(days_left, urgent_days),
                days_left=days_left,
            )
        )
    return events


def task_event(task: TenderTaskRecord, now: datetime) -> CalendarEvent | None:
    if task.due_date is None:
        return None
    moment, clock = _as_moment(task.due_date)
    days_left = _days_left(moment, now)
    return CalendarEvent(
        id=f"task-{task.id}",
        date=moment.date(),
        time=clock,
        type="task",
        title=task.title,
        description=task.description,
        tender_id=task.tender_id,
        status=task.status.value,
        is_urgent=task.priority == TaskPriority.HIGH or _is_due_within(days_left, 1),
        days_left=days_left,
        task_id=task.id,
        task_status=task.status.value,
    )


def payment_event(payment: PaymentRecord, now: datetime) -> CalendarEvent | None:
    if payment.status not in OPEN_PAYMENT_STATUSES:
        return None
    moment, _ = _as_moment(payment.planned_date)
    days_left = _days_left(moment, now)
    label = "Incoming payment" if payment.payment_type == PaymentType.INCOME else "Outgoing payment"
    return CalendarEvent(
        id=f"payment-{payment.id}",
        date=payment.planned_date,
        type="payment",
        title=f"{label}: {payment.name}",
        tender_id=payment.tender_id,
        amount=payment.amount,
        status=payment.status.value,
        is_urgent=payment.status == PaymentStatus.OVERDUE or _is_due_within(days_left, 1),
        days_left=days_left,
    )


def group_events_by_day(events: Iterable[CalendarEvent]) -> list[CalendarDay]:
    days: dict[date, CalendarDay] = {}
    for event in events:
        day = days.get(event.date)
        if day is None:
            day = days[event.date] = CalendarDay(date=event.date)
        day.events.append(event)
        day.total_events += 1
        setattr(day, f"has_{event.type}", True)
    return [days[key] for key in sorted(days)]


def build_tender_calendar(
    tenders: Iterable[TenderRecord],
    tasks: Iterable[TenderTaskRecord] = (),
    payments: Iterable[PaymentRecord] = (),
    now: datetime | None = None,
    upcoming_limit: int = 10,
) -> TenderCalendar:
    now = as_utc(now) if now is not None else utc_now()
    today = now.date()
    week_end = today + timedelta(days=7)

    events: list[CalendarEvent] = []
    for tender in tenders:
        events.extend(tender_events(tender, now))
    for task in tasks:
        event = task_event(task, now)
        if event is not None:
            events.append(event)
    for payment in payments:
        event = payment_event(payment, now)
        if event is not None:
            events.append(event)

    events.sort(key=lambda e: (e.date, e.time or ""))
    upcoming = [e for e in events if e.date >= today]

    stats = CalendarStats(
        total_events=len(events),
        submissions_count=sum(1 for e in events if e.type == "submission"),
        results_count=sum(1 for e in events if e.type == "results"),
        tasks_count=sum(1 for e in events if e.type == "task"),
        payments_count=sum(1 for e in events if e.type == "payment"),
        urgent_count=sum(1 for e in upcoming if e.is_urgent),
        this_week_events=[e for e in upcoming if e.date <= week_end],
        upcoming_events=upcoming[:upcoming_limit],
    )
    return TenderCalendar(events=events, days=group_events_by_day(events), stats=stats)
