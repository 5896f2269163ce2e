"""Loads company-scoped rows and feeds them to the report builders.

Every loader takes an explicit ``company_id``. A failed query never breaks
a dashboard: the error is logged and the report falls back to its empty
shape.
"""

import logging
import uuid
from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone

from dateutil.relativedelta import relativedelta
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.finance.models import Budget, Direction, SavingsGoal, Transaction
from app.payments.models import PaymentCalendarItem, PaymentStatus
from app.reports.cashflow import build_cash_flow, build_payment_summary, expand_recurring, week_bounds
from app.reports.department import build_department_report, empty_department_report
from app.reports.health import analyze_financial_health, empty_health_report
from app.reports.records import (
    BudgetRecord,
    PaymentRecord,
    SavingsGoalRecord,
    TenderRecord,
    TenderTaskRecord,
    TransactionRecord,
    utc_now,
)
from app.reports.schemas import (
    CashFlowReport,
    DepartmentReport,
    FinancialHealthReport,
    PaymentSummary,
    SeasonalityReport,
    TenderCalendar,
)
from app.reports.seasonality import analyze_seasonality
from app.reports.tender_calendar import build_tender_calendar
from app.tenders.models import Tender, TenderTask

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


async def load_tenders(
    db: AsyncSession,
    company_id: uuid.UUID,
    date_from: date | None = None,
    date_to: date | None = None,
    specialist_id: uuid.UUID | None = None,
) -> list[TenderRecord]:
    """Live tenders, optionally bounded by creation date and assigned employee.

    ``date_to`` is inclusive up to the end of that day. ``specialist_id``
    matches either the manager or the specialist.
    """
    query = select(Tender).where(Tender.company_id == company_id, Tender.deleted_at.is_(None))
    if date_from is not None:
        query = query.where(Tender.created_at >= datetime.combine(date_from, time.min, tzinfo=timezone.utc))
    if date_to is not None:
        day_after = datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=timezone.utc)
        query = query.where(Tender.created_at < day_after)
    if specialist_id is not None:
        query = query.where(or_(Tender.manager_id == specialist_id, Tender.specialist_id == specialist_id))
    result = await db.execute(query.order_by(Tender.created_at))
    return [TenderRecord.model_validate(t) for t in result.scalars().all()]


async def load_tasks(db: AsyncSession, company_id: uuid.UUID) -> list[TenderTaskRecord]:
    result = await db.execute(
        select(TenderTask).where(
            TenderTask.company_id == company_id,
            TenderTask.deleted_at.is_(None),
            TenderTask.due_date.is_not(None),
        )
    )
    return [TenderTaskRecord.model_validate(t) for t in result.scalars().all()]


async def load_transactions(
    db: AsyncSession,
    company_id: uuid.UUID,
    since: datetime | None = None,
    direction: Direction | None = None,
) -> list[TransactionRecord]:
    query = select(Transaction).where(Transaction.company_id == company_id)
    if since is not None:
        query = query.where(Transaction.occurred_at >= since)
    if direction is not None:
        query = query.where(Transaction.direction == direction)
    result = await db.execute(query.order_by(Transaction.occurred_at))
    return [TransactionRecord.model_validate(t) for t in result.scalars().all()]


async def load_budgets(db: AsyncSession, company_id: uuid.UUID) -> list[BudgetRecord]:
    result = await db.execute(select(Budget).where(Budget.company_id == company_id))
    return [BudgetRecord.model_validate(b) for b in result.scalars().all()]


async def load_goals(db: AsyncSession, company_id: uuid.UUID) -> list[SavingsGoalRecord]:
    result = await db.execute(select(SavingsGoal).where(SavingsGoal.company_id == company_id))
    return [SavingsGoalRecord.model_validate(g) for g in result.scalars().all()]


async def load_payments(
    db: AsyncSession, company_id: uuid.UUID, until: date | None = None
) -> list[PaymentRecord]:
    query = select(PaymentCalendarItem).where(
        PaymentCalendarItem.company_id == company_id,
        PaymentCalendarItem.status != PaymentStatus.CANCELLED,
    )
    if until is not None:
        query = query.where(PaymentCalendarItem.planned_date <= until)
    result = await db.execute(query.order_by(PaymentCalendarItem.planned_date))
    return [PaymentRecord.model_validate(p) for p in result.scalars().all()]


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


async def get_department_report(
    db: AsyncSession,
    company_id: uuid.UUID,
    settings: Settings,
    date_from: date | None = None,
    date_to: date | None = None,
    specialist_id: uuid.UUID | None = None,
) -> DepartmentReport:
    try:
        tenders = await load_tenders(db, company_id, date_from, date_to, specialist_id)
    except SQLAlchemyError:
        logger.exception("Failed to load tenders for department report (company %s)", company_id)
        return empty_department_report()
    return build_department_report(tenders, monthly_window=settings.department_monthly_window)


async def get_tender_calendar(
    db: AsyncSession, company_id: uuid.UUID, settings: Settings
) -> TenderCalendar:
    try:
        tenders = await load_tenders(db, company_id)
        tasks = await load_tasks(db, company_id)
        payments = await load_payments(db, company_id)
    except SQLAlchemyError:
        logger.exception("Failed to load tender calendar (company %s)", company_id)
        return TenderCalendar()
    return build_tender_calendar(
        tenders, tasks, payments, upcoming_limit=settings.calendar_upcoming_limit
    )


async def get_financial_health(
    db: AsyncSession, company_id: uuid.UUID, settings: Settings
) -> FinancialHealthReport:
    since = utc_now() - relativedelta(months=settings.health_lookback_months)
    try:
        transactions = await load_transactions(db, company_id, since=since)
        budgets = await load_budgets(db, company_id)
        goals = await load_goals(db, company_id)
    except SQLAlchemyError:
        logger.exception("Failed to load financial health data (company %s)", company_id)
        return empty_health_report()
    return analyze_financial_health(transactions, budgets, goals)


async def get_seasonality(
    db: AsyncSession, company_id: uuid.UUID, months_back: int
) -> SeasonalityReport:
    since = utc_now() - relativedelta(months=months_back)
    try:
        expenses = await load_transactions(db, company_id, since=since, direction=Direction.EXPENSE)
    except SQLAlchemyError:
        logger.exception("Failed to load seasonality data (company %s)", company_id)
        return SeasonalityReport()
    return analyze_seasonality(expenses)


async def get_payment_summary(
    db: AsyncSession, company_id: uuid.UUID, settings: Settings, today: date | None = None
) -> PaymentSummary:
    today = today or date.today()
    month_end = today.replace(day=monthrange(today.year, today.month)[1])
    until = max(month_end, today + timedelta(days=settings.upcoming_payment_days))
    try:
        items = await load_payments(db, company_id, until=until)
    except SQLAlchemyError:
        logger.exception("Failed to load payment summary (company %s)", company_id)
        return PaymentSummary()
    # Occurrences only matter inside the week and month shown; older stored
    # rows are kept as they are so their own status can flag them overdue.
    start = min(week_bounds(today)[0], today.replace(day=1))
    expanded = [p for p in items if p.planned_date < start] + expand_recurring(items, start, until)
    return build_payment_summary(expanded, today, settings.upcoming_payment_days)


async def get_cash_flow(db: AsyncSession, company_id: uuid.UUID, year: int) -> CashFlowReport:
    year_end = date(year, 12, 31)
    try:
        items = await load_payments(db, company_id, until=year_end)
    except SQLAlchemyError:
        logger.exception("Failed to load cash flow (company %s, year %d)", company_id, year)
        return build_cash_flow([], year)
    return build_cash_flow(expand_recurring(items, date.min, year_end), year)
