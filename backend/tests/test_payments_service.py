"""Service-level tests for the payment calendar on a temporary database."""

from datetime import date

import pytest
import pytest_asyncio

from app.auth.models import Company
from app.config import Settings
from app.database import Base, build_engine, build_session_factory
from app.payments import service
from app.payments.models import PaymentStatus, PaymentType, Recurrence
from app.payments.schemas import PaymentCreate, PaymentStatusUpdate
from app.reports import service as reports_service

TODAY = date(2026, 3, 15)


@pytest_asyncio.fixture
async def session(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'payments.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with build_session_factory(engine)() as db:
        yield db
    await engine.dispose()


async def _company(db, name="Alpha"):
    company = Company(name=name)
    db.add(company)
    await db.commit()
    return company.id


def _payment(planned_date, amount=1_000, payment_type=PaymentType.EXPENSE):
    return PaymentCreate(payment_type=payment_type, name="Supplier", amount=amount, planned_date=planned_date)


@pytest.mark.asyncio
async def test_paid_status_sets_actual_date(session):
    company_id = await _company(session)
    item = await service.create_payment(session, company_id, _payment(date(2026, 3, 10)))
    assert item.status == PaymentStatus.PLANNED

    paid = await service.update_payment_status(
        session, company_id, item.id, PaymentStatusUpdate(status=PaymentStatus.PAID), today=TODAY
    )
    assert paid.actual_date == TODAY


@pytest.mark.asyncio
async def test_mark_overdue_is_scoped_to_company(session):
    alpha = await _company(session, "Alpha")
    beta = await _company(session, "Beta")
    late = await service.create_payment(session, alpha, _payment(date(2026, 3, 1)))
    await service.create_payment(session, alpha, _payment(date(2026, 3, 20)))
    await service.create_payment(session, beta, _payment(date(2026, 3, 1)))

    marked = await service.mark_overdue_payments(session, alpha, today=TODAY)
    assert marked == 1

    overdue = await service.get_overdue_payments(session, alpha)
    assert [p.id for p in overdue] == [late.id]
    assert await service.get_overdue_payments(session, beta) == []


@pytest.mark.asyncio
async def test_mark_overdue_for_every_company(session):
    alpha = await _company(session, "Alpha")
    beta = await _company(session, "Beta")
    await service.create_payment(session, alpha, _payment(date(2026, 3, 1)))
    await service.create_payment(session, beta, _payment(date(2026, 3, 2)))

    assert await service.mark_overdue_payments(session, today=TODAY) == 2


@pytest.mark.asyncio
async def test_upcoming_window(session):
    company_id = await _company(session)
    await service.create_payment(session, company_id, _payment(date(2026, 3, 16)))
    await service.create_payment(session, company_id, _payment(date(2026, 4, 30)))

    upcoming = await service.get_upcoming_payments(session, company_id, days=7, today=TODAY)
    assert [p.planned_date for p in upcoming] == [date(2026, 3, 16)]


@pytest.mark.asyncio
async def test_cash_flow_report_from_database(session):
    company_id = await _company(session)
    await service.create_payment(
        session, company_id, _payment(date(2026, 2, 1), 5_000, PaymentType.INCOME)
    )
    await service.create_payment(session, company_id, _payment(date(2026, 2, 10), 2_000))

    report = await reports_service.get_cash_flow(session, company_id, 2026)
    february = report.months[1]
    assert (february.planned_income, february.planned_expense) == (5_000, 2_000)
    assert report.closing_balance == 3_000


@pytest.mark.asyncio
async def test_summary_ignores_past_occurrences_of_paid_recurring_item(session):
    company_id = await _company(session)
    rent = await service.create_payment(
        session,
        company_id,
        PaymentCreate(
            payment_type=PaymentType.EXPENSE,
            name="Rent",
            amount=1_000,
            planned_date=date(2025, 9, 15),
            is_recurring=True,
            recurrence_pattern=Recurrence.MONTHLY,
        ),
    )
    await service.update_payment_status(
        session, company_id, rent.id, PaymentStatusUpdate(status=PaymentStatus.PAID), today=date(2025, 9, 15)
    )

    summary = await reports_service.get_payment_summary(session, company_id, Settings(), today=TODAY)
    assert summary.overdue.count == 0
    assert summary.today.expense == 1_000
    assert summary.this_month.expense == 1_000
