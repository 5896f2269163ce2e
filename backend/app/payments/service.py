from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.pagination import PaginationParams, paginate
from app.payments.models import PaymentCalendarItem, PaymentStatus, PaymentType
from app.payments.schemas import PaymentCreate, PaymentStatusUpdate, PaymentUpdate
from app.tenders.models import Tender

logger = logging.getLogger(__name__)

OPEN_STATUSES = (PaymentStatus.PLANNED, PaymentStatus.CONFIRMED)


async def _check_tender(db: AsyncSession, company_id: uuid.UUID, tender_id: uuid.UUID | None) -> None:
    if tender_id is None:
        return
    found = await db.scalar(
        select(Tender.id).where(
            Tender.id == tender_id, Tender.company_id == company_id, Tender.deleted_at.is_(None)
        )
    )
    if found is None:
        raise ValidationError(f"Tender {tender_id} does not belong to this company.")


async def create_payment(db: AsyncSession, company_id: uuid.UUID, data: PaymentCreate) -> PaymentCalendarItem:
    await _check_tender(db, company_id, data.tender_id)
    item = PaymentCalendarItem(company_id=company_id, status=PaymentStatus.PLANNED, **data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def list_payments(
    db: AsyncSession,
    company_id: uuid.UUID,
    pagination: PaginationParams,
    date_from: date | None = None,
    date_to: date | None = None,
    status: PaymentStatus | None = None,
    payment_type: PaymentType | None = None,
    tender_id: uuid.UUID | None = None,
) -> tuple[list[PaymentCalendarItem], dict]:
    query = select(PaymentCalendarItem).where(PaymentCalendarItem.company_id == company_id)
    if date_from is not None:
        query = query.where(PaymentCalendarItem.planned_date >= date_from)
    if date_to is not None:
        query = query.where(PaymentCalendarItem.planned_date <= date_to)
    if status is not None:
        query = query.where(PaymentCalendarItem.status == status)
    if payment_type is not None:
        query = query.where(PaymentCalendarItem.payment_type == payment_type)
    if tender_id is not None:
        query = query.where(PaymentCalendarItem.tender_id == tender_id)
    return await paginate(db, query.order_by(PaymentCalendarItem.planned_date), pagination)


async def get_payment(db: AsyncSession, company_id: uuid.UUID, payment_id: uuid.UUID) -> PaymentCalendarItem:
    result = await db.execute(
        select(PaymentCalendarItem).where(
            PaymentCalendarItem.id == payment_id, PaymentCalendarItem.company_id == company_id
        )
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Payment", str(payment_id))
    return item


async def update_payment(
    db: AsyncSession, company_id: uuid.UUID, payment_id: uuid.UUID, data: PaymentUpdate
) -> PaymentCalendarItem:
    item = await get_payment(db, company_id, payment_id)
    changes = data.model_dump(exclude_unset=True)
    if "tender_id" in changes:
        await _check_tender(db, company_id, changes["tender_id"])
    for key, value in changes.items():
        setattr(item, key, value)
    if item.is_recurring and item.recurrence_pattern is None:
        raise ValidationError("Recurring payments need a recurrence pattern.")
    await db.commit()
    await db.refresh(item)
    return item


async def update_payment_status(
    db: AsyncSession,
    company_id: uuid.UUID,
    payment_id: uuid.UUID,
    data: PaymentStatusUpdate,
    today: date | None = None,
) -> PaymentCalendarItem:
    item = await get_payment(db, company_id, payment_id)
    item.status = data.status
    if data.actual_date is not None:
        item.actual_date = data.actual_date
    elif data.status == PaymentStatus.PAID and item.actual_date is None:
        item.actual_date = today or date.today()
    await db.commit()
    await db.refresh(item)
    return item


async def delete_payment(db: AsyncSession, company_id: uuid.UUID, payment_id: uuid.UUID) -> None:
    item = await get_payment(db, company_id, payment_id)
    await db.delete(item)
    await db.commit()


async def get_upcoming_payments(
    db: AsyncSession, company_id: uuid.UUID, days: int = 7, today: date | None = None
) -> list[PaymentCalendarItem]:
    today = today or date.today()
    result = await db.execute(
        select(PaymentCalendarItem)
        .where(
            PaymentCalendarItem.company_id == company_id,
            PaymentCalendarItem.status.in_(OPEN_STATUSES),
            PaymentCalendarItem.planned_date >= today,
            PaymentCalendarItem.planned_date <= today + timedelta(days=days),
        )
        .order_by(PaymentCalendarItem.planned_date)
    )
    return list(result.scalars().all())


async def get_overdue_payments(db: AsyncSession, company_id: uuid.UUID) -> list[PaymentCalendarItem]:
    result = await db.execute(
        select(PaymentCalendarItem)
        .where(
            PaymentCalendarItem.company_id == company_id,
            PaymentCalendarItem.status == PaymentStatus.OVERDUE,
        )
        .order_by(PaymentCalendarItem.planned_date)
    )
    return list(result.scalars().all())


async def mark_overdue_payments(
    db: AsyncSession, company_id: uuid.UUID | None = None, today: date | None = None
) -> int:
    """Move planned/confirmed items dated before today to overdue.

    Without ``company_id`` every company is processed (used by the scheduler).
    """
    today = today or date.today()
    stmt = (
        update(PaymentCalendarItem)
        .where(
            PaymentCalendarItem.status.in_(OPEN_STATUSES),
            PaymentCalendarItem.planned_date < today,
        )
        .values(status=PaymentStatus.OVERDUE)
        .execution_options(synchronize_session=False)
    )
    if company_id is not None:
        stmt = stmt.where(PaymentCalendarItem.company_id == company_id)
    result = await db.execute(stmt)
    await db.commit()
    return result.rowcount or 0
