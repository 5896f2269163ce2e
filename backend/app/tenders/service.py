from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TypeVar

from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.pagination import PaginationParams, paginate
from app.database import Base
from app.tenders.models import (
    Employee,
    Tender,
    TenderPlatform,
    TenderStage,
    TenderStatus,
    TenderTask,
    TenderType,
)
from app.tenders.schemas import TaskCreate, TaskUpdate, TenderCreate, TenderUpdate

M = TypeVar("M", bound=Base)

# Foreign keys on a tender and the dictionary each must point into.
TENDER_REFERENCES = {
    "stage_id": TenderStage,
    "type_id": TenderType,
    "platform_id": TenderPlatform,
    "manager_id": Employee,
    "specialist_id": Employee,
}


# ---------------------------------------------------------------------------
# Dictionaries (stages, types, platforms, employees)
# ---------------------------------------------------------------------------


async def list_entries(db: AsyncSession, model: type[M], company_id: uuid.UUID) -> list[M]:
    query = select(model).where(model.company_id == company_id)
    if model is TenderStage:
        query = query.order_by(TenderStage.sort_order, TenderStage.name)
    elif model is Employee:
        query = query.order_by(Employee.full_name)
    else:
        query = query.order_by(model.name)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_entry(db: AsyncSession, model: type[M], company_id: uuid.UUID, entry_id: uuid.UUID) -> M:
    result = await db.execute(
        select(model).where(model.id == entry_id, model.company_id == company_id)
    )
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError(model.__name__, str(entry_id))
    return entry


async def create_entry(db: AsyncSession, model: type[M], company_id: uuid.UUID, data: BaseModel) -> M:
    entry = model(company_id=company_id, **data.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


async def update_entry(
    db: AsyncSession, model: type[M], company_id: uuid.UUID, entry_id: uuid.UUID, data: BaseModel
) -> M:
    entry = await get_entry(db, model, company_id, entry_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(entry, key, value)
    await db.commit()
    await db.refresh(entry)
    return entry


async def delete_entry(db: AsyncSession, model: type[M], company_id: uuid.UUID, entry_id: uuid.UUID) -> None:
    entry = await get_entry(db, model, company_id, entry_id)
    await db.delete(entry)
    await db.commit()


# ---------------------------------------------------------------------------
# Tenders
# ---------------------------------------------------------------------------


async def _check_references(db: AsyncSession, company_id: uuid.UUID, values: dict) -> None:
    for field, model in TENDER_REFERENCES.items():
        ref_id = values.get(field)
        if ref_id is None:
            continue
        found = await db.scalar(
            select(model.id).where(model.id == ref_id, model.company_id == company_id)
        )
        if found is None:
            raise ValidationError(f"{field} {ref_id} does not belong to this company.")


def _check_outcome(values: dict) -> None:
    if values.get("loss_reason") and values.get("status") not in (None, TenderStatus.LOST):
        raise ValidationError("A loss reason can only be recorded for a lost tender.")


async def create_tender(db: AsyncSession, company_id: uuid.UUID, data: TenderCreate) -> Tender:
    values = data.model_dump()
    _check_outcome(values)
    await _check_references(db, company_id, values)

    tender = Tender(company_id=company_id, **values)
    db.add(tender)
    await db.commit()
    await db.refresh(tender)
    return tender


async def list_tenders(
    db: AsyncSession,
    company_id: uuid.UUID,
    pagination: PaginationParams,
    status: TenderStatus | None = None,
    stage_id: uuid.UUID | None = None,
    employee_id: uuid.UUID | None = None,
    search: str | None = None,
) -> tuple[list[Tender], dict]:
    query = select(Tender).where(Tender.company_id == company_id, Tender.deleted_at.is_(None))
    if status is not None:
        query = query.where(Tender.status == status)
    if stage_id is not None:
        query = query.where(Tender.stage_id == stage_id)
    if employee_id is not None:
        query = query.where(or_(Tender.manager_id == employee_id, Tender.specialist_id == employee_id))
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Tender.subject.ilike(pattern),
                Tender.customer.ilike(pattern),
                Tender.purchase_number.ilike(pattern),
            )
        )
    return await paginate(db, query.order_by(Tender.created_at.desc()), pagination)


async def get_tender(db: AsyncSession, company_id: uuid.UUID, tender_id: uuid.UUID) -> Tender:
    result = await db.execute(
        select(Tender).where(
            Tender.id == tender_id,
            Tender.company_id == company_id,
            Tender.deleted_at.is_(None),
        )
    )
    tender = result.scalar_one_or_none()
    if tender is None:
        raise NotFoundError("Tender", str(tender_id))
    return tender


async def update_tender(
    db: AsyncSession, company_id: uuid.UUID, tender_id: uuid.UUID, data: TenderUpdate
) -> Tender:
    tender = await get_tender(db, company_id, tender_id)
    changes = data.model_dump(exclude_unset=True)
    _check_outcome({"status": changes.get("status", tender.status), "loss_reason": changes.get("loss_reason")})
    await _check_references(db, company_id, changes)

    for key, value in changes.items():
        setattr(tender, key, value)
    if tender.status != TenderStatus.LOST:
        tender.loss_reason = None
    await db.commit()
    await db.refresh(tender)
    return tender


async def delete_tender(db: AsyncSession, company_id: uuid.UUID, tender_id: uuid.UUID) -> None:
    tender = await get_tender(db, company_id, tender_id)
    tender.deleted_at = datetime.now(timezone.utc)
    await db.commit()


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


async def create_task(db: AsyncSession, company_id: uuid.UUID, data: TaskCreate) -> TenderTask:
    if data.tender_id is not None:
        await get_tender(db, company_id, data.tender_id)
    task = TenderTask(company_id=company_id, **data.model_dump())
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task


async def list_tasks(
    db: AsyncSession,
    company_id: uuid.UUID,
    pagination: PaginationParams,
    tender_id: uuid.UUID | None = None,
) -> tuple[list[TenderTask], dict]:
    query = select(TenderTask).where(TenderTask.company_id == company_id, TenderTask.deleted_at.is_(None))
    if tender_id is not None:
        query = query.where(TenderTask.tender_id == tender_id)
    return await paginate(db, query.order_by(TenderTask.due_date, TenderTask.created_at), pagination)


async def get_task(db: AsyncSession, company_id: uuid.UUID, task_id: uuid.UUID) -> TenderTask:
    result = await db.execute(
        select(TenderTask).where(
            TenderTask.id == task_id,
            TenderTask.company_id == company_id,
            TenderTask.deleted_at.is_(None),
        )
    )
    task = result.scalar_one_or_none()
    if task is None:
        raise NotFoundError("Task", str(task_id))
    return task


async def update_task(
    db: AsyncSession, company_id: uuid.UUID, task_id: uuid.UUID, data: TaskUpdate
) -> TenderTask:
    task = await get_task(db, company_id, task_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(task, key, value)
    await db.commit()
    await db.refresh(task)
    return task


async def delete_task(db: AsyncSession, company_id: uuid.UUID, task_id: uuid.UUID) -> None:
    task = await get_task(db, company_id, task_id)
    task.deleted_at = datetime.now(timezone.utc)
    await db.commit()
