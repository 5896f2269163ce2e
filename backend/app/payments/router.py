import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.config import Settings
from app.core.pagination import PaginationParams, get_pagination
from app.dependencies import WRITE_ROLES, get_company_id, get_db, get_settings, require_role
from app.payments import service
from app.payments.models import PaymentStatus, PaymentType
from app.payments.schemas import PaymentCreate, PaymentResponse, PaymentStatusUpdate, PaymentUpdate

router = APIRouter()

CompanyId = Annotated[uuid.UUID, Depends(get_company_id)]
Db = Annotated[AsyncSession, Depends(get_db)]
Writer = Annotated[User, Depends(require_role(WRITE_ROLES))]


@router.get("")
async def list_payments(
    db: Db,
    company_id: CompanyId,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    status: PaymentStatus | None = Query(None),
    payment_type: PaymentType | None = Query(None),
    tender_id: uuid.UUID | None = Query(None),
) -> dict:
    items, meta = await service.list_payments(
        db, company_id, pagination, date_from, date_to, status, payment_type, tender_id
    )
    return {"data": [PaymentResponse.model_validate(p) for p in items], "meta": meta}


@router.post("", status_code=201)
async def create_payment(data: PaymentCreate, db: Db, user: Writer) -> dict:
    item = await service.create_payment(db, user.company_id, data)
    return {"data": PaymentResponse.model_validate(item)}


@router.get("/upcoming")
async def upcoming_payments(
    db: Db,
    company_id: CompanyId,
    settings: Annotated[Settings, Depends(get_settings)],
    days: int | None = Query(None, ge=1, le=365),
) -> dict:
    items = await service.get_upcoming_payments(db, company_id, days or settings.upcoming_payment_days)
    return {"data": [PaymentResponse.model_validate(p) for p in items]}


@router.get("/overdue")
async def overdue_payments(db: Db, company_id: CompanyId) -> dict:
    items = await service.get_overdue_payments(db, company_id)
    return {"data": [PaymentResponse.model_validate(p) for p in items]}


@router.post("/mark-overdue")
async def mark_overdue(db: Db, user: Writer) -> dict:
    count = await service.mark_overdue_payments(db, user.company_id)
    return {"data": {"marked": count}}


@router.get("/{payment_id}")
async def get_payment(payment_id: uuid.UUID, db: Db, company_id: CompanyId) -> dict:
    item = await service.get_payment(db, company_id, payment_id)
    return {"data": PaymentResponse.model_validate(item)}


@router.put("/{payment_id}")
async def update_payment(payment_id: uuid.UUID, data: PaymentUpdate, db: Db, user: Writer) -> dict:
    item = await service.update_payment(db, user.company_id, payment_id, data)
    return {"data": PaymentResponse.model_validate(item)}


@router.patch("/{payment_id}/status")
async def update_status(payment_id: uuid.UUID, data: PaymentStatusUpdate, db: Db, user: Writer) -> dict:
    item = await service.update_payment_status(db, user.company_id, payment_id, data)
    return {"data": PaymentResponse.model_validate(item)}


@router.delete("/{payment_id}")
async def delete_payment(payment_id: uuid.UUID, db: Db, user: Writer) -> dict:
    await service.delete_payment(db, user.company_id, payment_id)
    return {"data": {"message": "Payment deleted"}}
