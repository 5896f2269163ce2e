import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.dependencies import get_company_id, get_db, get_settings
from app.reports import service
from app.reports.pdf import generate_department_pdf, generate_health_pdf

router = APIRouter()


@router.get("/department")
async def department(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    settings: Annotated[Settings, Depends(get_settings)],
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    specialist_id: uuid.UUID | None = Query(None),
) -> dict:
    report = await service.get_department_report(db, company_id, settings, date_from, date_to, specialist_id)
    return {"data": report.model_dump(mode="json", by_alias=True)}


@router.get("/department/pdf")
async def department_pdf(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    settings: Annotated[Settings, Depends(get_settings)],
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    specialist_id: uuid.UUID | None = Query(None),
) -> Response:
    report = await service.get_department_report(db, company_id, settings, date_from, date_to, specialist_id)
    today = date.today()
    pdf_bytes = generate_department_pdf(report, settings.business_name, settings.currency, today)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="department-{today}.pdf"'},
    )


@router.get("/tender-calendar")
async def tender_calendar(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    calendar = await service.get_tender_calendar(db, company_id, settings)
    return {"data": calendar.model_dump(mode="json", by_alias=True)}


@router.get("/financial-health")
async def financial_health(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    report = await service.get_financial_health(db, company_id, settings)
    return {"data": report.model_dump()}


@router.get("/financial-health/pdf")
async def financial_health_pdf(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    report = await service.get_financial_health(db, company_id, settings)
    return Response(
        content=generate_health_pdf(report, settings.business_name),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="financial-health-{date.today()}.pdf"'},
    )


@router.get("/seasonality")
async def seasonality(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    settings: Annotated[Settings, Depends(get_settings)],
    months_back: int | None = Query(None, ge=1, le=60),
) -> dict:
    report = await service.get_seasonality(db, company_id, months_back or settings.seasonality_months_back)
    return {"data": report.model_dump()}


@router.get("/payment-summary")
async def payment_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    summary = await service.get_payment_summary(db, company_id, settings)
    return {"data": summary.model_dump()}


@router.get("/cash-flow")
async def cash_flow(
    db: Annotated[AsyncSession, Depends(get_db)],
    company_id: Annotated[uuid.UUID, Depends(get_company_id)],
    year: int | None = Query(None, ge=2000, le=2100),
) -> dict:
    report = await service.get_cash_flow(db, company_id, year or date.today().year)
    return {"data": report.model_dump()}
