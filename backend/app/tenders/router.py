import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.core.pagination import PaginationParams, get_pagination
from app.dependencies import WRITE_ROLES, get_company_id, get_db, require_role
from app.tenders import service
from app.tenders.models import Employee, TenderPlatform, TenderStage, TenderStatus, TenderType
from app.tenders.schemas import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    NamedCreate,
    NamedResponse,
    PlatformCreate,
    PlatformResponse,
    StageCreate,
    StageResponse,
    StageUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    TenderCreate,
    TenderResponse,
    TenderUpdate,
)

router = APIRouter()

CompanyId = Annotated[uuid.UUID, Depends(get_company_id)]
Db = Annotated[AsyncSession, Depends(get_db)]
Writer = Annotated[User, Depends(require_role(WRITE_ROLES))]


def _add_dictionary_routes(
    path: str,
    model: type,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    response_schema: type[BaseModel],
) -> None:
    """List/create/update/delete endpoints for one company dictionary."""

    async def list_entries(db: Db, company_id: CompanyId) -> dict:
        entries = await service.list_entries(db, model, company_id)
        return {"data": [response_schema.model_validate(e) for e in entries]}

    async def create_entry(data: create_schema, db: Db, user: Writer) -> dict:
        entry = await service.create_entry(db, model, user.company_id, data)
        return {"data": response_schema.model_validate(entry)}

    async def update_entry(entry_id: uuid.UUID, data: update_schema, db: Db, user: Writer) -> dict:
        entry = await service.update_entry(db, model, user.company_id, entry_id, data)
        return {"data": response_schema.model_validate(entry)}

    async def delete_entry(entry_id: uuid.UUID, db: Db, user: Writer) -> dict:
        await service.delete_entry(db, model, user.company_id, entry_id)
        return {"data": {"message": f"{model.__name__} deleted"}}

    router.add_api_route(path, list_entries, methods=["GET"], name=f"list_{model.__tablename__}")
    router.add_api_route(path, create_entry, methods=["POST"], status_code=201, name=f"create_{model.__tablename__}")
    router.add_api_route(f"{path}/{{entry_id}}", update_entry, methods=["PUT"], name=f"update_{model.__tablename__}")
    router.add_api_route(f"{path}/{{entry_id}}", delete_entry, methods=["DELETE"], name=f"delete_{model.__tablename__}")


_add_dictionary_routes("/stages", TenderStage, StageCreate, StageUpdate, StageResponse)
_add_dictionary_routes("/types", TenderType, NamedCreate, NamedCreate, NamedResponse)
_add_dictionary_routes("/platforms", TenderPlatform, PlatformCreate, PlatformCreate, PlatformResponse)
_add_dictionary_routes("/employees", Employee, EmployeeCreate, EmployeeUpdate, EmployeeResponse)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@router.get("/tasks")
async def list_tasks(
    db: Db,
    company_id: CompanyId,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    tender_id: uuid.UUID | None = Query(None),
) -> dict:
    tasks, meta = await service.list_tasks(db, company_id, pagination, tender_id)
    return {"data": [TaskResponse.model_validate(t) for t in tasks], "meta": meta}


@router.post("/tasks", status_code=201)
async def create_task(data: TaskCreate, db: Db, user: Writer) -> dict:
    task = await service.create_task(db, user.company_id, data)
    return {"data": TaskResponse.model_validate(task)}


@router.get("/tasks/{task_id}")
async def get_task(task_id: uuid.UUID, db: Db, company_id: CompanyId) -> dict:
    task = await service.get_task(db, company_id, task_id)
    return {"data": TaskResponse.model_validate(task)}


@router.put("/tasks/{task_id}")
async def update_task(task_id: uuid.UUID, data: TaskUpdate, db: Db, user: Writer) -> dict:
    task = await service.update_task(db, user.company_id, task_id, data)
    return {"data": TaskResponse.model_validate(task)}


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: uuid.UUID, db: Db, user: Writer) -> dict:
    await service.delete_task(db, user.company_id, task_id)
    return {"data": {"message": "Task deleted"}}


# ---------------------------------------------------------------------------
# Tenders
# ---------------------------------------------------------------------------


@router.get("")
async def list_tenders(
    db: Db,
    company_id: CompanyId,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    status: TenderStatus | None = Query(None),
    stage_id: uuid.UUID | None = Query(None),
    employee_id: uuid.UUID | None = Query(None),
    search: str | None = Query(None),
) -> dict:
    tenders, meta = await service.list_tenders(
        db, company_id, pagination, status=status, stage_id=stage_id, employee_id=employee_id, search=search
    )
    return {"data": [TenderResponse.model_validate(t) for t in tenders], "meta": meta}


@router.post("", status_code=201)
async def create_tender(data: TenderCreate, db: Db, user: Writer) -> dict:
    tender = await service.create_tender(db, user.company_id, data)
    return {"data": TenderResponse.model_validate(tender)}


@router.get("/{tender_id}")
async def get_tender(tender_id: uuid.UUID, db: Db, company_id: CompanyId) -> dict:
    tender = await service.get_tender(db, company_id, tender_id)
    return {"data": TenderResponse.model_validate(tender)}


@router.put("/{tender_id}")
async def update_tender(tender_id: uuid.UUID, data: TenderUpdate, db: Db, user: Writer) -> dict:
    tender = await service.update_tender(db, user.company_id, tender_id, data)
    return {"data": TenderResponse.model_validate(tender)}


@router.delete("/{tender_id}")
async def delete_tender(tender_id: uuid.UUID, db: Db, user: Writer) -> dict:
    await service.delete_tender(db, user.company_id, tender_id)
    return {"data": {"message": "Tender deleted"}}
