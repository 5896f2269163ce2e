import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from app.tenders.models import StageCategory, TaskPriority, TaskStatus, TenderStatus

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


# ---------------------------------------------------------------------------
# Dictionaries
# ---------------------------------------------------------------------------


class StageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str | None = Field(None, pattern=HEX_COLOR)
    category: StageCategory = StageCategory.TENDER_DEPT
    sort_order: int = 0


class StageUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    color: str | None = Field(None, pattern=HEX_COLOR)
    category: StageCategory | None = None
    sort_order: int | None = None


class StageResponse(BaseModel):
    id: uuid.UUID
    name: str
    color: str | None
    category: StageCategory
    sort_order: int

    model_config = {"from_attributes": True}


class NamedCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class NamedResponse(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class PlatformCreate(NamedCreate):
    url: str | None = Field(None, max_length=500)


class PlatformResponse(NamedResponse):
    url: str | None


class EmployeeCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    role: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)
    is_active: bool = True


class EmployeeUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    role: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class EmployeeResponse(BaseModel):
    id: uuid.UUID
    full_name: str
    role: str | None
    email: str | None
    is_active: bool

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Tenders
# ---------------------------------------------------------------------------


class TenderCreate(BaseModel):
    purchase_number: str | None = Field(None, max_length=100)
    subject: str | None = None
    customer: str | None = Field(None, max_length=500)
    status: TenderStatus = TenderStatus.DRAFT
    stage_id: uuid.UUID | None = None
    type_id: uuid.UUID | None = None
    platform_id: uuid.UUID | None = None
    manager_id: uuid.UUID | None = None
    specialist_id: uuid.UUID | None = None
    nmck: int | None = Field(None, ge=0, description="Initial maximum contract price, minor units")
    contract_price: int | None = Field(None, ge=0)
    submission_deadline: datetime | None = None
    auction_date: datetime | None = None
    results_date: date | None = None
    review_date: date | None = None
    loss_reason: str | None = Field(None, max_length=255)


class TenderUpdate(BaseModel):
    purchase_number: str | None = Field(None, max_length=100)
    subject: str | None = None
    customer: str | None = Field(None, max_length=500)
    status: TenderStatus | None = None
    stage_id: uuid.UUID | None = None
    type_id: uuid.UUID | None = None
    platform_id: uuid.UUID | None = None
    manager_id: uuid.UUID | None = None
    specialist_id: uuid.UUID | None = None
    nmck: int | None = Field(None, ge=0)
    contract_price: int | None = Field(None, ge=0)
    submission_deadline: datetime | None = None
    auction_date: datetime | None = None
    results_date: date | None = None
    review_date: date | None = None
    loss_reason: str | None = Field(None, max_length=255)


class TenderResponse(BaseModel):
    id: uuid.UUID
    purchase_number: str | None
    subject: str | None
    customer: str | None
    status: TenderStatus
    stage_id: uuid.UUID | None
    type_id: uuid.UUID | None
    platform_id: uuid.UUID | None
    manager_id: uuid.UUID | None
    specialist_id: uuid.UUID | None
    nmck: int | None
    contract_price: int | None
    submission_deadline: datetime | None
    auction_date: datetime | None
    results_date: date | None
    review_date: date | None
    loss_reason: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskCreate(BaseModel):
    tender_id: uuid.UUID | None = None
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.NORMAL


class TaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None


class TaskResponse(BaseModel):
    id: uuid.UUID
    tender_id: uuid.UUID | None
    title: str
    description: str | None
    due_date: datetime | None
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime

    model_config = {"from_attributes": True}
