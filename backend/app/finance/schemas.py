import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from app.finance.models import Direction, GoalStatus, PeriodType


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    kind: Direction = Direction.EXPENSE
    color: str | None = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")


class CategoryResponse(BaseModel):
    id: uuid.UUID
    name: str
    kind: Direction
    color: str | None

    model_config = {"from_attributes": True}


class TransactionCreate(BaseModel):
    direction: Direction
    amount: int = Field(gt=0, description="Minor units")
    currency: str = Field("RUB", min_length=3, max_length=3)
    category_id: uuid.UUID | None = None
    description: str | None = Field(None, max_length=1000)
    occurred_at: datetime


class TransactionUpdate(BaseModel):
    direction: Direction | None = None
    amount: int | None = Field(None, gt=0)
    category_id: uuid.UUID | None = None
    description: str | None = Field(None, max_length=1000)
    occurred_at: datetime | None = None


class TransactionResponse(BaseModel):
    id: uuid.UUID
    direction: Direction
    amount: int
    currency: str
    category_id: uuid.UUID | None
    description: str | None
    occurred_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class BudgetCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category_id: uuid.UUID | None = None
    amount_limit: int = Field(gt=0)
    period_type: PeriodType = PeriodType.MONTHLY
    year: int = Field(ge=2000, le=2100)
    month: int | None = Field(None, ge=1, le=12)

    @model_validator(mode="after")
    def _month_matches_period(self) -> "BudgetCreate":
        if self.period_type == PeriodType.YEARLY and self.month is not None:
            raise ValueError("Yearly budgets do not take a month")
        if self.period_type != PeriodType.YEARLY and self.month is None:
            raise ValueError("Monthly and quarterly budgets need a month")
        return self


class BudgetUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    amount_limit: int | None = Field(None, gt=0)


class BudgetResponse(BaseModel):
    id: uuid.UUID
    name: str
    category_id: uuid.UUID | None
    amount_limit: int
    period_type: PeriodType
    year: int
    month: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class GoalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    target_amount: int = Field(gt=0)
    current_amount: int = Field(0, ge=0)
    target_date: date | None = None


class GoalUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    target_amount: int | None = Field(None, gt=0)
    target_date: date | None = None
    status: GoalStatus | None = None


class GoalContribution(BaseModel):
    amount: int = Field(gt=0)


class GoalResponse(BaseModel):
    id: uuid.UUID
    name: str
    target_amount: int
    current_amount: int
    target_date: date | None
    status: GoalStatus
    created_at: datetime

    model_config = {"from_attributes": True}
