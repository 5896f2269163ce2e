import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from app.payments.models import PaymentPriority, PaymentStatus, PaymentType, Recurrence


class PaymentCreate(BaseModel):
    payment_type: PaymentType
    name: str = Field(min_length=1, max_length=255)
    amount: int = Field(gt=0, description="Minor units")
    planned_date: date
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    currency: str = Field("RUB", min_length=3, max_length=3)
    priority: PaymentPriority = PaymentPriority.NORMAL
    is_recurring: bool = False
    recurrence_pattern: Recurrence | None = None
    recurrence_end_date: date | None = None
    counterparty_name: str | None = Field(None, max_length=255)
    tender_id: uuid.UUID | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _recurrence_complete(self) -> "PaymentCreate":
        if self.is_recurring and self.recurrence_pattern is None:
            raise ValueError("Recurring payments need a recurrence pattern")
        if self.recurrence_end_date is not None and self.recurrence_end_date < self.planned_date:
            raise ValueError("Recurrence must end after the first planned date")
        return self


class PaymentUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    amount: int | None = Field(None, gt=0)
    planned_date: date | None = None
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    priority: PaymentPriority | None = None
    is_recurring: bool | None = None
    recurrence_pattern: Recurrence | None = None
    recurrence_end_date: date | None = None
    counterparty_name: str | None = Field(None, max_length=255)
    tender_id: uuid.UUID | None = None
    notes: str | None = None


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    actual_date: date | None = None


class PaymentResponse(BaseModel):
    id: uuid.UUID
    payment_type: PaymentType
    category: str | None
    name: str
    description: str | None
    amount: int
    currency: str
    planned_date: date
    actual_date: date | None
    status: PaymentStatus
    priority: PaymentPriority
    is_recurring: bool
    recurrence_pattern: Recurrence | None
    recurrence_end_date: date | None
    counterparty_name: str | None
    tender_id: uuid.UUID | None
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
