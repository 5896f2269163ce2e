"""Typed input records for the report builders.

Rows arrive from the data layer either as ORM objects or as plain dicts from
joined queries, where a related row may come back as a bare object, a
single-element list or nothing at all. Records coerce every relation to
``Ref | None`` on the way in, so the builders only ever see one shape.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

from app.finance.models import Direction, GoalStatus
from app.payments.models import PaymentStatus, PaymentType, Recurrence
from app.tenders.models import StageCategory, TaskPriority, TaskStatus, TenderStatus

T = TypeVar("T")


def first_or_none(value: T | list[T] | tuple[T, ...] | None) -> T | None:
    """Unwrap a join result that may be a list-of-one."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class _DatedRecord(_Record):
    @field_validator("*", mode="after")
    @classmethod
    def _normalize_datetimes(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return as_utc(value)
        return value


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class StageRef(_Record):
    id: uuid.UUID
    name: str
    color: str | None = None
    category: StageCategory


class NamedRef(_Record):
    id: uuid.UUID
    name: str


class EmployeeRef(_Record):
    id: uuid.UUID
    full_name: str
    role: str | None = None


# ---------------------------------------------------------------------------
# Tenders
# ---------------------------------------------------------------------------


class TenderRecord(_DatedRecord):
    id: uuid.UUID
    status: TenderStatus
    purchase_number: str | None = None
    subject: str | None = None
    customer: str | None = None
    nmck: int | None = None
    contract_price: int | None = None
    submission_deadline: datetime | None = None
    auction_date: datetime | None = None
    results_date: date | None = None
    review_date: date | None = None
    loss_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    stage: StageRef | None = None
    type: NamedRef | None = None
    platform: NamedRef | None = None
    manager: EmployeeRef | None = None
    specialist: EmployeeRef | None = None

    @field_validator("stage", "type", "platform", "manager", "specialist", mode="before")
    @classmethod
    def _unwrap_relation(cls, value: Any) -> Any:
        return first_or_none(value)

    @property
    def employees(self) -> list[EmployeeRef]:
        """Manager and specialist refs, one entry per set relationship."""
        return [ref for ref in (self.manager, self.specialist) if ref is not None]


class TenderTaskRecord(_DatedRecord):
    id: uuid.UUID
    title: str
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.NORMAL
    tender_id: uuid.UUID | None = None


# ---------------------------------------------------------------------------
# Finance
# ---------------------------------------------------------------------------


class TransactionRecord(_DatedRecord):
    id: uuid.UUID
    amount: int
    direction: Direction
    occurred_at: datetime
    description: str | None = None
    category_id: uuid.UUID | None = None
    category: NamedRef | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _unwrap_category(cls, value: Any) -> Any:
        return first_or_none(value)

    @property
    def category_key(self) -> uuid.UUID | None:
        if self.category_id is not None:
            return self.category_id
        return self.category.id if self.category is not None else None

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category is not None else None

    @property
    def magnitude(self) -> int:
        return abs(self.amount)


class BudgetRecord(_Record):
    id: uuid.UUID
    name: str
    category_id: uuid.UUID | None = None
    amount_limit: int


class SavingsGoalRecord(_Record):
    id: uuid.UUID
    name: str
    status: GoalStatus


# ---------------------------------------------------------------------------
# Payment calendar
# ---------------------------------------------------------------------------


class PaymentRecord(_Record):
    id: uuid.UUID
    name: str
    payment_type: PaymentType
    amount: int
    status: PaymentStatus
    planned_date: date
    actual_date: date | None = None
    is_recurring: bool = False
    recurrence_pattern: Recurrence | None = None
    recurrence_end_date: date | None = None
    tender_id: uuid.UUID | None = None
    # Set on copies generated from a recurring item, never on stored rows.
    is_occurrence: bool = False

    @property
    def effective_date(self) -> date:
        """When the money actually moved, falling back to the plan."""
        return self.actual_date or self.planned_date
