"""Shared fixtures and record factories."""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from app.finance.models import Direction, GoalStatus
from app.payments.models import PaymentStatus, PaymentType, Recurrence
from app.reports.records import (
    BudgetRecord,
    EmployeeRef,
    NamedRef,
    PaymentRecord,
    SavingsGoalRecord,
    StageRef,
    TenderRecord,
    TenderTaskRecord,
    TransactionRecord,
)
from app.tenders.models import StageCategory, TaskPriority, TaskStatus, TenderStatus

# Sunday, mid-month
NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def make_stage(name: str = "Preparation", category: StageCategory = StageCategory.TENDER_DEPT, color=None):
    return StageRef(id=uuid.uuid4(), name=name, category=category, color=color)


def make_ref(name: str) -> NamedRef:
    return NamedRef(id=uuid.uuid4(), name=name)


def make_employee(name: str = "Anna Petrova", role: str | None = None) -> EmployeeRef:
    return EmployeeRef(id=uuid.uuid4(), full_name=name, role=role)


def make_tender(
    stage: StageRef | None = None,
    status: TenderStatus = TenderStatus.ACTIVE,
    created_days_ago: float = 10,
    processing_days: float = 0,
    **fields,
) -> TenderRecord:
    created_at = NOW - timedelta(days=created_days_ago)
    data = {
        "id": uuid.uuid4(),
        "status": status,
        "created_at": created_at,
        "updated_at": created_at + timedelta(days=processing_days),
        "stage": stage if stage is not None else make_stage(),
    }
    data.update(fields)
    return TenderRecord(**data)


def make_task(due_date=None, priority=TaskPriority.NORMAL, **fields) -> TenderTaskRecord:
    return TenderTaskRecord(
        id=uuid.uuid4(),
        title=fields.pop("title", "Prepare documents"),
        due_date=due_date,
        priority=priority,
        status=fields.pop("status", TaskStatus.TODO),
        **fields,
    )


def make_transaction(
    amount: int,
    direction: Direction = Direction.EXPENSE,
    occurred_at: datetime = NOW,
    category: str | None = None,
    description: str | None = None,
) -> TransactionRecord:
    ref = make_ref(category) if category else None
    return TransactionRecord(
        id=uuid.uuid4(),
        amount=-amount if direction == Direction.EXPENSE else amount,
        direction=direction,
        occurred_at=occurred_at,
        description=description,
        category_id=ref.id if ref else None,
        category=ref,
    )


def make_budget(category_id: uuid.UUID | None, amount_limit: int) -> BudgetRecord:
    return BudgetRecord(id=uuid.uuid4(), name="Budget", category_id=category_id, amount_limit=amount_limit)


def make_goal(status: GoalStatus = GoalStatus.ACTIVE) -> SavingsGoalRecord:
    return SavingsGoalRecord(id=uuid.uuid4(), name="Reserve", status=status)


def make_payment(
    amount: int,
    planned_date: date = TODAY,
    payment_type: PaymentType = PaymentType.EXPENSE,
    status: PaymentStatus = PaymentStatus.PLANNED,
    recurrence: Recurrence | None = None,
    **fields,
) -> PaymentRecord:
    return PaymentRecord(
        id=uuid.uuid4(),
        name=fields.pop("name", "Rent"),
        payment_type=payment_type,
        amount=amount,
        status=status,
        planned_date=planned_date,
        is_recurring=recurrence is not None,
        recurrence_pattern=recurrence,
        **fields,
    )


@pytest.fixture
def now():
    return NOW
