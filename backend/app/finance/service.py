from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.pagination import PaginationParams, paginate
from app.finance.models import Budget, Direction, GoalStatus, SavingsGoal, Transaction, TransactionCategory
from app.finance.schemas import (
    BudgetCreate,
    BudgetUpdate,
    CategoryCreate,
    GoalCreate,
    GoalUpdate,
    TransactionCreate,
    TransactionUpdate,
)


async def _get_owned(db: AsyncSession, model: type, company_id: uuid.UUID, item_id: uuid.UUID, label: str):
    result = await db.execute(select(model).where(model.id == item_id, model.company_id == company_id))
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError(label, str(item_id))
    return item


async def _check_category(db: AsyncSession, company_id: uuid.UUID, category_id: uuid.UUID | None) -> None:
    if category_id is None:
        return
    found = await db.scalar(
        select(TransactionCategory.id).where(
            TransactionCategory.id == category_id, TransactionCategory.company_id == company_id
        )
    )
    if found is None:
        raise ValidationError(f"Category {category_id} does not belong to this company.")


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


async def list_categories(db: AsyncSession, company_id: uuid.UUID) -> list[TransactionCategory]:
    result = await db.execute(
        select(TransactionCategory)
        .where(TransactionCategory.company_id == company_id)
        .order_by(TransactionCategory.name)
    )
    return list(result.scalars().all())


async def create_category(db: AsyncSession, company_id: uuid.UUID, data: CategoryCreate) -> TransactionCategory:
    existing = await db.scalar(
        select(TransactionCategory.id).where(
            TransactionCategory.company_id == company_id, TransactionCategory.name == data.name
        )
    )
    if existing is not None:
        raise ConflictError(f"Category '{data.name}' already exists.")
    category = TransactionCategory(company_id=company_id, **data.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, company_id: uuid.UUID, category_id: uuid.UUID) -> None:
    category = await _get_owned(db, TransactionCategory, company_id, category_id, "Category")
    await db.delete(category)
    await db.commit()


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


async def create_transaction(db: AsyncSession, company_id: uuid.UUID, data: TransactionCreate) -> Transaction:
    await _check_category(db, company_id, data.category_id)
    transaction = Transaction(company_id=company_id, **data.model_dump())
    db.add(transaction)
    await db.commit()
    await db.refresh(transaction)
    return transaction


async def list_transactions(
    db: AsyncSession,
    company_id: uuid.UUID,
    pagination: PaginationParams,
    direction: Direction | None = None,
    category_id: uuid.UUID | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> tuple[list[Transaction], dict]:
    query = select(Transaction).where(Transaction.company_id == company_id)
    if direction is not None:
        query = query.where(Transaction.direction == direction)
    if category_id is not None:
        query = query.where(Transaction.category_id == category_id)
    if date_from is not None:
        query = query.where(Transaction.occurred_at >= date_from)
    if date_to is not None:
        query = query.where(Transaction.occurred_at <= date_to)
    return await paginate(db, query.order_by(Transaction.occurred_at.desc()), pagination)


async def get_transaction(db: AsyncSession, company_id: uuid.UUID, transaction_id: uuid.UUID) -> Transaction:
    return await _get_owned(db, Transaction, company_id, transaction_id, "Transaction")


async def update_transaction(
    db: AsyncSession, company_id: uuid.UUID, transaction_id: uuid.UUID, data: TransactionUpdate
) -> Transaction:
    transaction = await get_transaction(db, company_id, transaction_id)
    changes = data.model_dump(exclude_unset=True)
    if "category_id" in changes:
        await _check_category(db, company_id, changes["category_id"])
    for key, value in changes.items():
        setattr(transaction, key, value)
    await db.commit()
    await db.refresh(transaction)
    return transaction


async def delete_transaction(db: AsyncSession, company_id: uuid.UUID, transaction_id: uuid.UUID) -> None:
    transaction = await get_transaction(db, company_id, transaction_id)
    await db.delete(transaction)
    await db.commit()


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------


async def create_budget(db: AsyncSession, company_id: uuid.UUID, data: BudgetCreate) -> Budget:
    await _check_category(db, company_id, data.category_id)
    duplicate = await db.scalar(
        select(Budget.id).where(
            Budget.company_id == company_id,
            Budget.category_id == data.category_id,
            Budget.period_type == data.period_type,
            Budget.year == data.year,
            Budget.month == data.month,
        )
    )
    if duplicate is not None:
        raise ConflictError("A budget already exists for this category/period combination.")

    budget = Budget(company_id=company_id, **data.model_dump())
    db.add(budget)
    await db.commit()
    await db.refresh(budget)
    return budget


async def list_budgets(
    db: AsyncSession, company_id: uuid.UUID, pagination: PaginationParams, year: int | None = None
) -> tuple[list[Budget], dict]:
    query = select(Budget).where(Budget.company_id == company_id)
    if year is not None:
        query = query.where(Budget.year == year)
    return await paginate(db, query.order_by(Budget.year.desc(), Budget.month), pagination)


async def update_budget(
    db: AsyncSession, company_id: uuid.UUID, budget_id: uuid.UUID, data: BudgetUpdate
) -> Budget:
    budget = await _get_owned(db, Budget, company_id, budget_id, "Budget")
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(budget, key, value)
    await db.commit()
    await db.refresh(budget)
    return budget


async def delete_budget(db: AsyncSession, company_id: uuid.UUID, budget_id: uuid.UUID) -> None:
    budget = await _get_owned(db, Budget, company_id, budget_id, "Budget")
    await db.delete(budget)
    await db.commit()


# ---------------------------------------------------------------------------
# Savings goals
# ---------------------------------------------------------------------------


async def list_goals(db: AsyncSession, company_id: uuid.UUID) -> list[SavingsGoal]:
    result = await db.execute(
        select(SavingsGoal).where(SavingsGoal.company_id == company_id).order_by(SavingsGoal.created_at)
    )
    return list(result.scalars().all())


async def create_goal(db: AsyncSession, company_id: uuid.UUID, data: GoalCreate) -> SavingsGoal:
    goal = SavingsGoal(company_id=company_id, **data.model_dump())
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal


async def update_goal(db: AsyncSession, company_id: uuid.UUID, goal_id: uuid.UUID, data: GoalUpdate) -> SavingsGoal:
    goal = await _get_owned(db, SavingsGoal, company_id, goal_id, "Goal")
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(goal, key, value)
    await db.commit()
    await db.refresh(goal)
    return goal


async def contribute_to_goal(db: AsyncSession, company_id: uuid.UUID, goal_id: uuid.UUID, amount: int) -> SavingsGoal:
    goal = await _get_owned(db, SavingsGoal, company_id, goal_id, "Goal")
    if goal.status != GoalStatus.ACTIVE:
        raise ValidationError("Only active goals accept contributions.")
    goal.current_amount += amount
    if goal.current_amount >= goal.target_amount:
        goal.status = GoalStatus.COMPLETED
    await db.commit()
    await db.refresh(goal)
    return goal


async def delete_goal(db: AsyncSession, company_id: uuid.UUID, goal_id: uuid.UUID) -> None:
    goal = await _get_owned(db, SavingsGoal, company_id, goal_id, "Goal")
    await db.delete(goal)
    await db.commit()
