import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.core.pagination import PaginationParams, get_pagination
from app.dependencies import WRITE_ROLES, get_company_id, get_db, require_role
from app.finance import service
from app.finance.models import Direction
from app.finance.schemas import (
    BudgetCreate,
    BudgetResponse,
    BudgetUpdate,
    CategoryCreate,
    CategoryResponse,
    GoalContribution,
    GoalCreate,
    GoalResponse,
    GoalUpdate,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)

router = APIRouter()

CompanyId = Annotated[uuid.UUID, Depends(get_company_id)]
Db = Annotated[AsyncSession, Depends(get_db)]
Writer = Annotated[User, Depends(require_role(WRITE_ROLES))]


# Categories


@router.get("/categories")
async def list_categories(db: Db, company_id: CompanyId) -> dict:
    categories = await service.list_categories(db, company_id)
    return {"data": [CategoryResponse.model_validate(c) for c in categories]}


@router.post("/categories", status_code=201)
async def create_category(data: CategoryCreate, db: Db, user: Writer) -> dict:
    category = await service.create_category(db, user.company_id, data)
    return {"data": CategoryResponse.model_validate(category)}


@router.delete("/categories/{category_id}")
async def delete_category(category_id: uuid.UUID, db: Db, user: Writer) -> dict:
    await service.delete_category(db, user.company_id, category_id)
    return {"data": {"message": "Category deleted"}}


# Transactions


@router.get("/transactions")
async def list_transactions(
    db: Db,
    company_id: CompanyId,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    direction: Direction | None = Query(None),
    category_id: uuid.UUID | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
) -> dict:
    transactions, meta = await service.list_transactions(
        db, company_id, pagination, direction, category_id, date_from, date_to
    )
    return {"data": [TransactionResponse.model_validate(t) for t in transactions], "meta": meta}


@router.post("/transactions", status_code=201)
async def create_transaction(data: TransactionCreate, db: Db, user: Writer) -> dict:
    transaction = await service.create_transaction(db, user.company_id, data)
    return {"data": TransactionResponse.model_validate(transaction)}


@router.get("/transactions/{transaction_id}")
async def get_transaction(transaction_id: uuid.UUID, db: Db, company_id: CompanyId) -> dict:
    transaction = await service.get_transaction(db, company_id, transaction_id)
    return {"data": TransactionResponse.model_validate(transaction)}


@router.put("/transactions/{transaction_id}")
async def update_transaction(transaction_id: uuid.UUID, data: TransactionUpdate, db: Db, user: Writer) -> dict:
    transaction = await service.update_transaction(db, user.company_id, transaction_id, data)
    return {"data": TransactionResponse.model_validate(transaction)}


@router.delete("/transactions/{transaction_id}")
async def delete_transaction(transaction_id: uuid.UUID, db: Db, user: Writer) -> dict:
    await service.delete_transaction(db, user.company_id, transaction_id)
    return {"data": {"message": "Transaction deleted"}}


# Budgets


@router.get("/budgets")
async def list_budgets(
    db: Db,
    company_id: CompanyId,
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
    year: int | None = Query(None),
) -> dict:
    budgets, meta = await service.list_budgets(db, company_id, pagination, year)
    return {"data": [BudgetResponse.model_validate(b) for b in budgets], "meta": meta}


@router.post("/budgets", status_code=201)
async def create_budget(data: BudgetCreate, db: Db, user: Writer) -> dict:
    budget = await service.create_budget(db, user.company_id, data)
    return {"data": BudgetResponse.model_validate(budget)}


@router.put("/budgets/{budget_id}")
async def update_budget(budget_id: uuid.UUID, data: BudgetUpdate, db: Db, user: Writer) -> dict:
    budget = await service.update_budget(db, user.company_id, budget_id, data)
    return {"data": BudgetResponse.model_validate(budget)}


@router.delete("/budgets/{budget_id}")
async def delete_budget(budget_id: uuid.UUID, db: Db, user: Writer) -> dict:
    await service.delete_budget(db, user.company_id, budget_id)
    return {"data": {"message": "Budget deleted"}}


# Savings goals


@router.get("/goals")
async def list_goals(db: Db, company_id: CompanyId) -> dict:
    goals = await service.list_goals(db, company_id)
    return {"data": [GoalResponse.model_validate(g) for g in goals]}


@router.post("/goals", status_code=201)
async def create_goal(data: GoalCreate, db: Db, user: Writer) -> dict:
    goal = await service.create_goal(db, user.company_id, data)
    return {"data": GoalResponse.model_validate(goal)}


@router.put("/goals/{goal_id}")
async def update_goal(goal_id: uuid.UUID, data: GoalUpdate, db: Db, user: Writer) -> dict:
    goal = await service.update_goal(db, user.company_id, goal_id, data)
    return {"data": GoalResponse.model_validate(goal)}


@router.post("/goals/{goal_id}/contributions")
async def contribute(goal_id: uuid.UUID, body: GoalContribution, db: Db, user: Writer) -> dict:
    goal = await service.contribute_to_goal(db, user.company_id, goal_id, body.amount)
    return {"data": GoalResponse.model_validate(goal)}


@router.delete("/goals/{goal_id}")
async def delete_goal(goal_id: uuid.UUID, db: Db, user: Writer) -> dict:
    await service.delete_goal(db, user.company_id, goal_id)
    return {"data": {"message": "Goal deleted"}}
