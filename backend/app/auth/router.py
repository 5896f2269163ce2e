import uuid
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Role, User
from app.auth.schemas import (
    CompanyResponse,
    MemberCreate,
    TokenRefreshRequest,
    UserCreate,
    UserLogin,
    UserResponse,
    UserRoleUpdate,
    UserUpdate,
)
from app.auth.service import (
    add_member,
    authenticate_user,
    get_member,
    refresh_tokens,
    register_user,
    revoke_refresh_token,
)
from app.auth.utils import hash_password
from app.config import Settings
from app.dependencies import get_current_user, get_db, get_settings, require_role

router = APIRouter()


@router.post("/register", status_code=201)
async def register(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    user = await register_user(db, user_data, settings)
    return {"data": UserResponse.model_validate(user)}


@router.post("/login")
async def login(
    credentials: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    tokens = await authenticate_user(db, credentials.email, credentials.password, settings)
    return {"data": tokens}


@router.post("/refresh")
async def refresh(
    body: TokenRefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict:
    tokens = await refresh_tokens(db, body.refresh_token, settings)
    return {"data": tokens}


@router.post("/logout")
async def logout(
    body: TokenRefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(get_current_user)],
) -> dict:
    await revoke_refresh_token(db, body.refresh_token)
    return {"data": {"message": "Logged out successfully"}}


@router.get("/me")
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    return {"data": UserResponse.model_validate(current_user)}


@router.put("/me")
async def update_me(
    updates: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    if updates.full_name is not None:
        current_user.full_name = updates.full_name
    if updates.password is not None:
        current_user.hashed_password = hash_password(updates.password)
    await db.commit()
    await db.refresh(current_user)
    return {"data": UserResponse.model_validate(current_user)}


@router.get("/company")
async def get_company(
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    return {"data": CompanyResponse.model_validate(current_user.company)}


@router.get("/users")
async def list_users(
    admin: Annotated[User, Depends(require_role([Role.ADMIN]))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    result = await db.execute(
        select(User).where(User.company_id == admin.company_id).order_by(User.created_at)
    )
    return {"data": [UserResponse.model_validate(u) for u in result.scalars().all()]}


@router.post("/users", status_code=201)
async def create_user(
    body: MemberCreate,
    admin: Annotated[User, Depends(require_role([Role.ADMIN]))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    user = await add_member(db, admin.company_id, body)
    return {"data": UserResponse.model_validate(user)}


@router.put("/users/{user_id}/role")
async def update_user_role(
    user_id: uuid.UUID,
    body: UserRoleUpdate,
    admin: Annotated[User, Depends(require_role([Role.ADMIN]))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    user = await get_member(db, admin.company_id, user_id)
    user.role = body.role
    await db.commit()
    await db.refresh(user)
    return {"data": UserResponse.model_validate(user)}


@router.delete("/users/{user_id}")
async def deactivate_user(
    user_id: uuid.UUID,
    admin: Annotated[User, Depends(require_role([Role.ADMIN]))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    user = await get_member(db, admin.company_id, user_id)
    user.is_active = False
    await db.commit()
    return {"data": {"message": f"User {user.email} deactivated"}}
