from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Company, RefreshToken, Role, User
from app.auth.schemas import MemberCreate, TokenResponse, UserCreate
from app.auth.utils import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)
from app.config import Settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


async def _ensure_email_free(db: AsyncSession, email: str) -> None:
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none() is not None:
        raise ConflictError(f"A user with email {email} already exists.")


async def register_user(
    db: AsyncSession,
    user_data: UserCreate,
    settings: Settings,
) -> User:
    """Open a new company and make the registering user its admin."""
    await _ensure_email_free(db, user_data.email)

    company = Company(name=user_data.company_name, currency=user_data.currency.upper())
    db.add(company)
    await db.flush()

    user = User(
        company_id=company.id,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        full_name=user_data.full_name,
        role=Role.ADMIN,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered company %s with admin %s", company.id, user.email)
    return user


async def add_member(db: AsyncSession, company_id: uuid.UUID, data: MemberCreate) -> User:
    await _ensure_email_free(db, data.email)
    user = User(
        company_id=company_id,
        email=data.email,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
        role=data.role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_member(db: AsyncSession, company_id: uuid.UUID, user_id: uuid.UUID) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id, User.company_id == company_id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User", str(user_id))
    return user


async def _issue_tokens(db: AsyncSession, user: User, settings: Settings) -> TokenResponse:
    access_token = create_access_token(user.id, user.company_id, user.role.value, settings)
    refresh_token = create_refresh_token(user.id, settings)

    db.add(
        RefreshToken(
            user_id=user.id,
            token_hash=hash_token(refresh_token),
            expires_at=datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days),
        )
    )
    await db.commit()
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


async def authenticate_user(
    db: AsyncSession,
    email: str,
    password: str,
    settings: Settings,
) -> TokenResponse:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.hashed_password):
        raise ValidationError("Invalid email or password.")

    if not user.is_active:
        raise ValidationError("Account is deactivated.")

    return await _issue_tokens(db, user, settings)


async def refresh_tokens(
    db: AsyncSession,
    refresh_token: str,
    settings: Settings,
) -> TokenResponse:
    token_data = decode_token(refresh_token, settings)
    if token_data is None or token_data.type != "refresh":
        raise ValidationError("Invalid or expired refresh token.")

    result = await db.execute(
        select(RefreshToken).where(
            RefreshToken.token_hash == hash_token(refresh_token),
            RefreshToken.revoked.is_(False),
        )
    )
    stored_token = result.scalar_one_or_none()
    if stored_token is None:
        raise ValidationError("Refresh token not found or already revoked.")

    expires_at = stored_token.expires_at
    if expires_at.tzinfo is None:
        # SQLite hands back naive UTC timestamps
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at < datetime.now(timezone.utc):
        raise ValidationError("Refresh token has expired.")

    stored_token.revoked = True

    result = await db.execute(select(User).where(User.id == token_data.sub))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise ValidationError("User not found or inactive.")

    return await _issue_tokens(db, user, settings)


async def revoke_refresh_token(db: AsyncSession, refresh_token: str) -> None:
    result = await db.execute(
        select(RefreshToken).where(RefreshToken.token_hash == hash_token(refresh_token))
    )
    stored_token = result.scalar_one_or_none()
    if stored_token:
        stored_token.revoked = True
        await db.commit()
