import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.auth.models import Role


class CompanyResponse(BaseModel):
    id: uuid.UUID
    name: str
    currency: str

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Self sign-up: opens a new company workspace owned by the user."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    full_name: str = Field(min_length=1, max_length=255)
    company_name: str = Field(min_length=1, max_length=255)
    currency: str = Field("RUB", min_length=3, max_length=3)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    email: str
    full_name: str
    role: Role
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    password: str | None = Field(None, min_length=8, max_length=128)


class UserRoleUpdate(BaseModel):
    role: Role


class MemberCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    full_name: str = Field(min_length=1, max_length=255)
    role: Role = Role.VIEWER


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefreshRequest(BaseModel):
    refresh_token: str
