from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from app.config import Settings


@dataclass
class TokenPayload:
    sub: uuid.UUID
    company_id: uuid.UUID | None
    role: str
    exp: datetime
    type: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def _encode(claims: dict, lifetime: timedelta, settings: Settings) -> str:
    payload = {**claims, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(
    user_id: uuid.UUID, company_id: uuid.UUID, role: str, settings: Settings | None = None
) -> str:
    settings = settings or Settings()
    return _encode(
        {"sub": str(user_id), "cid": str(company_id), "role": role, "type": "access"},
        timedelta(minutes=settings.access_token_expire_minutes),
        settings,
    )


def create_refresh_token(user_id: uuid.UUID, settings: Settings | None = None) -> str:
    settings = settings or Settings()
    return _encode(
        # jti keeps two refresh tokens issued within the same second distinct
        {"sub": str(user_id), "type": "refresh", "jti": uuid.uuid4().hex},
        timedelta(days=settings.refresh_token_expire_days),
        settings,
    )


def decode_token(token: str, settings: Settings | None = None) -> TokenPayload | None:
    settings = settings or Settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        company_id = payload.get("cid")
        return TokenPayload(
            sub=uuid.UUID(payload["sub"]),
            company_id=uuid.UUID(company_id) if company_id else None,
            role=payload.get("role", "viewer"),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            type=payload.get("type", "access"),
        )
    except (JWTError, ValueError, KeyError):
        return None


def hash_token(token: str) -> str:
    """Hash a refresh token for storage."""
    return hashlib.sha256(token.encode()).hexdigest()
