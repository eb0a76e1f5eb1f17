"""Authentication endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db
from core import create_access_token, hash_password, needs_rehash
from core.errors import InvalidCredentials, RegistrationFailed
from models import User
from services.auth import normalize_email, resolve_login_user

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

MAX_PASSWORD_LENGTH = 128


class RegisterRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: EmailStr
    full_name: str = Field(min_length=1, max_length=120)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)
    image: str | None = None
    role: str | None = Field(default=None, max_length=50)

    @field_validator("full_name")
    @classmethod
    def _reject_blank_full_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Full name must not be empty")
        return normalized


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


class TokenResponse(BaseModel):
    token: str


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=TokenResponse)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db),
) -> TokenResponse:
    user = User(
        email=normalize_email(str(payload.email)),
        full_name=payload.full_name,
        password_hash=hash_password(payload.password),
        image=payload.image,
        role=payload.role,
    )
    session.add(user)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        # Duplicate emails land here too; the cause is not exposed to clients.
        logger.info("Registration rejected by the store", exc_info=exc)
        raise RegistrationFailed() from exc

    logger.info("User registered: %s", user.id)
    return TokenResponse(token=create_access_token(user.id))


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db),
) -> TokenResponse:
    user = await resolve_login_user(
        session,
        email=payload.email,
        password=payload.password,
    )
    if user is None:
        raise InvalidCredentials()

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(payload.password)
        session.add(user)
        await session.commit()

    return TokenResponse(token=create_access_token(user.id))
