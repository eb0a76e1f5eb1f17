"""User profile endpoints."""

from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_current_user_id, get_db
from core import hash_password, verify_password
from core.errors import (
    EmailTaken,
    InvalidCredentials,
    StoreFailure,
    UserNotFound,
)
from db.errors import is_unique_violation
from models import User
from services.auth import email_in_use, normalize_email

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)


def _asc(column: Any) -> Any:
    return cast(Any, column).asc()


class UserResponse(BaseModel):
    """Public projection of a user; the password hash never leaves the store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    email: EmailStr
    full_name: str
    image: str | None = None
    role: str | None = None


class EditProfileRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_password: str = Field(min_length=1)
    new_password: str | None = Field(default=None, min_length=1, max_length=128)
    email: EmailStr | None = None

    @field_validator("new_password", "email", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        # An empty field means "leave unchanged".
        if value == "":
            return None
        return value

    @model_validator(mode="after")
    def _require_change(self) -> "EditProfileRequest":
        if self.new_password is None and self.email is None:
            raise ValueError("Provide either a new password or an email")
        return self


class MessageResponse(BaseModel):
    message: str


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    _user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    result = await session.execute(select(User).order_by(_asc(User.created_at), _asc(User.id)))
    return [UserResponse.model_validate(user) for user in result.scalars().all()]


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    _caller_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    user = await session.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated user's profile."""
    return UserResponse.model_validate(current_user)


@router.put("/me/edit", response_model=MessageResponse)
async def edit_me(
    payload: EditProfileRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Change the caller's password and/or email after re-checking the password."""
    user_id = current_user.id
    if not verify_password(payload.current_password, current_user.password_hash):
        raise InvalidCredentials("Invalid current password")

    if payload.email is not None:
        new_email = normalize_email(str(payload.email))
        if await email_in_use(session, new_email, exclude_user_id=user_id):
            raise EmailTaken()
        current_user.email = new_email
    if payload.new_password is not None:
        current_user.password_hash = hash_password(payload.new_password)

    session.add(current_user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_unique_violation(exc):
            raise EmailTaken() from exc
        logger.exception("Failed to update profile for user %s", user_id)
        raise StoreFailure("Failed to change password and/or email") from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to update profile for user %s", user_id)
        raise StoreFailure("Failed to change password and/or email") from exc

    return MessageResponse(message="Password and/or email changed successfully")
