"""JSON auth endpoints for the wallet client.

POST /api/auth/login    : username + password -> { token, user }
POST /api/auth/register : create a student account -> { token, user }
GET  /api/auth/me       : the caller's own profile
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from shiksha_wallet.api.dependencies import get_store, get_token_service, require_user
from shiksha_wallet.api.schemas import CamelModel, UserOut
from shiksha_wallet.models.principal import Principal
from shiksha_wallet.repos.store import Store
from shiksha_wallet.services import auth_service
from shiksha_wallet.services.token_service import AccessTokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginIn(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterIn(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    student_id: str | None = None
    institution: str | None = None
    course: str | None = None
    year: str | None = None
    email: str | None = None
    phone: str | None = None


class AuthResponse(CamelModel):
    token: str
    user: UserOut


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginIn,
    store: Annotated[Store, Depends(get_store)],
    tokens: Annotated[AccessTokenService, Depends(get_token_service)],
) -> AuthResponse:
    username = payload.username.strip()
    user = await auth_service.authenticate_user(store.users, username, payload.password)
    if user is None:
        logger.warning("Login failed  username=%s", username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    logger.info("Login succeeded  user_id=%s username=%s", user.id, username)
    return AuthResponse(token=tokens.create_for_user(user), user=UserOut.from_model(user))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterIn,
    store: Annotated[Store, Depends(get_store)],
    tokens: Annotated[AccessTokenService, Depends(get_token_service)],
) -> AuthResponse:
    try:
        user = await auth_service.register_user(
            store.users,
            username=payload.username,
            password=payload.password,
            name=payload.name,
            student_id=payload.student_id,
            institution=payload.institution,
            course=payload.course,
            year=payload.year,
            email=payload.email,
            phone=payload.phone,
        )
    except auth_service.UserValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    except auth_service.UserAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        ) from None

    return AuthResponse(token=tokens.create_for_user(user), user=UserOut.from_model(user))


@router.get("/me", response_model=UserOut)
async def me(
    principal: Annotated[Principal, Depends(require_user)],
    store: Annotated[Store, Depends(get_store)],
) -> UserOut:
    user = await store.users.get(principal.user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut.from_model(user)
