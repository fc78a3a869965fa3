"""FastAPI dependencies: the access-control gate and service wiring.

The store, signer and token service are built once by create_app() and
hung on ``app.state``; the service objects are cheap and built per
request around them.
"""

from __future__ import annotations

import logging
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from shiksha_wallet.core.config import Settings
from shiksha_wallet.models.principal import Principal
from shiksha_wallet.repos.store import Store
from shiksha_wallet.services.attendance_service import AttendanceService
from shiksha_wallet.services.issuance_service import IssuanceService
from shiksha_wallet.services.signer import CredentialSigner
from shiksha_wallet.services.token_service import AccessTokenService
from shiksha_wallet.services.verification_service import VerificationService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


# ---------------------------------------------------------------------------
# Shared components
# ---------------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_signer(request: Request) -> CredentialSigner:
    return request.app.state.signer


def get_token_service(request: Request) -> AccessTokenService:
    return request.app.state.token_service


def get_issuance_service(
    store: Annotated[Store, Depends(get_store)],
    signer: Annotated[CredentialSigner, Depends(get_signer)],
) -> IssuanceService:
    return IssuanceService(store, signer)


def get_verification_service(
    store: Annotated[Store, Depends(get_store)],
    signer: Annotated[CredentialSigner, Depends(get_signer)],
) -> VerificationService:
    return VerificationService(store, signer)


def get_attendance_service(
    store: Annotated[Store, Depends(get_store)],
    issuance: Annotated[IssuanceService, Depends(get_issuance_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AttendanceService:
    return AttendanceService(store, issuance, settings.attendance_issuer_uri)


# ---------------------------------------------------------------------------
# Access-control gate
# ---------------------------------------------------------------------------


def require_user(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
    tokens: Annotated[AccessTokenService, Depends(get_token_service)],
) -> Principal:
    """Validate the bearer token and return the caller's Principal."""
    try:
        claims = tokens.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    principal = Principal(
        user_id=claims["sub"],
        username=claims["username"],
        roles=frozenset(claims.get("roles", [])),
    )
    logger.debug(
        "Token validated for user=%s roles=%s", principal.user_id, principal.roles
    )
    return principal


def require_admin(
    principal: Annotated[Principal, Depends(require_user)],
) -> Principal:
    if not principal.is_admin():
        logger.warning("Access denied: user=%s is not an admin", principal.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
