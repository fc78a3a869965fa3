"""Credential endpoints.

- GET  /api/credentials                : caller's active credentials
- POST /api/credentials/issue          : issue a signed credential (admin)
- POST /api/credentials/verify         : public verification
- POST /api/credentials/{id}/revoke    : soft-revoke (admin)

Verification is unauthenticated: anyone holding a
credential id (from a QR code, a shared link) can check it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import Field

from shiksha_wallet.api.dependencies import (
    get_issuance_service,
    get_settings,
    get_store,
    get_verification_service,
    require_admin,
    require_user,
)
from shiksha_wallet.api.schemas import CamelModel, CredentialOut
from shiksha_wallet.core.config import Settings
from shiksha_wallet.models.credential import CredentialType
from shiksha_wallet.models.principal import Principal
from shiksha_wallet.repos.store import Store
from shiksha_wallet.services.issuance_service import (
    CredentialNotFoundError,
    IssuanceService,
)
from shiksha_wallet.services.verification_service import (
    VerificationOutcome,
    VerificationService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/credentials", tags=["credentials"])


class IssueCredentialIn(CamelModel):
    student_id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime | None = None


class VerifyCredentialIn(CamelModel):
    credential_id: str = Field(min_length=1)


class VerifyCredentialOut(CamelModel):
    valid: bool
    outcome: str
    message: str
    credential: CredentialOut | None = None


@router.get("", response_model=list[CredentialOut])
async def list_my_credentials(
    principal: Annotated[Principal, Depends(require_user)],
    store: Annotated[Store, Depends(get_store)],
) -> list[CredentialOut]:
    credentials = await store.credentials.list_by_student(principal.username)
    return [CredentialOut.from_model(c) for c in credentials]


@router.post(
    "/issue",
    response_model=CredentialOut,
    status_code=status.HTTP_201_CREATED,
)
async def issue_credential(
    body: IssueCredentialIn,
    principal: Annotated[Principal, Depends(require_admin)],
    store: Annotated[Store, Depends(get_store)],
    issuance: Annotated[IssuanceService, Depends(get_issuance_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CredentialOut:
    if await store.users.get_by_username(body.student_id) is None:
        raise HTTPException(status_code=404, detail="Student not found")

    credential = await issuance.issue(
        student_id=body.student_id,
        credential_type=CredentialType.parse(body.type),
        subject_claims=body.data,
        issuer_uri=settings.registrar_issuer_uri,
        issuer_id=principal.user_id,
        expires_at=body.expires_at,
        # Keep the caller's spelling in the envelope even for unknown types.
        type_tag=body.type,
    )
    return CredentialOut.from_model(credential)


@router.post("/verify", response_model=VerifyCredentialOut)
async def verify_credential(
    body: VerifyCredentialIn,
    verifier: Annotated[VerificationService, Depends(get_verification_service)],
) -> VerifyCredentialOut | JSONResponse:
    result = await verifier.verify(body.credential_id)
    out = VerifyCredentialOut(
        valid=result.valid,
        outcome=result.outcome.value,
        message=result.message,
        credential=CredentialOut.from_model(result.credential)
        if result.credential
        else None,
    )
    if result.outcome is VerificationOutcome.NOT_FOUND:
        return JSONResponse(
            status_code=404, content=out.model_dump(mode="json", by_alias=True)
        )
    return out


@router.post("/{credential_id}/revoke", response_model=CredentialOut)
async def revoke_credential(
    credential_id: str,
    principal: Annotated[Principal, Depends(require_admin)],
    issuance: Annotated[IssuanceService, Depends(get_issuance_service)],
) -> CredentialOut:
    try:
        credential = await issuance.revoke(credential_id)
    except CredentialNotFoundError:
        raise HTTPException(status_code=404, detail="Credential not found") from None

    logger.info("Revocation requested by user=%s", principal.user_id)
    return CredentialOut.from_model(credential)
