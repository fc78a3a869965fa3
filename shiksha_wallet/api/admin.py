from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from shiksha_wallet.api.dependencies import get_store, require_admin
from shiksha_wallet.api.schemas import VerificationLogOut
from shiksha_wallet.models.principal import Principal
from shiksha_wallet.repos.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/verifications", response_model=list[VerificationLogOut])
async def list_verification_logs(
    principal: Annotated[Principal, Depends(require_admin)],
    store: Annotated[Store, Depends(get_store)],
) -> list[VerificationLogOut]:
    logger.info("Verification log requested by user=%s", principal.user_id)
    logs = await store.verification_logs.list_all()
    return [VerificationLogOut.from_model(entry) for entry in logs]
