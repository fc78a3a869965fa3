"""Liveness and readiness probes.

/health: the process is up and can answer.
/ready : the store is reachable.  The in-memory store always is; a
          durable backend would ping its database here.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from shiksha_wallet.api.dependencies import get_store
from shiksha_wallet.repos.store import Store

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/ready")
async def ready(store: Annotated[Store, Depends(get_store)]) -> Response:
    await store.verification_logs.list_all()
    return Response(status_code=200)
