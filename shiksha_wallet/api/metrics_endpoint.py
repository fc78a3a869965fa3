"""Prometheus scrape endpoint (text exposition format, not JSON).

Leave this off the public ingress in production: request rates and
verification failure counts describe more of the system than a
verifier needs to see.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
