from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shiksha_wallet.api.admin import router as admin_router
from shiksha_wallet.api.attendance import router as attendance_router
from shiksha_wallet.api.auth import router as auth_router
from shiksha_wallet.api.credentials import router as credentials_router
from shiksha_wallet.api.health import router as health_router
from shiksha_wallet.api.metrics_endpoint import router as metrics_router
from shiksha_wallet.core.config import SETTINGS, Settings
from shiksha_wallet.core.logging import setup_logging
from shiksha_wallet.middleware.metrics import MetricsMiddleware
from shiksha_wallet.middleware.request_context import (
    RequestContextMiddleware,
    install_log_filter,
)
from shiksha_wallet.repos.store import Store, create_store
from shiksha_wallet.services.signer import CredentialSigner
from shiksha_wallet.services.token_service import AccessTokenService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """Build the application around one store and one signing key.

    Tests pass their own settings and a fresh store; the module-level
    ``app`` below uses the process settings and a seeded store.
    """
    settings = settings or SETTINGS
    if store is None:
        store = create_store(seed=settings.seed_demo_data)

    app = FastAPI(
        title="shiksha-wallet",
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.signer = CredentialSigner(settings.jwt_secret)
    app.state.token_service = AccessTokenService(
        settings.jwt_secret,
        ttl=timedelta(hours=settings.access_token_ttl_hours),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last-added runs first: RequestContext → Metrics → CORS → route.
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(metrics_router)
    app.include_router(admin_router)
    app.include_router(attendance_router)
    app.include_router(auth_router)
    app.include_router(credentials_router)
    app.include_router(health_router)

    return app


setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_log_filter()

app = create_app()

logger.info(
    "shiksha-wallet started  env=%s log_level=%s port=%d docs=%s default_secret=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
    SETTINGS.uses_default_secret,
)
