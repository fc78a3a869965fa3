from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Literal

logger = logging.getLogger(__name__)

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

# Matches the reference deployment so tokens stay interoperable in dev.
# Never acceptable in production; load_settings() refuses it there.
DEFAULT_JWT_SECRET = "shiksha-wallet-secret-key"


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getbool(name: str, default: bool) -> bool:
    raw = _getenv(name, "true" if default else "false").lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    jwt_secret: str
    registrar_issuer_uri: str = "https://csvtu.ac.in/registrar"
    attendance_issuer_uri: str = "https://csvtu.ac.in/attendance"
    access_token_ttl_hours: int = 24
    seed_demo_data: bool = True
    cors_origins: tuple[str, ...] = field(default=("http://localhost:5173",))

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8000")
    ttl_raw = _getenv("ACCESS_TOKEN_TTL_HOURS", "24")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        ttl_hours = int(ttl_raw)
    except ValueError:
        raise ValueError(
            f"ACCESS_TOKEN_TTL_HOURS must be an integer (got {ttl_raw!r})"
        ) from None
    if ttl_hours <= 0:
        raise ValueError(f"ACCESS_TOKEN_TTL_HOURS must be positive (got {ttl_hours})")

    jwt_secret = _getenv("JWT_SECRET", "") or DEFAULT_JWT_SECRET
    if jwt_secret == DEFAULT_JWT_SECRET:
        if app_env_raw == "prod":
            raise ValueError("JWT_SECRET must be set when APP_ENV=prod")
        logger.warning("JWT_SECRET not set; using insecure built-in fallback")

    origins = tuple(
        o.strip()
        for o in _getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
        if o.strip()
    )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getbool("LOG_JSON", False),
        port=port,
        jwt_secret=jwt_secret,
        registrar_issuer_uri=_getenv(
            "REGISTRAR_ISSUER_URI", "https://csvtu.ac.in/registrar"
        ).rstrip("/"),
        attendance_issuer_uri=_getenv(
            "ATTENDANCE_ISSUER_URI", "https://csvtu.ac.in/attendance"
        ).rstrip("/"),
        access_token_ttl_hours=ttl_hours,
        seed_demo_data=_getbool("SEED_DEMO_DATA", True),
        cors_origins=origins,
    )


SETTINGS = load_settings()
