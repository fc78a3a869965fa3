from __future__ import annotations

import logging

import pytest

from shiksha_wallet.core.config import DEFAULT_JWT_SECRET, AppEnv, Settings, load_settings

_ENV_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "PORT",
    "JWT_SECRET",
    "REGISTRAR_ISSUER_URI",
    "ATTENDANCE_ISSUER_URI",
    "ACCESS_TOKEN_TTL_HOURS",
    "SEED_DEMO_DATA",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ---- valid values ----


def test_load_settings_defaults() -> None:
    settings = load_settings()
    assert settings.app_env == "dev"
    assert settings.log_level == "info"
    assert settings.log_json is False
    assert settings.port == 8000
    assert settings.access_token_ttl_hours == 24
    assert settings.seed_demo_data is True
    assert settings.registrar_issuer_uri == "https://csvtu.ac.in/registrar"
    assert settings.attendance_issuer_uri == "https://csvtu.ac.in/attendance"


def test_load_settings_respects_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("JWT_SECRET", "a-real-production-secret-0123456789")
    monkeypatch.setenv("LOG_JSON", "true")
    monkeypatch.setenv("SEED_DEMO_DATA", "0")
    settings = load_settings()
    assert settings.app_env == "prod"
    assert settings.log_level == "error"
    assert settings.log_json is True
    assert settings.seed_demo_data is False
    assert settings.uses_default_secret is False


def test_load_settings_normalizes_case_and_whitespace(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("APP_ENV", "  TEST  ")
    monkeypatch.setenv("LOG_LEVEL", "  Warning ")
    settings = load_settings()
    assert settings.app_env == "test"
    assert settings.log_level == "warning"


def test_issuer_uris_drop_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REGISTRAR_ISSUER_URI", "https://uni.example/registrar/")
    assert load_settings().registrar_issuer_uri == "https://uni.example/registrar"


def test_cors_origins_split(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,,")
    assert load_settings().cors_origins == ("http://a.test", "http://b.test")


# ---- signing secret ----


def test_missing_secret_falls_back_outside_prod(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="shiksha_wallet.core.config"):
        settings = load_settings()
    assert settings.jwt_secret == DEFAULT_JWT_SECRET
    assert settings.uses_default_secret is True
    assert "JWT_SECRET not set" in caplog.text


def test_missing_secret_rejected_in_prod(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    with pytest.raises(ValueError, match="JWT_SECRET must be set"):
        load_settings()


# ---- invalid values ----


@pytest.mark.parametrize(
    "name, value, message",
    [
        ("APP_ENV", "staging", "APP_ENV must be dev|test|prod"),
        ("APP_ENV", "", "APP_ENV must be dev|test|prod"),
        ("LOG_LEVEL", "verbose", "LOG_LEVEL must be debug|info|warning|error"),
        ("PORT", "eighty", "PORT must be an integer"),
        ("ACCESS_TOKEN_TTL_HOURS", "0", "ACCESS_TOKEN_TTL_HOURS must be positive"),
        ("ACCESS_TOKEN_TTL_HOURS", "day", "ACCESS_TOKEN_TTL_HOURS must be an integer"),
        ("LOG_JSON", "maybe", "LOG_JSON must be a boolean"),
    ],
)
def test_load_settings_rejects_invalid(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=message.replace("|", r"\|")):
        load_settings()


# ---- Settings properties ----


def _make_settings(app_env: AppEnv = "dev") -> Settings:
    return Settings(  # type: ignore[arg-type]
        app_env=app_env,
        log_level="info",
        log_json=False,
        port=8000,
        jwt_secret="x" * 32,
    )


@pytest.mark.parametrize("app_env", ["dev", "test", "prod"])
def test_settings_env_flags(app_env: AppEnv) -> None:
    s = _make_settings(app_env)
    assert (s.is_dev, s.is_test, s.is_prod) == (
        app_env == "dev",
        app_env == "test",
        app_env == "prod",
    )


def test_settings_is_frozen() -> None:
    s = _make_settings()
    with pytest.raises(AttributeError):
        s.app_env = "prod"  # type: ignore[misc]
