"""Prometheus metrics inventory.

Every metric the service exports is declared here; the modules that own
the behaviour import the metric and increment it at the point of action.

HTTP metrics are filled in by MetricsMiddleware.  The credential metrics
answer the operational questions for this service: how many credentials
are being minted (and through which channel), and how verifications are
resolving.  A jump in ``credential_verifications_total{outcome="invalid_signature"}``
usually means a key rotation went wrong or someone is probing with
forged tokens.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Argon2 logins sit in the 50-250ms range; signing and verification
    # are well under 10ms.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Credential pipeline
# ---------------------------------------------------------------------------

CREDENTIALS_ISSUED = Counter(
    "credentials_issued_total",
    "Credentials signed and persisted",
    ["credential_type", "channel"],  # channel: manual | attendance
)

CREDENTIAL_VERIFICATIONS = Counter(
    "credential_verifications_total",
    "Credential verification attempts by outcome",
    ["outcome"],  # valid | invalid_signature | expired_or_inactive | not_found
)

CREDENTIAL_REVOCATIONS = Counter(
    "credential_revocations_total",
    "Credentials soft-revoked by an administrator",
)

ATTENDANCE_CHECKINS = Counter(
    "attendance_checkins_total",
    "Attendance check-ins recorded",
)
