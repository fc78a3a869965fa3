"""Detached credential signatures (HS256 JWT over the envelope).

The signature token is a JWT whose payload is the full envelope plus the
registered ``iat``/``exp`` claims.  Tokens are valid for ten years, the
same window existing wallets were issued with.

verify() never raises: a malformed, expired or forged token all come
back as VERIFICATION_FAILURE (None).  Callers that need to tell those
apart should not; the verification service treats them identically.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
# "10y" in the reference signer: 10 * 365.25 days.
SIGNATURE_TTL = timedelta(days=3652.5)

# Claims the signer adds on top of the envelope and strips again on verify.
_TIME_CLAIMS = ("iat", "exp")

VERIFICATION_FAILURE = None


class CredentialSigner:
    """Signs and verifies envelopes under one shared secret.

    The secret is injected at construction; one instance is shared by
    every request in the process so all tokens use the same key.
    """

    def __init__(self, secret: str, *, ttl: timedelta = SIGNATURE_TTL) -> None:
        if not secret:
            raise ValueError("signing secret must be non-empty")
        self._secret = secret
        self._ttl = ttl

    def sign(self, envelope: dict[str, Any], *, now: datetime | None = None) -> str:
        issued = now or datetime.now(UTC)
        payload = {
            **envelope,
            "iat": issued,
            "exp": issued + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict[str, Any] | None:
        """Return the signed envelope, or VERIFICATION_FAILURE."""
        if not isinstance(token, str) or not token:
            return VERIFICATION_FAILURE
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Credential signature expired")
            return VERIFICATION_FAILURE
        except jwt.InvalidTokenError as e:
            logger.warning("Credential signature rejected: %s", type(e).__name__)
            return VERIFICATION_FAILURE

        for key in _TIME_CLAIMS:
            claims.pop(key, None)
        return claims
