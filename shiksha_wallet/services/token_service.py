"""Access tokens for the API gate (HS256 JWT).

Access tokens and credential signatures share the process secret but
never each other's role: access tokens carry ``aud=shiksha-wallet`` and
decode_access_token() demands it, while credential tokens carry no
audience, which PyJWT rejects when an audience is expected (and the
credential verifier rejects tokens that do carry one).
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import jwt

from shiksha_wallet.models.user import User

ALGORITHM = "HS256"
ISSUER = "shiksha-wallet"
AUDIENCE = "shiksha-wallet"
DEFAULT_TTL = timedelta(hours=24)


class AccessTokenService:
    def __init__(self, secret: str, *, ttl: timedelta = DEFAULT_TTL) -> None:
        if not secret:
            raise ValueError("signing secret must be non-empty")
        self._secret = secret
        self._ttl = ttl

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def create_access_token(
        self,
        *,
        sub: str,
        username: str,
        roles: list[str] | None = None,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": sub,
            "username": username,
            "iss": ISSUER,
            "aud": AUDIENCE,
            "exp": now + self._ttl,
            "iat": now,
            "jti": str(uuid.uuid4()),
            "roles": roles or ["student"],
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def create_for_user(self, user: User) -> str:
        return self.create_access_token(
            sub=user.id,
            username=user.username,
            roles=["admin"] if user.is_admin else ["student"],
        )

    def decode_access_token(self, token: str) -> dict:
        """Verify signature and claims, return the payload.

        Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on failure.
        """
        return jwt.decode(
            token,
            self._secret,
            algorithms=[ALGORITHM],
            issuer=ISSUER,
            audience=AUDIENCE,
            options={"require": ["sub", "username", "exp", "iat", "jti"]},
        )
