"""Credential verification with an audit trail.

Checks run in a fixed order and the first failure wins:

  1. the credential exists
  2. its signature token verifies under the process secret
  3. it is active and not past ``expires_at``

Signature integrity is checked before business validity, so a tampered
credential that happens to be unexpired is reported as tampered.  Every
attempt, whatever the outcome, appends exactly one VerificationLog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from shiksha_wallet.core.metrics import CREDENTIAL_VERIFICATIONS
from shiksha_wallet.models.credential import SYSTEM_ISSUER, Credential
from shiksha_wallet.models.verification_log import VerificationLog
from shiksha_wallet.repos.store import Store
from shiksha_wallet.services.signer import CredentialSigner

logger = logging.getLogger(__name__)


class VerificationOutcome(str, Enum):
    VALID = "valid"
    NOT_FOUND = "not_found"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED_OR_INACTIVE = "expired_or_inactive"


MESSAGES: dict[VerificationOutcome, str] = {
    VerificationOutcome.VALID: "Credential is valid",
    VerificationOutcome.NOT_FOUND: "Credential not found",
    VerificationOutcome.INVALID_SIGNATURE: "Invalid credential signature",
    VerificationOutcome.EXPIRED_OR_INACTIVE: "Credential is expired or inactive",
}


@dataclass(frozen=True, slots=True)
class VerificationResult:
    outcome: VerificationOutcome
    credential: Credential | None = None

    @property
    def valid(self) -> bool:
        return self.outcome is VerificationOutcome.VALID

    @property
    def message(self) -> str:
        return MESSAGES[self.outcome]


class VerificationService:
    def __init__(self, store: Store, signer: CredentialSigner) -> None:
        self._store = store
        self._signer = signer

    async def verify(
        self, credential_id: str, *, verifier_id: str = SYSTEM_ISSUER
    ) -> VerificationResult:
        credential = await self._store.credentials.get(credential_id)
        if credential is None:
            await self._record(
                credential_id,
                verifier_id,
                VerificationOutcome.NOT_FOUND,
                {"reason": "Credential not found"},
            )
            return VerificationResult(VerificationOutcome.NOT_FOUND)

        if self._signer.verify(credential.signature) is None:
            await self._record(
                credential_id,
                verifier_id,
                VerificationOutcome.INVALID_SIGNATURE,
                {"reason": "Invalid signature"},
            )
            return VerificationResult(VerificationOutcome.INVALID_SIGNATURE)

        details = _snapshot(credential)
        if not credential.is_active or credential.is_expired(datetime.now(UTC)):
            await self._record(
                credential_id,
                verifier_id,
                VerificationOutcome.EXPIRED_OR_INACTIVE,
                details,
            )
            return VerificationResult(VerificationOutcome.EXPIRED_OR_INACTIVE)

        await self._record(credential_id, verifier_id, VerificationOutcome.VALID, details)
        return VerificationResult(VerificationOutcome.VALID, credential)

    async def _record(
        self,
        credential_id: str,
        verifier_id: str,
        outcome: VerificationOutcome,
        details: dict[str, Any],
    ) -> None:
        await self._store.verification_logs.create(
            VerificationLog.new(
                credential_id=credential_id,
                verifier_id=verifier_id,
                verification_result=outcome is VerificationOutcome.VALID,
                details=details,
            )
        )
        CREDENTIAL_VERIFICATIONS.labels(outcome=outcome.value).inc()

        level = logging.INFO if outcome is VerificationOutcome.VALID else logging.WARNING
        logger.log(
            level,
            "Credential verification  outcome=%s verifier_id=%s",
            outcome.value,
            verifier_id,
            extra={"credential_id": credential_id},
        )


def _snapshot(credential: Credential) -> dict[str, Any]:
    return {
        "credentialType": credential.type.value,
        "issuedAt": credential.issued_at.isoformat(),
        "expiresAt": credential.expires_at.isoformat() if credential.expires_at else None,
    }
