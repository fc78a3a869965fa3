"""Credential issuance: build envelope -> sign -> persist.

Nothing is written until the envelope has been signed and the signature
has been checked to verify against it, so the store never holds an
unsigned or mis-signed credential minted here.  Authorization (admins
only on the manual path) is enforced by the API gate before this service
is reached.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from shiksha_wallet.core.metrics import CREDENTIAL_REVOCATIONS, CREDENTIALS_ISSUED
from shiksha_wallet.models.credential import Credential, CredentialType
from shiksha_wallet.repos.store import Store
from shiksha_wallet.services.envelope import build_envelope
from shiksha_wallet.services.signer import CredentialSigner

logger = logging.getLogger(__name__)


class IssuanceError(Exception):
    """The signed envelope failed its own round-trip check."""


class CredentialNotFoundError(Exception):
    pass


class IssuanceService:
    def __init__(self, store: Store, signer: CredentialSigner) -> None:
        self._store = store
        self._signer = signer

    def prepare(
        self,
        *,
        student_id: str,
        credential_type: CredentialType,
        subject_claims: dict[str, Any],
        issuer_uri: str,
        issuer_id: str,
        expires_at: datetime | None = None,
        type_tag: str | None = None,
        issued_at: datetime | None = None,
    ) -> Credential:
        """Build and sign a credential without persisting it.

        ``type_tag`` is the specific tag placed in the envelope's ``type``
        list; it defaults to the credential type's own value.  A naive
        ``expires_at`` is read as UTC.
        """
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)

        envelope = build_envelope(
            subject_claims, issuer_uri, type_tag or credential_type.value
        )
        signature = self._signer.sign(envelope)

        # Persist the envelope exactly as the token carries it, so data
        # and signature cannot diverge (e.g. tuples in claims become lists).
        signed = self._signer.verify(signature)
        if signed is None or signed.get("id") != envelope["id"]:
            logger.error(
                "Signature round-trip failed  student_id=%s type=%s",
                student_id,
                credential_type.value,
            )
            raise IssuanceError("signed envelope did not verify")

        return Credential.new(
            student_id=student_id,
            type=credential_type,
            data=signed,
            signature=signature,
            issuer_id=issuer_id,
            expires_at=expires_at,
            issued_at=issued_at,
        )

    async def issue(
        self,
        *,
        student_id: str,
        credential_type: CredentialType,
        subject_claims: dict[str, Any],
        issuer_uri: str,
        issuer_id: str,
        expires_at: datetime | None = None,
        type_tag: str | None = None,
    ) -> Credential:
        credential = self.prepare(
            student_id=student_id,
            credential_type=credential_type,
            subject_claims=subject_claims,
            issuer_uri=issuer_uri,
            issuer_id=issuer_id,
            expires_at=expires_at,
            type_tag=type_tag,
        )
        await self._store.credentials.create(credential)

        CREDENTIALS_ISSUED.labels(
            credential_type=credential.type.value, channel="manual"
        ).inc()
        logger.info(
            "Credential issued  type=%s issuer_id=%s",
            credential.type.value,
            issuer_id,
            extra={"credential_id": credential.id, "student_id": student_id},
        )
        return credential

    async def revoke(self, credential_id: str) -> Credential:
        """Soft-revoke: the credential stays stored but stops verifying."""
        updated = await self._store.credentials.update(credential_id, is_active=False)
        if updated is None:
            raise CredentialNotFoundError(credential_id)

        CREDENTIAL_REVOCATIONS.inc()
        logger.info("Credential revoked", extra={"credential_id": credential_id})
        return updated
