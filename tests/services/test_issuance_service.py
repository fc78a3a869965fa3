from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from prometheus_client import REGISTRY

from shiksha_wallet.models.credential import CredentialType
from shiksha_wallet.repos.store import Store
from shiksha_wallet.services.issuance_service import (
    CredentialNotFoundError,
    IssuanceError,
    IssuanceService,
)
from shiksha_wallet.services.signer import CredentialSigner
from tests.conftest import TEST_SECRET

REGISTRAR = "https://csvtu.ac.in/registrar"


def _issue(service: IssuanceService, student_id: str = "X", **overrides):
    kwargs = {
        "student_id": student_id,
        "credential_type": CredentialType.TRANSCRIPT,
        "subject_claims": {"semester": "3", "cgpa": "8.7"},
        "issuer_uri": REGISTRAR,
        "issuer_id": "admin-id",
    }
    kwargs.update(overrides)
    return asyncio.run(service.issue(**kwargs))


class _BrokenSigner(CredentialSigner):
    def verify(self, token: str):
        return None


def test_issued_credential_verifies_and_carries_claims(
    store: Store, signer: CredentialSigner
) -> None:
    credential = _issue(IssuanceService(store, signer))

    verified = signer.verify(credential.signature)
    assert verified is not None
    assert verified == credential.data
    assert verified["credentialSubject"] == {"semester": "3", "cgpa": "8.7"}


def test_issue_persists_active_credential(store: Store, signer: CredentialSigner) -> None:
    credential = _issue(IssuanceService(store, signer))

    stored = asyncio.run(store.credentials.get(credential.id))
    assert stored == credential
    assert stored.is_active is True
    assert stored.issuer_id == "admin-id"
    assert stored.type is CredentialType.TRANSCRIPT
    assert stored.expires_at is None


def test_issue_envelope_uses_issuer_and_type_tag(
    store: Store, signer: CredentialSigner
) -> None:
    service = IssuanceService(store, signer)

    default_tag = _issue(service)
    assert default_tag.data["type"] == ["VerifiableCredential", "transcript"]
    assert default_tag.data["issuer"] == REGISTRAR
    assert default_tag.data["proof"]["verificationMethod"] == f"{REGISTRAR}/keys/1"

    custom_tag = _issue(service, credential_type=CredentialType.OTHER, type_tag="diploma")
    assert custom_tag.type is CredentialType.OTHER
    assert custom_tag.data["type"] == ["VerifiableCredential", "diploma"]


def test_issue_keeps_expiry(store: Store, signer: CredentialSigner) -> None:
    expires = datetime.now(UTC) + timedelta(days=365)
    credential = _issue(IssuanceService(store, signer), expires_at=expires)
    assert credential.expires_at == expires


def test_failed_signature_check_persists_nothing(store: Store) -> None:
    service = IssuanceService(store, _BrokenSigner(TEST_SECRET))

    with pytest.raises(IssuanceError):
        _issue(service, student_id="atomic-student")

    assert asyncio.run(store.credentials.list_by_student("atomic-student")) == []


def test_unserializable_claims_fail_before_persisting(
    store: Store, signer: CredentialSigner
) -> None:
    service = IssuanceService(store, signer)

    with pytest.raises(TypeError):
        _issue(service, student_id="bad-claims", subject_claims={"when": object()})

    assert asyncio.run(store.credentials.list_by_student("bad-claims")) == []


def test_list_by_student_excludes_revoked(store: Store, signer: CredentialSigner) -> None:
    service = IssuanceService(store, signer)
    kept = _issue(service)
    revoked = _issue(service)
    asyncio.run(service.revoke(revoked.id))

    ids = {c.id for c in asyncio.run(store.credentials.list_by_student("X"))}
    assert kept.id in ids
    assert revoked.id not in ids


def test_revoke_soft_deletes(store: Store, signer: CredentialSigner) -> None:
    service = IssuanceService(store, signer)
    credential = _issue(service)

    updated = asyncio.run(service.revoke(credential.id))

    assert updated.is_active is False
    stored = asyncio.run(store.credentials.get(credential.id))
    assert stored is not None
    assert stored.is_active is False
    assert stored.signature == credential.signature


def test_revoke_unknown_credential_raises(store: Store, signer: CredentialSigner) -> None:
    with pytest.raises(CredentialNotFoundError):
        asyncio.run(IssuanceService(store, signer).revoke("no-such-id"))


def test_concurrent_issuance_yields_unique_ids(
    store: Store, signer: CredentialSigner
) -> None:
    service = IssuanceService(store, signer)

    async def issue_many(n: int):
        return await asyncio.gather(
            *(
                service.issue(
                    student_id="bulk",
                    credential_type=CredentialType.CERTIFICATE,
                    subject_claims={"n": i},
                    issuer_uri=REGISTRAR,
                    issuer_id="admin-id",
                )
                for i in range(n)
            )
        )

    credentials = asyncio.run(issue_many(50))

    assert len({c.id for c in credentials}) == 50
    assert len({c.data["id"] for c in credentials}) == 50
    assert len(asyncio.run(store.credentials.list_by_student("bulk"))) == 50


def test_issue_increments_manual_channel_counter(
    store: Store, signer: CredentialSigner
) -> None:
    labels = {"credential_type": "transcript", "channel": "manual"}
    before = REGISTRY.get_sample_value("credentials_issued_total", labels) or 0.0
    _issue(IssuanceService(store, signer))
    after = REGISTRY.get_sample_value("credentials_issued_total", labels) or 0.0
    assert after - before == 1
