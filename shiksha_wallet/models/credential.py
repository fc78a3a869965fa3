from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

# issuer_id used when the service mints a credential on its own behalf.
SYSTEM_ISSUER = "system"


class CredentialType(str, Enum):
    """Credential categories understood by the wallet.

    Unknown categories are not rejected: they are carried as OTHER and
    keep their original name in the envelope's type tags.
    """

    STUDENT_ID = "student_id"
    ATTENDANCE = "attendance"
    TRANSCRIPT = "transcript"
    CERTIFICATE = "certificate"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str) -> CredentialType:
        normalized = raw.strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True, slots=True)
class CredentialDisplay:
    label: str
    icon: str
    color: str


CREDENTIAL_DISPLAY: dict[CredentialType, CredentialDisplay] = {
    CredentialType.STUDENT_ID: CredentialDisplay(
        "Student ID", "fas fa-id-card", "from-primary to-primary-dark"
    ),
    CredentialType.ATTENDANCE: CredentialDisplay(
        "Attendance Record", "fas fa-calendar-check", "from-secondary to-green-600"
    ),
    CredentialType.TRANSCRIPT: CredentialDisplay(
        "Academic Transcript", "fas fa-graduation-cap", "from-purple-600 to-purple-700"
    ),
    CredentialType.CERTIFICATE: CredentialDisplay(
        "Certificate", "fas fa-certificate", "from-accent to-orange-600"
    ),
    CredentialType.OTHER: CredentialDisplay(
        "Credential", "fas fa-file", "from-neutral-600 to-neutral-700"
    ),
}


@dataclass(frozen=True, slots=True)
class Credential:
    """Issued credential: the signed envelope plus its lifecycle state.

    ``data`` is the envelope and ``signature`` the token that covers it.
    ``student_id`` is the subject's username.  Revocation flips
    ``is_active``; credentials are never deleted.
    """

    id: str
    student_id: str
    type: CredentialType
    data: dict[str, Any]
    signature: str
    issuer_id: str
    issued_at: datetime
    expires_at: datetime | None = None
    is_active: bool = True

    @staticmethod
    def new(
        *,
        student_id: str,
        type: CredentialType,
        data: dict[str, Any],
        signature: str,
        issuer_id: str,
        expires_at: datetime | None = None,
        issued_at: datetime | None = None,
    ) -> Credential:
        return Credential(
            id=str(uuid4()),
            student_id=student_id,
            type=type,
            data=data,
            signature=signature,
            issuer_id=issuer_id,
            issued_at=issued_at or datetime.now(UTC),
            expires_at=expires_at,
            is_active=True,
        )

    @property
    def display(self) -> CredentialDisplay:
        return CREDENTIAL_DISPLAY[self.type]

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(UTC))
