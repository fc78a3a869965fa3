"""Wire schemas shared by the routers.

Field names are snake_case in Python and camelCase on the wire
(``studentId``, ``issuedAt``, ...), which is what wallet clients expect.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shiksha_wallet.models.attendance import AttendanceRecord
from shiksha_wallet.models.credential import Credential
from shiksha_wallet.models.user import User
from shiksha_wallet.models.verification_log import VerificationLog


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserOut(CamelModel):
    id: str
    username: str
    name: str
    student_id: str | None
    institution: str | None
    course: str | None
    year: str | None
    email: str | None
    phone: str | None
    is_admin: bool

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            id=user.id,
            username=user.username,
            name=user.name,
            student_id=user.student_id,
            institution=user.institution,
            course=user.course,
            year=user.year,
            email=user.email,
            phone=user.phone,
            is_admin=user.is_admin,
        )


class CredentialOut(CamelModel):
    id: str
    student_id: str
    type: str
    label: str
    data: dict[str, Any]
    signature: str
    issuer_id: str
    issued_at: datetime
    expires_at: datetime | None
    is_active: bool

    @classmethod
    def from_model(cls, credential: Credential) -> CredentialOut:
        return cls(
            id=credential.id,
            student_id=credential.student_id,
            type=credential.type.value,
            label=credential.display.label,
            data=credential.data,
            signature=credential.signature,
            issuer_id=credential.issuer_id,
            issued_at=credential.issued_at,
            expires_at=credential.expires_at,
            is_active=credential.is_active,
        )


class AttendanceRecordOut(CamelModel):
    id: str
    student_id: str
    session_id: str
    subject: str | None
    location: str | None
    timestamp: datetime
    credential_id: str | None

    @classmethod
    def from_model(cls, record: AttendanceRecord) -> AttendanceRecordOut:
        return cls(
            id=record.id,
            student_id=record.student_id,
            session_id=record.session_id,
            subject=record.subject,
            location=record.location,
            timestamp=record.timestamp,
            credential_id=record.credential_id,
        )


class VerificationLogOut(CamelModel):
    id: str
    credential_id: str
    verifier_id: str | None
    verification_result: bool
    timestamp: datetime
    details: dict[str, Any]

    @classmethod
    def from_model(cls, log: VerificationLog) -> VerificationLogOut:
        return cls(
            id=log.id,
            credential_id=log.credential_id,
            verifier_id=log.verifier_id,
            verification_result=log.verification_result,
            timestamp=log.timestamp,
            details=log.details,
        )
