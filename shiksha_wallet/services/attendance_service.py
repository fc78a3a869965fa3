"""Attendance check-in, minting an attendance credential per check-in.

The record and its credential are one unit: the credential is built and
signed first (no writes), then both are committed to the store in a
single step.  A failure anywhere leaves neither behind.  Both carry the
same timestamp, and the record links to the credential by id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from shiksha_wallet.core.metrics import ATTENDANCE_CHECKINS, CREDENTIALS_ISSUED
from shiksha_wallet.models.attendance import AttendanceRecord
from shiksha_wallet.models.credential import SYSTEM_ISSUER, Credential, CredentialType
from shiksha_wallet.repos.store import Store
from shiksha_wallet.services.envelope import isoformat_z
from shiksha_wallet.services.issuance_service import IssuanceService

logger = logging.getLogger(__name__)

ATTENDANCE_TYPE_TAG = "AttendanceCredential"


@dataclass(frozen=True, slots=True)
class CheckInResult:
    record: AttendanceRecord
    credential: Credential


class AttendanceService:
    def __init__(
        self, store: Store, issuance: IssuanceService, issuer_uri: str
    ) -> None:
        self._store = store
        self._issuance = issuance
        self._issuer_uri = issuer_uri

    async def check_in(
        self,
        student_id: str,
        session_id: str,
        subject: str | None = None,
        location: str | None = None,
    ) -> CheckInResult:
        subject = subject or None
        location = location or None
        record = AttendanceRecord.new(
            student_id=student_id,
            session_id=session_id,
            subject=subject,
            location=location,
            timestamp=datetime.now(UTC),
        )
        credential = self._issuance.prepare(
            student_id=student_id,
            credential_type=CredentialType.ATTENDANCE,
            subject_claims={
                "studentId": student_id,
                "sessionId": session_id,
                "subject": subject,
                "location": location,
                "timestamp": isoformat_z(record.timestamp),
            },
            issuer_uri=self._issuer_uri,
            issuer_id=SYSTEM_ISSUER,
            type_tag=ATTENDANCE_TYPE_TAG,
            issued_at=record.timestamp,
        )
        record = replace(record, credential_id=credential.id)

        await self._store.commit_check_in(record, credential)

        ATTENDANCE_CHECKINS.inc()
        CREDENTIALS_ISSUED.labels(
            credential_type=CredentialType.ATTENDANCE.value, channel="attendance"
        ).inc()
        logger.info(
            "Attendance recorded  session_id=%s record_id=%s",
            session_id,
            record.id,
            extra={"credential_id": credential.id, "student_id": student_id},
        )
        return CheckInResult(record=record, credential=credential)

    async def list_for_student(self, student_id: str) -> list[AttendanceRecord]:
        return await self._store.attendance.list_by_student(student_id)
