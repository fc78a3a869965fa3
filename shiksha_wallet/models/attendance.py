from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class AttendanceRecord:
    """One check-in event.  Written once, never changed."""

    id: str
    student_id: str
    session_id: str
    timestamp: datetime
    subject: str | None = None
    location: str | None = None
    credential_id: str | None = None

    @staticmethod
    def new(
        *,
        student_id: str,
        session_id: str,
        subject: str | None = None,
        location: str | None = None,
        credential_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> AttendanceRecord:
        return AttendanceRecord(
            id=str(uuid4()),
            student_id=student_id,
            session_id=session_id,
            timestamp=timestamp or datetime.now(UTC),
            subject=subject or None,
            location=location or None,
            credential_id=credential_id,
        )
