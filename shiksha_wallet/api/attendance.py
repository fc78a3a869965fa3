"""Attendance endpoints.

POST /api/attendance : check the caller in; mints an attendance credential
GET  /api/attendance : the caller's check-in history
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import Field

from shiksha_wallet.api.dependencies import get_attendance_service, require_user
from shiksha_wallet.api.schemas import AttendanceRecordOut, CamelModel, CredentialOut
from shiksha_wallet.models.principal import Principal
from shiksha_wallet.services.attendance_service import AttendanceService

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


class CheckInIn(CamelModel):
    session_id: str = Field(min_length=1)
    subject: str | None = None
    location: str | None = None


class CheckInOut(CamelModel):
    record: AttendanceRecordOut
    credential: CredentialOut


@router.post("", response_model=CheckInOut, status_code=status.HTTP_201_CREATED)
async def check_in(
    body: CheckInIn,
    principal: Annotated[Principal, Depends(require_user)],
    attendance: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> CheckInOut:
    result = await attendance.check_in(
        principal.username,
        body.session_id,
        subject=body.subject,
        location=body.location,
    )
    return CheckInOut(
        record=AttendanceRecordOut.from_model(result.record),
        credential=CredentialOut.from_model(result.credential),
    )


@router.get("", response_model=list[AttendanceRecordOut])
async def list_my_attendance(
    principal: Annotated[Principal, Depends(require_user)],
    attendance: Annotated[AttendanceService, Depends(get_attendance_service)],
) -> list[AttendanceRecordOut]:
    records = await attendance.list_for_student(principal.username)
    return [AttendanceRecordOut.from_model(r) for r in records]
