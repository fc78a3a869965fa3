from __future__ import annotations

from threading import Lock
from typing import Protocol

from shiksha_wallet.models.attendance import AttendanceRecord


class AttendanceRepo(Protocol):
    async def create(self, record: AttendanceRecord) -> AttendanceRecord: ...
    async def list_by_student(self, student_id: str) -> list[AttendanceRecord]: ...


class InMemoryAttendanceRepo:
    def __init__(self, lock: Lock | None = None) -> None:
        self._by_id: dict[str, AttendanceRecord] = {}
        self._lock = lock or Lock()

    async def create(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            self.insert(record)
        return record

    async def list_by_student(self, student_id: str) -> list[AttendanceRecord]:
        return [r for r in list(self._by_id.values()) if r.student_id == student_id]

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._by_id

    def insert(self, record: AttendanceRecord) -> None:
        # Caller holds the lock.
        if record.id in self._by_id:
            raise ValueError("attendance record id already exists")
        self._by_id[record.id] = record
