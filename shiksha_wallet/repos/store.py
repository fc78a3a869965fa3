"""The credential store: sole owner of every entity collection.

``Store`` is the contract the services are written against: four repos
plus the two operations that span collections.  ``InMemoryStore`` is the
only implementation.  One is built at process start (see
shiksha_wallet.main) and handed to the services explicitly.  Its repos
share one lock, so a check-in's record and credential land together.

Everything in memory is volatile.  A durable backend would implement
``Store`` with commit_check_in as a single database transaction.
"""

from __future__ import annotations

from collections.abc import Iterable
from threading import Lock
from typing import Protocol

from shiksha_wallet.models.attendance import AttendanceRecord
from shiksha_wallet.models.credential import Credential
from shiksha_wallet.models.user import User
from shiksha_wallet.repos.attendance_repo import AttendanceRepo, InMemoryAttendanceRepo
from shiksha_wallet.repos.credential_repo import CredentialRepo, InMemoryCredentialRepo
from shiksha_wallet.repos.seed import seed_demo_data
from shiksha_wallet.repos.user_repo import InMemoryUserRepo, UserRepo
from shiksha_wallet.repos.verification_log_repo import (
    InMemoryVerificationLogRepo,
    VerificationLogRepo,
)


class Store(Protocol):
    users: UserRepo
    credentials: CredentialRepo
    attendance: AttendanceRepo
    verification_logs: VerificationLogRepo

    async def commit_check_in(
        self, record: AttendanceRecord, credential: Credential
    ) -> None: ...

    def load(
        self,
        *,
        users: Iterable[User] = (),
        credentials: Iterable[Credential] = (),
    ) -> None: ...


class InMemoryStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self.users = InMemoryUserRepo(self._lock)
        self.credentials = InMemoryCredentialRepo(self._lock)
        self.attendance = InMemoryAttendanceRepo(self._lock)
        self.verification_logs = InMemoryVerificationLogRepo(self._lock)

    async def commit_check_in(
        self, record: AttendanceRecord, credential: Credential
    ) -> None:
        """Persist a check-in and its credential: both or neither."""
        with self._lock:
            # Validate both inserts before applying either.
            if credential.id in self.credentials:
                raise ValueError("credential id already exists")
            if record.id in self.attendance:
                raise ValueError("attendance record id already exists")
            self.credentials.insert(credential)
            self.attendance.insert(record)

    def load(
        self,
        *,
        users: Iterable[User] = (),
        credentials: Iterable[Credential] = (),
    ) -> None:
        """Bulk-load entities synchronously (startup seeding only)."""
        with self._lock:
            for user in users:
                self.users.insert(user)
            for credential in credentials:
                self.credentials.insert(credential)


def create_store(*, seed: bool = True) -> InMemoryStore:
    store = InMemoryStore()
    if seed:
        seed_demo_data(store)
    return store
