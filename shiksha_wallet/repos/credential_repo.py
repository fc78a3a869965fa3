from __future__ import annotations

from dataclasses import fields, replace
from threading import Lock
from typing import Any, Protocol

from shiksha_wallet.models.credential import Credential

# Fields a partial update may touch.  Identity and issuance facts are fixed.
_UPDATABLE = frozenset(f.name for f in fields(Credential)) - {"id", "issued_at"}


class CredentialRepo(Protocol):
    async def get(self, credential_id: str) -> Credential | None: ...
    async def list_by_student(self, student_id: str) -> list[Credential]: ...
    async def create(self, credential: Credential) -> Credential: ...
    async def update(self, credential_id: str, **changes: Any) -> Credential | None: ...


class InMemoryCredentialRepo:
    def __init__(self, lock: Lock | None = None) -> None:
        self._by_id: dict[str, Credential] = {}
        self._lock = lock or Lock()

    async def get(self, credential_id: str) -> Credential | None:
        return self._by_id.get(credential_id)

    async def list_by_student(self, student_id: str) -> list[Credential]:
        """Active credentials for a subject.  Order is not guaranteed."""
        return [
            c
            for c in list(self._by_id.values())
            if c.student_id == student_id and c.is_active
        ]

    async def create(self, credential: Credential) -> Credential:
        with self._lock:
            self.insert(credential)
        return credential

    async def update(self, credential_id: str, **changes: Any) -> Credential | None:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"cannot update credential fields: {sorted(unknown)}")

        # Read-modify-write under the lock so concurrent updates of the
        # same id cannot lose each other's changes.
        with self._lock:
            current = self._by_id.get(credential_id)
            if current is None:
                return None
            updated = replace(current, **changes)
            self._by_id[credential_id] = updated
        return updated

    def __contains__(self, credential_id: object) -> bool:
        return credential_id in self._by_id

    def insert(self, credential: Credential) -> None:
        """Add a new credential.  The caller must hold the shared lock."""
        if credential.id in self._by_id:
            raise ValueError("credential id already exists")
        self._by_id[credential.id] = credential
