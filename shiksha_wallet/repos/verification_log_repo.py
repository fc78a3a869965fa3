from __future__ import annotations

from threading import Lock
from typing import Protocol

from shiksha_wallet.models.verification_log import VerificationLog


class VerificationLogRepo(Protocol):
    async def create(self, log: VerificationLog) -> VerificationLog: ...
    async def list_all(self) -> list[VerificationLog]: ...


class InMemoryVerificationLogRepo:
    """Append-only audit trail.  No update or delete."""

    def __init__(self, lock: Lock | None = None) -> None:
        self._entries: dict[str, VerificationLog] = {}
        self._lock = lock or Lock()

    async def create(self, log: VerificationLog) -> VerificationLog:
        with self._lock:
            if log.id in self._entries:
                raise ValueError("verification log id already exists")
            self._entries[log.id] = log
        return log

    async def list_all(self) -> list[VerificationLog]:
        return list(self._entries.values())
