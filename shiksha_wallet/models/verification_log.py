from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class VerificationLog:
    """Audit entry for one verification attempt (append-only)."""

    id: str
    credential_id: str
    verification_result: bool
    timestamp: datetime
    verifier_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def new(
        *,
        credential_id: str,
        verification_result: bool,
        verifier_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> VerificationLog:
        return VerificationLog(
            id=str(uuid4()),
            credential_id=credential_id,
            verification_result=verification_result,
            timestamp=datetime.now(UTC),
            verifier_id=verifier_id,
            details=dict(details or {}),
        )
