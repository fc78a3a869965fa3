from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class User:
    id: str
    username: str
    password_hash: str
    name: str
    created_at: datetime
    student_id: str | None = None
    institution: str | None = None
    course: str | None = None
    year: str | None = None
    email: str | None = None
    phone: str | None = None
    is_admin: bool = False

    @staticmethod
    def new(
        *,
        username: str,
        password_hash: str,
        name: str,
        student_id: str | None = None,
        institution: str | None = None,
        course: str | None = None,
        year: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        is_admin: bool = False,
    ) -> User:
        return User(
            id=str(uuid4()),
            username=username,
            password_hash=password_hash,
            name=name,
            created_at=datetime.now(UTC),
            student_id=student_id or None,
            institution=institution or None,
            course=course or None,
            year=year or None,
            email=email or None,
            phone=phone or None,
            is_admin=is_admin,
        )
