"""Demo identities and credentials loaded into a fresh store.

The two demo credentials carry real envelopes but placeholder signatures
("demo_signature", "demo_signature_2").  Verifying them fails with
"invalid signature", as it always has; clients that want a verifiable
demo credential should issue one.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import lru_cache
from typing import TYPE_CHECKING

from shiksha_wallet.models.credential import Credential, CredentialType
from shiksha_wallet.models.user import User
from shiksha_wallet.services.auth_service import hash_password
from shiksha_wallet.services.envelope import build_envelope

if TYPE_CHECKING:
    from shiksha_wallet.repos.store import Store

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
DEMO_STUDENT_USERNAME = "2024CSE001"
DEMO_STUDENT_PASSWORD = "student123"

_REGISTRAR_URI = "https://csvtu.ac.in/registrar"


@lru_cache(maxsize=None)
def _password_hash(plain: str) -> str:
    # One Argon2 hash per demo password per process.
    return hash_password(plain)


def seed_demo_data(store: Store) -> None:
    admin = User.new(
        username=ADMIN_USERNAME,
        password_hash=_password_hash(ADMIN_PASSWORD),
        name="System Administrator",
        institution="CSVTU",
        email="admin@csvtu.ac.in",
        is_admin=True,
    )
    student = User.new(
        username=DEMO_STUDENT_USERNAME,
        password_hash=_password_hash(DEMO_STUDENT_PASSWORD),
        name="Aksh Agrawal",
        student_id=DEMO_STUDENT_USERNAME,
        institution="Chhattisgarh Swami Vivekanand Technical University",
        course="BTech CSE (Data Science)",
        year="2",
        email="aksh@csvtu.ac.in",
        phone="+91-9876543210",
    )

    now = datetime.now(UTC).isoformat()
    student_id_card = Credential.new(
        student_id=student.username,
        type=CredentialType.STUDENT_ID,
        data=build_envelope(
            {
                "name": student.name,
                "studentId": student.student_id,
                "course": student.course,
                "year": student.year,
                "institution": student.institution,
                "validFrom": now,
                "issuer": "CSVTU",
            },
            _REGISTRAR_URI,
            CredentialType.STUDENT_ID.value,
        ),
        signature="demo_signature",
        issuer_id=admin.id,
    )
    attendance = Credential.new(
        student_id=student.username,
        type=CredentialType.ATTENDANCE,
        data=build_envelope(
            {
                "subject": "Data Structures & Algorithms",
                "date": now,
                "status": "Present",
                "location": "Room 301",
                "session": "Morning",
            },
            _REGISTRAR_URI,
            CredentialType.ATTENDANCE.value,
        ),
        signature="demo_signature_2",
        issuer_id=admin.id,
    )

    store.load(users=[admin, student], credentials=[student_id_card, attendance])
    logger.info("Seeded demo data  admin=%s student=%s", admin.username, student.username)
