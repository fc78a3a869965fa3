"""Demo: walk the credential lifecycle using FastAPI TestClient.

login → issue → verify → check in → revoke → verify again

Run with:
    python scripts/demo_credential_flow.py
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from shiksha_wallet.main import create_app
from shiksha_wallet.repos.seed import (
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    DEMO_STUDENT_PASSWORD,
    DEMO_STUDENT_USERNAME,
)


def _login(client: TestClient, username: str, password: str) -> dict[str, str]:
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    r.raise_for_status()
    return {"Authorization": f"Bearer {r.json()['token']}"}


def main() -> None:
    client = TestClient(create_app())

    # ── Step 1: log in as admin and student ──────────────────────────
    admin = _login(client, ADMIN_USERNAME, ADMIN_PASSWORD)
    student = _login(client, DEMO_STUDENT_USERNAME, DEMO_STUDENT_PASSWORD)
    print("1. POST /api/auth/login    → admin and student tokens")

    # ── Step 2: issue a transcript ───────────────────────────────────
    r = client.post(
        "/api/credentials/issue",
        json={
            "studentId": DEMO_STUDENT_USERNAME,
            "type": "transcript",
            "data": {"semester": "3", "cgpa": "8.7"},
        },
        headers=admin,
    )
    credential_id = r.json()["id"]
    print(f"2. POST /api/credentials/issue  → {r.status_code}  id={credential_id}")

    # ── Step 3: verify it (no auth needed) ───────────────────────────
    r = client.post("/api/credentials/verify", json={"credentialId": credential_id})
    print(f"3. POST /api/credentials/verify → {r.status_code}  {r.json()['message']}")

    # ── Step 4: check in to a session ────────────────────────────────
    r = client.post(
        "/api/attendance",
        json={"sessionId": "sess-1", "subject": "DSA", "location": "Room 301"},
        headers=student,
    )
    body = r.json()
    print(
        f"4. POST /api/attendance     → {r.status_code}  "
        f"record={body['record']['id'][:8]}…  credential={body['credential']['id'][:8]}…"
    )

    # ── Step 5: revoke the transcript ────────────────────────────────
    r = client.post(f"/api/credentials/{credential_id}/revoke", headers=admin)
    print(f"5. POST /api/credentials/{{id}}/revoke → {r.status_code}")

    # ── Step 6: verify again ─────────────────────────────────────────
    r = client.post("/api/credentials/verify", json={"credentialId": credential_id})
    print(f"6. POST /api/credentials/verify → {r.status_code}  {r.json()['message']}")

    # ── Step 7: audit log ────────────────────────────────────────────
    r = client.get("/api/admin/verifications", headers=admin)
    print(f"7. GET  /api/admin/verifications → {len(r.json())} entries")

    print("\nAll steps completed.")


if __name__ == "__main__":
    main()
