"""W3C Verifiable Credential envelope construction.

The envelope is the unsigned, self-describing form of a credential.
Its ``proof`` block is descriptive only: the cryptographic guarantee is
the detached signature token produced by CredentialSigner over the
whole envelope.  The two are always produced together by the issuance
service.

Wire shape (kept byte-compatible with existing wallets)::

    {
      "@context": ["https://www.w3.org/2018/credentials/v1"],
      "id": "urn:uuid:<uuid4>",
      "type": ["VerifiableCredential", "<type tag>"],
      "issuer": "<issuer URI>",
      "issuanceDate": "<ISO-8601>",
      "credentialSubject": {...},
      "proof": {
        "type": "JwtProof2020",
        "created": "<ISO-8601>",
        "proofPurpose": "assertionMethod",
        "verificationMethod": "<issuer URI>/keys/1"
      }
    }
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

VC_CONTEXT = ("https://www.w3.org/2018/credentials/v1",)
VC_BASE_TYPE = "VerifiableCredential"
PROOF_TYPE = "JwtProof2020"
PROOF_PURPOSE = "assertionMethod"


def isoformat_z(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def verification_method(issuer_uri: str) -> str:
    return f"{issuer_uri}/keys/1"


def build_envelope(
    subject_claims: dict[str, Any],
    issuer_uri: str,
    credential_type_tag: str,
) -> dict[str, Any]:
    """Wrap subject claims in a fresh credential envelope.

    Claims are embedded as given; their shape is the caller's business.
    Every call yields a new ``urn:uuid`` id, so equal inputs never give
    equal envelopes.
    """
    now = isoformat_z(datetime.now(UTC))
    return {
        "@context": list(VC_CONTEXT),
        "id": f"urn:uuid:{uuid.uuid4()}",
        "type": [VC_BASE_TYPE, credential_type_tag],
        "issuer": issuer_uri,
        "issuanceDate": now,
        "credentialSubject": subject_claims,
        "proof": {
            "type": PROOF_TYPE,
            "created": now,
            "proofPurpose": PROOF_PURPOSE,
            "verificationMethod": verification_method(issuer_uri),
        },
    }
