from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated identity extracted from a validated access token.

    Carried through the request via FastAPI's dependency system.

        user_id:  internal user id (JWT ``sub``)
        username: login name; for students this is also the subject
                  reference stored on their credentials
        roles:    ``admin`` or ``student``
    """

    user_id: str
    username: str
    roles: frozenset[str]

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def is_admin(self) -> bool:
        return "admin" in self.roles
