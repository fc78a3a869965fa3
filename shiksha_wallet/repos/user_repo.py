from __future__ import annotations

from threading import Lock
from typing import Protocol

from shiksha_wallet.models.user import User


class UserRepo(Protocol):
    async def get(self, user_id: str) -> User | None: ...
    async def get_by_username(self, username: str) -> User | None: ...
    async def create(self, user: User) -> User: ...


class InMemoryUserRepo:
    def __init__(self, lock: Lock | None = None) -> None:
        self._by_id: dict[str, User] = {}
        self._lock = lock or Lock()

    async def get(self, user_id: str) -> User | None:
        return self._by_id.get(user_id)

    async def get_by_username(self, username: str) -> User | None:
        # Linear scan is fine at institution scale.
        for user in list(self._by_id.values()):
            if user.username == username:
                return user
        return None

    async def create(self, user: User) -> User:
        # Username uniqueness belongs to the registration flow
        # (auth_service.register_user); only id collisions are guarded here.
        with self._lock:
            self.insert(user)
        return user

    def insert(self, user: User) -> None:
        # Caller holds the lock.
        if user.id in self._by_id:
            raise ValueError("user id already exists")
        self._by_id[user.id] = user
