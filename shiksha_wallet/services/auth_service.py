from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from shiksha_wallet.models.user import User
from shiksha_wallet.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)

_ph = PasswordHasher()


class UserValidationError(ValueError):
    pass


class UserAlreadyExistsError(Exception):
    pass


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise ValueError("password must be non-empty")
    return _ph.hash(plain_password)


# Argon2 signals a mismatch by raising; callers only want a bool.
def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return _ph.verify(password_hash, plain_password)
    except (VerifyMismatchError, VerificationError, InvalidHash):
        return False


async def authenticate_user(repo: UserRepo, username: str, password: str) -> User | None:
    user = await repo.get_by_username(username)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def register_user(
    repo: UserRepo,
    *,
    username: str,
    password: str,
    name: str,
    student_id: str | None = None,
    institution: str | None = None,
    course: str | None = None,
    year: str | None = None,
    email: str | None = None,
    phone: str | None = None,
) -> User:
    """Create a non-admin account.  Usernames are unique across all users."""
    username = username.strip()
    name = name.strip()
    if not username:
        raise UserValidationError("username must be non-empty")
    if not name:
        raise UserValidationError("name must be non-empty")
    if not password:
        raise UserValidationError("password must be non-empty")

    if await repo.get_by_username(username) is not None:
        logger.warning("Rejected duplicate username=%s", username)
        raise UserAlreadyExistsError(username)

    user = User.new(
        username=username,
        password_hash=hash_password(password),
        name=name,
        # A student's username doubles as their institutional id unless
        # they supply one.
        student_id=student_id or username,
        institution=institution,
        course=course,
        year=year,
        email=email,
        phone=phone,
        is_admin=False,
    )
    await repo.create(user)
    logger.info("User registered  user_id=%s username=%s", user.id, user.username)
    return user
