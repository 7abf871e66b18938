"""
Registration, login and access-token refresh.

Access tokens are stateless. Refresh tokens are also stored on the user row
and must match it to be accepted, so a new login revokes the previous
refresh token. Only one session per user is supported.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from models.user import Role, User
from models.user_repository import UserRepository
from utils.exceptions import (
    ExpiredRefreshToken,
    InvalidCredentials,
    InvalidRefreshToken,
    InvalidToken,
    UsernameTaken,
)
from utils.security import (
    DEFAULT_ALGORITHM,
    REFRESH,
    hash_password,
    issue_access_token,
    issue_refresh_token,
    parse_and_validate,
    verify_password,
)

logger = logging.getLogger(__name__)

_dummy_hash: str | None = None


def _burn_verification(password: str) -> None:
    """Run one argon2 verification so unknown usernames cost as much as known ones."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("not-a-real-password")
    verify_password(password, _dummy_hash)


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        secret: str,
        access_ttl_minutes: int = 15,
        refresh_ttl_hours: int = 168,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        if not secret:
            raise ValueError("a JWT secret is required")
        self.users = users
        self.secret = secret
        self.access_ttl_minutes = access_ttl_minutes
        self.refresh_ttl_hours = refresh_ttl_hours
        self.algorithm = algorithm

    def register(self, username: str, password: str, role: Role) -> User:
        if self.users.find_by_username(username) is not None:
            raise UsernameTaken()

        user = User(
            username=username,
            password_hash=hash_password(password),
            role=Role(role),
            refresh_token=None,
        )
        try:
            self.users.create(user)
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            raise UsernameTaken() from exc
        logger.info("registered user %s with role %s", user.id, user.role.value)
        return user

    def login(self, username: str, password: str) -> LoginResult:
        user = self.users.find_by_username(username)
        if user is None:
            _burn_verification(password)
            logger.info("login failed: unknown username")
            raise InvalidCredentials()
        if not verify_password(password, user.password_hash):
            logger.info("login failed for user %s: wrong password", user.id)
            raise InvalidCredentials()

        access_token = self._access_token_for(user)
        refresh_token, refresh_expires_at = issue_refresh_token(
            user.id, self.secret, self.refresh_ttl_hours, self.algorithm
        )

        # committed before returning so a racing refresh sees the new token
        user.refresh_token = refresh_token
        self.users.update(user)
        logger.info("user %s logged in", user.id)
        return LoginResult(access_token, refresh_token, refresh_expires_at)

    def refresh(self, refresh_token: str) -> str:
        user = self.users.find_by_refresh_token(refresh_token)
        if user is None:
            logger.warning("refresh rejected: token not on record")
            raise InvalidRefreshToken()

        try:
            parse_and_validate(
                refresh_token, self.secret, expected_type=REFRESH, algorithms=(self.algorithm,)
            )
        except InvalidToken as exc:
            logger.warning("refresh rejected for user %s: %s", user.id, exc.message)
            raise ExpiredRefreshToken() from exc

        return self._access_token_for(user)

    def _access_token_for(self, user: User) -> str:
        return issue_access_token(
            user.id, user.role, self.secret, self.access_ttl_minutes, self.algorithm
        )
