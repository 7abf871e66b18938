"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers

Access tokens carry {user_id, role}; refresh tokens carry {sub}. Both carry
type, jti, iat and exp and are signed with the same shared secret.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence, Tuple

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from models.user import Role
from utils.exceptions import ExpiredToken, HashingFailure, InvalidToken, TokenIssuanceFailure

ACCESS = "access"
REFRESH = "refresh"
DEFAULT_ALGORITHM = "HS256"

ph = PasswordHasher()


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    role: Optional[Role]
    token_type: str
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    try:
        return ph.hash(password)
    except HashingError as exc:
        raise HashingFailure() from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against an Argon2 hash
    """
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        # stored value is not a usable argon2 hash
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(payload: dict, secret: str, algorithm: str) -> str:
    try:
        return jwt.encode(payload, secret, algorithm=algorithm)
    except (jwt.PyJWTError, TypeError, ValueError, NotImplementedError) as exc:
        raise TokenIssuanceFailure() from exc


def issue_access_token(
    user_id: str,
    role: Role,
    secret: str,
    ttl_minutes: int,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Create a signed access token for user_id/role that expires ttl_minutes
    from now.
    """
    now = _now()
    payload = {
        "user_id": str(user_id),
        "role": Role(role).value,
        "type": ACCESS,
        "jti": generate_jti(),
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
    }
    return _encode(payload, secret, algorithm)


def issue_refresh_token(
    user_id: str,
    secret: str,
    ttl_hours: int,
    algorithm: str = DEFAULT_ALGORITHM,
) -> Tuple[str, datetime]:
    """
    Create a signed refresh token for user_id. Returns the token and its
    absolute expiry.
    """
    now = _now()
    expires_at = now + timedelta(hours=ttl_hours)
    payload = {
        "sub": str(user_id),
        "type": REFRESH,
        "jti": generate_jti(),
        "iat": now,
        "exp": expires_at,
    }
    return _encode(payload, secret, algorithm), expires_at


def parse_and_validate(
    token: str,
    secret: str,
    expected_type: str = ACCESS,
    algorithms: Sequence[str] = (DEFAULT_ALGORITHM,),
) -> TokenClaims:
    """
    Decode and validate a JWT. Raises ExpiredToken when exp has passed and
    InvalidToken on a bad signature, malformed token or wrong token type.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=list(algorithms),
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise ExpiredToken() from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidToken() from exc

    if decoded.get("type") != expected_type:
        raise InvalidToken("wrong token type")

    if expected_type == ACCESS:
        user_id = decoded.get("user_id")
        try:
            role = Role(decoded.get("role"))
        except ValueError as exc:
            raise InvalidToken() from exc
    else:
        user_id = decoded.get("sub")
        role = None
    if not user_id:
        raise InvalidToken()

    return TokenClaims(
        user_id=str(user_id),
        role=role,
        token_type=expected_type,
        expires_at=datetime.fromtimestamp(decoded["exp"], tz=timezone.utc),
    )
