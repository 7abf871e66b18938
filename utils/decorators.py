from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Iterable, Mapping, Optional

from flask import current_app, g, request

from models.user import Role
from utils.exceptions import Forbidden, MalformedHeader, MissingHeader
from utils.security import ACCESS, DEFAULT_ALGORITHM, parse_and_validate


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: Role


def _bearer_token(headers: Mapping[str, str]) -> str:
    auth = headers.get("Authorization")
    if not auth:
        raise MissingHeader()
    parts = auth.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise MalformedHeader()
    return parts[1].strip()


def authenticate(
    headers: Mapping[str, str],
    required_roles: Optional[Iterable[Role]],
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> Identity:
    """
    Validate the bearer token in headers and enforce required_roles.

    An empty required_roles admits any authenticated role. Raises
    MissingHeader, MalformedHeader, InvalidToken/ExpiredToken or Forbidden.
    """
    token = _bearer_token(headers)
    claims = parse_and_validate(token, secret, expected_type=ACCESS, algorithms=(algorithm,))

    required = {Role(r) for r in (required_roles or ())}
    if required and claims.role not in required:
        raise Forbidden()
    return Identity(user_id=claims.user_id, role=claims.role)


def _authenticate_request(required_roles) -> Identity:
    identity = authenticate(
        request.headers,
        required_roles,
        current_app.config["JWT_SECRET"],
        current_app.config.get("JWT_ALGORITHM", DEFAULT_ALGORITHM),
    )
    g.identity = identity
    return identity


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            _authenticate_request(())
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(required_roles: list[Role]):
    """
    Allow access if the token's role is ANY of the required roles.
    Deny (403) otherwise.
    """
    req = [Role(r) for r in required_roles]

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            _authenticate_request(req)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
