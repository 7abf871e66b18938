from datetime import datetime, timezone

import jwt
import pytest

from models.user import Role
from utils.exceptions import ExpiredToken, InvalidToken
from utils.security import (
    REFRESH,
    hash_password,
    issue_access_token,
    issue_refresh_token,
    parse_and_validate,
    verify_password,
)

SECRET = "unit-test-secret-with-at-least-32-bytes"


def test_access_token_round_trips_identity():
    token = issue_access_token("user-1", Role.ADMIN, SECRET, 15)

    assert token.count(".") == 2
    claims = parse_and_validate(token, SECRET)
    assert claims.user_id == "user-1"
    assert claims.role is Role.ADMIN
    assert claims.token_type == "access"
    assert claims.expires_at > datetime.now(timezone.utc)


def test_access_token_claims_on_the_wire():
    token = issue_access_token("user-1", Role.USER, SECRET, 15)
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert payload["user_id"] == "user-1"
    assert payload["role"] == "user"
    assert payload["type"] == "access"
    assert payload["exp"] - payload["iat"] == 15 * 60
    assert jwt.get_unverified_header(token)["alg"] == "HS256"


def test_refresh_token_returns_expiry_matching_exp_claim():
    token, expires_at = issue_refresh_token("user-1", SECRET, 168)
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert payload["sub"] == "user-1"
    assert payload["exp"] == int(expires_at.timestamp())
    assert (expires_at - datetime.now(timezone.utc)).total_seconds() > 167 * 3600

    claims = parse_and_validate(token, SECRET, expected_type=REFRESH)
    assert claims.user_id == "user-1"
    assert claims.role is None


def test_refresh_tokens_issued_back_to_back_differ():
    first, _ = issue_refresh_token("user-1", SECRET, 1)
    second, _ = issue_refresh_token("user-1", SECRET, 1)
    assert first != second


def test_expired_token_is_rejected():
    token = issue_access_token("user-1", Role.USER, SECRET, -1)
    with pytest.raises(ExpiredToken):
        parse_and_validate(token, SECRET)


def test_expired_token_is_an_invalid_token():
    token = issue_access_token("user-1", Role.USER, SECRET, -1)
    with pytest.raises(InvalidToken):
        parse_and_validate(token, SECRET)


def test_wrong_secret_is_rejected():
    token = issue_access_token("user-1", Role.USER, SECRET, 15)
    with pytest.raises(InvalidToken):
        parse_and_validate(token, "another-secret-with-at-least-32-bytes!")


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidToken):
        parse_and_validate(token, SECRET)


def test_refresh_token_is_not_an_access_token():
    token, _ = issue_refresh_token("user-1", SECRET, 1)
    with pytest.raises(InvalidToken):
        parse_and_validate(token, SECRET)


def test_access_token_is_not_a_refresh_token():
    token = issue_access_token("user-1", Role.USER, SECRET, 15)
    with pytest.raises(InvalidToken):
        parse_and_validate(token, SECRET, expected_type=REFRESH)


def test_unknown_role_is_rejected():
    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode(
        {"user_id": "user-1", "role": "superuser", "type": "access", "iat": now, "exp": now + 60},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        parse_and_validate(token, SECRET)


def test_password_hash_is_salted_and_verifiable():
    first = hash_password("pw123")
    second = hash_password("pw123")

    assert first != second
    assert first.startswith("$argon2")
    assert verify_password("pw123", first)
    assert not verify_password("wrong", first)


def test_verify_password_rejects_non_argon2_hash():
    assert not verify_password("pw123", "plaintext")
