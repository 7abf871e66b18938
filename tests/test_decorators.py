import pytest

from models.user import Role
from utils.decorators import Identity, authenticate
from utils.exceptions import (
    ExpiredToken,
    Forbidden,
    InvalidToken,
    MalformedHeader,
    MissingHeader,
    MissingOrMalformedHeader,
)
from utils.security import issue_access_token, issue_refresh_token

SECRET = "unit-test-secret-with-at-least-32-bytes"


def headers_for(token, scheme="Bearer"):
    return {"Authorization": f"{scheme} {token}"}


@pytest.fixture
def user_token():
    return issue_access_token("user-1", Role.USER, SECRET, 15)


def test_valid_token_yields_identity(user_token):
    identity = authenticate(headers_for(user_token), set(), SECRET)
    assert identity == Identity(user_id="user-1", role=Role.USER)


@pytest.mark.parametrize("scheme", ["Bearer", "bearer", "BEARER", "bEaReR"])
def test_scheme_is_case_insensitive(user_token, scheme):
    assert authenticate(headers_for(user_token, scheme), None, SECRET).user_id == "user-1"


@pytest.mark.parametrize("headers", [{}, {"Authorization": ""}])
def test_missing_header(headers):
    with pytest.raises(MissingHeader) as excinfo:
        authenticate(headers, None, SECRET)
    assert excinfo.value.status == 401


@pytest.mark.parametrize(
    "value",
    ["Token abc", "Bearer", "Bearer ", "Basic dXNlcjpwdw==", "abc.def.ghi"],
)
def test_malformed_header(value):
    with pytest.raises(MalformedHeader) as excinfo:
        authenticate({"Authorization": value}, None, SECRET)
    assert isinstance(excinfo.value, MissingOrMalformedHeader)
    assert excinfo.value.status == 401


def test_garbage_token_is_invalid():
    with pytest.raises(InvalidToken) as excinfo:
        authenticate(headers_for("garbage"), None, SECRET)
    assert excinfo.value.status == 401


def test_expired_token_is_rejected_despite_valid_signature():
    token = issue_access_token("user-1", Role.ADMIN, SECRET, -5)
    with pytest.raises(ExpiredToken):
        authenticate(headers_for(token), {Role.ADMIN}, SECRET)


def test_token_signed_with_other_secret_is_rejected(user_token):
    with pytest.raises(InvalidToken):
        authenticate(headers_for(user_token), None, "another-secret-with-at-least-32-bytes!")


def test_refresh_token_cannot_be_used_as_bearer():
    token, _ = issue_refresh_token("user-1", SECRET, 1)
    with pytest.raises(InvalidToken):
        authenticate(headers_for(token), None, SECRET)


def test_role_outside_required_set_is_forbidden(user_token):
    with pytest.raises(Forbidden) as excinfo:
        authenticate(headers_for(user_token), {Role.ADMIN}, SECRET)
    assert excinfo.value.status == 403


def test_role_inside_required_set_is_allowed(user_token):
    identity = authenticate(headers_for(user_token), [Role.ADMIN, Role.USER], SECRET)
    assert identity.role is Role.USER


def test_required_roles_accept_plain_values(user_token):
    assert authenticate(headers_for(user_token), {"user"}, SECRET).role is Role.USER
