"""
Authentication and authorization errors.

Each error carries the HTTP status, a machine-readable code and a fixed
message; api/errors.py renders them into the uniform error envelope.
"""


class AuthError(Exception):
    status = 401
    code = "UNAUTHORIZED"
    message = "authentication failed"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UsernameTaken(AuthError):
    status = 409
    code = "CONFLICT"
    message = "username already taken"


class InvalidCredentials(AuthError):
    # unknown user and wrong password share this message
    message = "invalid username or password"


class InvalidToken(AuthError):
    code = "INVALID_TOKEN"
    message = "invalid or expired token"


class ExpiredToken(InvalidToken):
    code = "EXPIRED_TOKEN"
    message = "token expired"


class InvalidRefreshToken(AuthError):
    code = "INVALID_REFRESH_TOKEN"
    message = "invalid refresh token"


class ExpiredRefreshToken(AuthError):
    code = "EXPIRED_REFRESH_TOKEN"
    message = "expired refresh token"


class MissingOrMalformedHeader(AuthError):
    message = "missing or malformed Authorization header"


class MissingHeader(MissingOrMalformedHeader):
    message = "missing Authorization header"


class MalformedHeader(MissingOrMalformedHeader):
    message = "invalid Authorization header format"


class Forbidden(AuthError):
    status = 403
    code = "FORBIDDEN"
    message = "forbidden: insufficient permissions"


class HashingFailure(AuthError):
    status = 500
    code = "INTERNAL_ERROR"
    message = "password hashing failed"


class TokenIssuanceFailure(AuthError):
    status = 500
    code = "INTERNAL_ERROR"
    message = "token issuance failed"
