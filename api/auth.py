"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs signed with HS256)
- Stores the current refresh token on the user row, so a new login revokes the previous one
"""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from models.schemas.user import RefreshSchema, UserLoginSchema, UserOutSchema, UserRegisterSchema
from services.auth_service import AuthService

bp = Blueprint("auth", __name__)

user_register_schema = UserRegisterSchema()
user_login_schema = UserLoginSchema()
refresh_schema = RefreshSchema()
user_out_schema = UserOutSchema()


def auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def _access_expires_in() -> int:
    return int(current_app.config["ACCESS_TOKEN_TTL_MIN"]) * 60


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [username, password, role]
          properties:
            username: { type: string }
            password: { type: string }
            role: { type: string, enum: [admin, user] }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Username already taken
    """
    data = user_register_schema.load(request.get_json(silent=True) or {})
    user = auth_service().register(data["username"], data["password"], data["role"])
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [username, password]
           properties:
             username: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens; expires_at is the refresh token expiry in unix seconds)
      400:
        description: Validation error
      401:
        description: Invalid username or password
    """
    data = user_login_schema.load(request.get_json(silent=True) or {})
    result = auth_service().login(data["username"], data["password"])
    return jsonify(
        {
            "access_token": result.access_token,
            "refresh_token": result.refresh_token,
            "token_type": "bearer",
            "expires_at": int(result.refresh_expires_at.timestamp()),
            "expires_in": _access_expires_in(),
        }
    ), 200


@bp.post("/refresh")
def refresh():
    """
    Use the refresh token to obtain a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refresh_token]
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns a new access token)
      400:
        description: Validation error
      401:
        description: Invalid or expired refresh token
    """
    data = refresh_schema.load(request.get_json(silent=True) or {})
    access_token = auth_service().refresh(data["refresh_token"])
    return jsonify(
        {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": _access_expires_in(),
        }
    ), 200
