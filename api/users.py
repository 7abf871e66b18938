from __future__ import annotations

from typing import Tuple

from flask import Blueprint, request, jsonify, g, abort

from models import storage
from models.user import Role, User
from models.user_repository import UserRepository
from models.schemas.user import UserOutSchema
from utils.decorators import jwt_required, roles_required

MAX_LIMIT = 100

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", "20"))
        page = max(page, 1)
        limit = max(1, min(limit, MAX_LIMIT))
        return page, limit
    except ValueError:
        abort(400, description="page and limit must be integers")


def parse_sort(default="username"):
    sort = request.args.get("sort", default)
    desc = sort.startswith("-")
    key = sort[1:] if desc else sort
    if key != "username":
        abort(400, description="Unsupported sort field. Allowed: username")
    return (User.username.desc() if desc else User.username.asc(),)


@bp.get("/users")
@roles_required([Role.ADMIN])
def list_users():
    """
    List all users - admin
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
      - in: query
        name: sort
        type: string
        default: username
        description: "Allowed: username or -username"
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      403: { description: Forbidden }
    """
    session = storage.get_session()
    page, limit = parse_pagination()
    order_by = parse_sort()

    query = session.query(User)
    total = query.count()
    rows = query.order_by(*order_by).offset((page - 1) * limit).limit(limit).all()
    return jsonify(
        {
            "data": user_list_out_schema.dump(rows),
            "meta": {"page": page, "limit": limit, "total": total}
        }
    )


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info. - any role
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = UserRepository(storage).find_by_id(g.identity.user_id)
    if not user:
        abort(404)
    return jsonify({"data": user_out_schema.dump(user)}), 200
