from __future__ import annotations

from typing import Tuple

from flask import Blueprint, request, jsonify, abort
from sqlalchemy import func

from models import storage
from models.genre import Genre
from models.user import Role
from models.schemas.genre import (
    GenreCreateSchema,
    GenreUpdateSchema,
    GenreOutSchema,
)
from utils.decorators import roles_required

bp = Blueprint("genres", __name__)

create_schema = GenreCreateSchema()
update_schema = GenreUpdateSchema()
out_schema = GenreOutSchema()
out_list_schema = GenreOutSchema(many=True)

MAX_LIMIT = 100

READERS = [Role.ADMIN, Role.USER]
EDITORS = [Role.ADMIN]


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", "20"))
        page = max(page, 1)
        limit = max(1, min(limit, MAX_LIMIT))
        return page, limit
    except ValueError:
        abort(400, description="page and limit must be integers")


def parse_sort(default="name"):
    sort = request.args.get("sort", default)
    desc = sort.startswith("-")
    key = sort[1:] if desc else sort
    if key != "name":
        abort(400, description="Unsupported sort field. Allowed: name")
    return (Genre.name.desc() if desc else Genre.name.asc(),)


def exists_name_case_insensitive(session, name: str, exclude_id: str | None = None) -> bool:
    q = session.query(Genre).filter(func.lower(Genre.name) == name.lower())
    if exclude_id:
        q = q.filter(Genre.id != exclude_id)
    # only active genres reserve a name
    q = q.filter(Genre.deleted_at.is_(None))
    return session.query(q.exists()).scalar()


def get_active_or_404(session, genre_id: str) -> Genre:
    genre = session.get(Genre, genre_id)
    if not genre or genre.deleted_at is not None:
        abort(404)
    return genre


@bp.post("/genres")
@roles_required(EDITORS)
def create_genre():
    """
    Create a genre - admin
    ---
    tags: [Genres]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 64 }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      403: { description: Forbidden }
      409: { description: Name already exists }
    """
    session = storage.get_session()
    data = create_schema.load(request.get_json(silent=True) or {})
    name = data["name"].strip()
    if exists_name_case_insensitive(session, name):
        abort(409, description="Genre name already exists.")
    genre = Genre(name=name)
    storage.new(genre)
    storage.save()
    return jsonify({"data": out_schema.dump(genre)}), 201


@bp.get("/genres")
@roles_required(READERS)
def list_genres():
    """
    List genres (pagination, sorting, q search)
    ---
    tags: [Genres]
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
        default: name
        description: "Allowed: name or -name"
      - in: query
        name: q
        type: string
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    session = storage.get_session()
    page, limit = parse_pagination()
    order_by = parse_sort()
    q = request.args.get("q")

    query = session.query(Genre).filter(Genre.deleted_at.is_(None))
    if q:
        qnorm = f"%{q.strip().lower()}%"
        query = query.filter(func.lower(Genre.name).like(qnorm))

    total = query.count()
    rows = query.order_by(*order_by).offset((page - 1) * limit).limit(limit).all()
    return jsonify({"data": out_list_schema.dump(rows), "meta": {"page": page, "limit": limit, "total": total}})


@bp.get("/genres/<genre_id>")
@roles_required(READERS)
def get_genre(genre_id: str):
    """
    Get a genre by id
    ---
    tags: [Genres]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    genre = get_active_or_404(storage.get_session(), genre_id)
    return jsonify({"data": out_schema.dump(genre)})


@bp.patch("/genres/<genre_id>")
@roles_required(EDITORS)
def update_genre(genre_id: str):
    """
    Update a genre (partial) - admin
    ---
    tags: [Genres]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 64 }
    responses:
      200: { description: OK }
      404: { description: Not found }
      409: { description: Name already exists }
    """
    session = storage.get_session()
    genre = get_active_or_404(session, genre_id)
    data = update_schema.load(request.get_json(silent=True) or {})
    if "name" in data:
        name = data["name"].strip()
        if exists_name_case_insensitive(session, name, exclude_id=genre.id):
            abort(409, description="Genre name already exists.")
        genre.name = name
    storage.new(genre)
    storage.save()
    return jsonify({"data": out_schema.dump(genre)})


@bp.delete("/genres/<genre_id>")
@roles_required(EDITORS)
def delete_genre(genre_id: str):
    """
    Soft delete a genre (sets deleted_at) - admin
    ---
    tags: [Genres]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: genre_id
        type: string
        required: true
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    genre = get_active_or_404(storage.get_session(), genre_id)
    genre.delete()  # Soft delete via mixin
    return ("", 204)
