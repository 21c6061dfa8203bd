# fintrack/backend/categories.py
import logging
from typing import List

from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from .db import execute_db, get_db, query_db
from .errors import Conflict, DefaultCategoryProtected, Forbidden, NotFound
from .models import Category
from .schemas import CategoryCreate, parse

logger = logging.getLogger("fintrack-backend")

bp = Blueprint("categories", __name__, url_prefix="/api/categories")


# ---------------- Service ----------------
def list_categories(conn, user_id) -> List[Category]:
    """The user's own categories plus every default (ownerless) one."""
    rows = query_db(
        conn,
        "SELECT * FROM categories WHERE user_id IS NULL OR user_id=? ORDER BY type, name, id",
        (user_id,),
    )
    return [Category.from_row(r) for r in rows]


def get_category(conn, category_id) -> Category:
    row = query_db(conn, "SELECT * FROM categories WHERE id=?", (category_id,), one=True)
    if not row:
        raise NotFound("Category not found")
    return Category.from_row(row)


def create_category(conn, user_id, data: CategoryCreate) -> Category:
    exists = query_db(
        conn,
        "SELECT id FROM categories WHERE user_id=? AND name=? AND type=?",
        (user_id, data.name, data.type),
        one=True,
    )
    if exists:
        raise Conflict("Category already exists")

    category_id, _ = execute_db(
        conn,
        "INSERT INTO categories (name, type, user_id) VALUES (?, ?, ?)",
        (data.name, data.type, user_id),
    )
    logger.info(f"User {user_id} created category {category_id} ({data.name}/{data.type})")
    return get_category(conn, category_id)


def delete_category(conn, user_id, category_id) -> None:
    category = get_category(conn, category_id)
    if category.is_default:
        raise DefaultCategoryProtected()
    if category.user_id != user_id:
        logger.warning(f"User {user_id} tried to delete category {category_id} owned by {category.user_id}")
        raise Forbidden()

    execute_db(conn, "DELETE FROM categories WHERE id=? AND user_id=?", (category_id, user_id))
    logger.info(f"User {user_id} deleted category {category_id}")


# ---------------- Routes ----------------
@bp.route("", methods=["GET"])
@jwt_required()
def get_categories():
    return jsonify([c.to_dict() for c in list_categories(get_db(), current_user.id)])


@bp.route("", methods=["POST"])
@jwt_required()
def add_category():
    data = parse(CategoryCreate, request.get_json(silent=True))
    category = create_category(get_db(), current_user.id, data)
    return jsonify(category.to_dict()), 201


@bp.route("/<int:category_id>", methods=["DELETE"])
@jwt_required()
def remove_category(category_id):
    delete_category(get_db(), current_user.id, category_id)
    return jsonify({"message": "Category removed", "id": category_id})
