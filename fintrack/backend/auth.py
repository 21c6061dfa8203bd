# fintrack/backend/auth.py
import logging
import sqlite3
from typing import Optional, Tuple

from flask import Blueprint, jsonify, request
from flask_jwt_extended import JWTManager, create_access_token, current_user, jwt_required
from werkzeug.security import check_password_hash, generate_password_hash

from .db import execute_db, get_db, query_db
from .errors import DuplicateEmail, InvalidCredentials
from .models import User
from .schemas import LoginRequest, RegisterRequest, parse

logger = logging.getLogger("fintrack-backend")

auth_bp = Blueprint("auth", __name__)
jwt = JWTManager()


# ---------------- Service ----------------
def get_user_by_id(conn, user_id) -> Optional[User]:
    row = query_db(conn, "SELECT * FROM users WHERE id=?", (user_id,), one=True)
    return User.from_row(row) if row else None


def get_user_by_email(conn, email) -> Optional[User]:
    row = query_db(conn, "SELECT * FROM users WHERE email=?", (email,), one=True)
    return User.from_row(row) if row else None


def register_user(conn, data: RegisterRequest) -> User:
    """Create a user; only the werkzeug hash of the password is stored."""
    if get_user_by_email(conn, data.email):
        raise DuplicateEmail()

    try:
        user_id, _ = execute_db(
            conn,
            "INSERT INTO users (name, email, password_hash) VALUES (?, ?, ?)",
            (data.name, data.email, generate_password_hash(data.password)),
        )
    except sqlite3.IntegrityError:
        # lost a race with a concurrent registration of the same email
        raise DuplicateEmail()

    logger.info(f"Registered user {user_id}")
    return get_user_by_id(conn, user_id)


def authenticate(conn, data: LoginRequest) -> Tuple[str, User]:
    """Check credentials and issue a signed access token for the user."""
    user = get_user_by_email(conn, data.email)
    if not user or not check_password_hash(user.password_hash, data.password):
        logger.warning("Failed login attempt")
        raise InvalidCredentials()

    token = create_access_token(identity=str(user.id))
    logger.info(f"User {user.id} logged in")
    return token, user


# ---------------- Token handling ----------------
def _unauthorized(message):
    return jsonify({"message": message}), 401


@jwt.user_lookup_loader
def _load_token_user(_jwt_header, jwt_data):
    try:
        user_id = int(jwt_data["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    return get_user_by_id(get_db(), user_id)


@jwt.user_lookup_error_loader
def _token_user_missing(_jwt_header, _jwt_data):
    return _unauthorized("Not authorized, user not found")


@jwt.unauthorized_loader
def _missing_token(reason):
    return _unauthorized("Not authorized, no token")


@jwt.invalid_token_loader
def _invalid_token(reason):
    return _unauthorized("Not authorized, token failed")


@jwt.expired_token_loader
def _expired_token(_jwt_header, _jwt_data):
    return _unauthorized("Not authorized, token expired")


# ---------------- Routes ----------------
@auth_bp.route("/register", methods=["POST"])
def register():
    data = parse(RegisterRequest, request.get_json(silent=True))
    user = register_user(get_db(), data)
    return jsonify(user.to_dict()), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = parse(LoginRequest, request.get_json(silent=True))
    token, user = authenticate(get_db(), data)
    payload = user.to_dict()
    payload["token"] = token
    return jsonify(payload)


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
def profile():
    return jsonify(current_user.to_dict())
