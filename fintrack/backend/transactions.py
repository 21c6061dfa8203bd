# fintrack/backend/transactions.py
import csv
import io
import logging
from datetime import datetime, timezone
from typing import Any, List

from flask import Blueprint, Response, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from .db import execute_db, get_db, query_db
from .errors import Forbidden, NotFound
from .models import Transaction
from .schemas import MonthQuery, TransactionCreate, TransactionFilters, parse
from .stats import load_user_transactions, month_bounds, monthly_summary, user_stats

logger = logging.getLogger("fintrack-backend")

bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")

CSV_HEADER = ["ID", "Date", "Type", "Category", "Amount", "Description"]


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# ---------------- Service ----------------
def list_transactions(conn, user_id, filters: TransactionFilters) -> List[Transaction]:
    """A user's transactions matching ``filters``, newest date first."""
    sql = "SELECT * FROM transactions WHERE user_id=?"
    args: List[Any] = [user_id]

    if filters.type:
        sql += " AND type=?"
        args.append(filters.type)
    if filters.category:
        # exact match, no normalization
        sql += " AND category=?"
        args.append(filters.category)
    if filters.has_month:
        start, end = month_bounds(filters.year, filters.month)
        sql += " AND date >= ? AND date < ?"
        args += [start, end]
    if filters.search:
        pattern = _like_pattern(filters.search)
        sql += " AND (description LIKE ? ESCAPE '\\' OR category LIKE ? ESCAPE '\\')"
        args += [pattern, pattern]

    sql += " ORDER BY date DESC, id DESC"
    return [Transaction.from_row(r) for r in query_db(conn, sql, args)]


def get_transaction(conn, tx_id) -> Transaction:
    row = query_db(conn, "SELECT * FROM transactions WHERE id=?", (tx_id,), one=True)
    if not row:
        raise NotFound("Transaction not found")
    return Transaction.from_row(row)


def create_transaction(conn, user_id, data: TransactionCreate) -> Transaction:
    when = data.date or datetime.now(timezone.utc).replace(tzinfo=None)
    tx_id, _ = execute_db(
        conn,
        "INSERT INTO transactions (user_id, type, category, amount, date, description) VALUES (?,?,?,?,?,?)",
        (user_id, data.type, data.category, data.amount,
         when.isoformat(timespec="seconds"), data.description),
    )
    logger.info(f"User {user_id} added {data.type} transaction {tx_id}")
    return get_transaction(conn, tx_id)


def delete_transaction(conn, user_id, tx_id) -> None:
    tx = get_transaction(conn, tx_id)
    if tx.user_id != user_id:
        logger.warning(f"User {user_id} tried to delete transaction {tx_id} owned by {tx.user_id}")
        raise Forbidden("User not authorized")

    # owner is repeated in the WHERE clause so the delete can never hit another user's row
    execute_db(conn, "DELETE FROM transactions WHERE id=? AND user_id=?", (tx_id, user_id))
    logger.info(f"User {user_id} deleted transaction {tx_id}")


def export_csv(transactions: List[Transaction]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)
    for t in transactions:
        writer.writerow([t.id, t.date, t.type, t.category, t.amount, t.description or ""])
    return output.getvalue()


# ---------------- Routes ----------------
@bp.route("", methods=["GET"])
@jwt_required()
def get_transactions():
    filters = parse(TransactionFilters, request.args.to_dict())
    txs = list_transactions(get_db(), current_user.id, filters)
    return jsonify([t.to_dict() for t in txs])


@bp.route("", methods=["POST"])
@jwt_required()
def add_transaction():
    data = parse(TransactionCreate, request.get_json(silent=True))
    tx = create_transaction(get_db(), current_user.id, data)
    return jsonify(tx.to_dict()), 201


@bp.route("/<int:tx_id>", methods=["DELETE"])
@jwt_required()
def remove_transaction(tx_id):
    delete_transaction(get_db(), current_user.id, tx_id)
    return jsonify({"message": "Transaction removed", "id": tx_id})


@bp.route("/stats", methods=["GET"])
@jwt_required()
def get_stats():
    query = parse(MonthQuery, request.args.to_dict())
    if query.has_month:
        snapshot = user_stats(get_db(), current_user.id, query.month, query.year)
    else:
        snapshot = user_stats(get_db(), current_user.id)
    return jsonify(snapshot.to_dict())


@bp.route("/stats/monthly", methods=["GET"])
@jwt_required()
def get_monthly_stats():
    return jsonify(monthly_summary(load_user_transactions(get_db(), current_user.id)))


@bp.route("/export", methods=["GET"])
@jwt_required()
def export_transactions():
    filters = parse(TransactionFilters, request.args.to_dict())
    txs = list_transactions(get_db(), current_user.id, filters)
    return Response(
        export_csv(txs),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=transactions.csv"},
    )
