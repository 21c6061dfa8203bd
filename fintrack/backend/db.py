# fintrack/backend/db.py
import logging
import os
import sqlite3

import click
from flask import current_app, g

from .errors import StoreError

logger = logging.getLogger("fintrack-backend")

DEFAULT_CATEGORIES = [
    ("Salary", "income"),
    ("Freelance", "income"),
    ("Food", "expense"),
    ("Rent", "expense"),
    ("Transport", "expense"),
    ("Utilities", "expense"),
    ("Entertainment", "expense"),
    ("Other", "expense"),
]


def connect(db_path):
    """Open a connection with dict-like rows and foreign keys enabled."""
    # ensure directory exists
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db():
    db = getattr(g, '_database', None)
    if db is None:
        try:
            db = g._database = connect(current_app.config["DB_PATH"])
        except sqlite3.Error as e:
            logger.exception("Could not open database")
            raise StoreError(f"Could not open database: {e}") from e
    return db


def close_db(exception=None):
    db_conn = g.pop('_database', None)
    if db_conn is not None:
        try:
            db_conn.close()
        except sqlite3.Error:
            logger.exception("Error closing DB connection")


def query_db(conn, query, args=(), one=False):
    try:
        cur = conn.execute(query, args)
        rv = cur.fetchall()
        cur.close()
    except sqlite3.Error as e:
        logger.exception("DB query failed")
        raise StoreError(str(e)) from e
    return (rv[0] if rv else None) if one else rv


def execute_db(conn, query, args=()):
    """Run a single write statement, commit, and return (lastrowid, rowcount)."""
    try:
        cur = conn.cursor()
        cur.execute(query, args)
        conn.commit()
        last, count = cur.lastrowid, cur.rowcount
        cur.close()
    except sqlite3.IntegrityError:
        conn.rollback()
        raise
    except sqlite3.Error as e:
        conn.rollback()
        logger.exception("DB write failed")
        raise StoreError(str(e)) from e
    return last, count


def init_db(db_path, seed=True):
    """
    Initialize the SQLite database using init_db.sql located next to this module.
    Idempotent (uses IF NOT EXISTS in SQL) so it is safe to call at app startup.
    """
    sql_file = os.path.join(os.path.dirname(__file__), "init_db.sql")
    if not os.path.exists(sql_file):
        raise FileNotFoundError(f"init_db.sql not found at expected path: {sql_file}")

    conn = connect(db_path)
    try:
        with open(sql_file, 'r', encoding='utf-8') as f:
            conn.executescript(f.read())
        conn.commit()
        if seed:
            seed_default_categories(conn)
    finally:
        conn.close()


def seed_default_categories(conn):
    """Insert the shared ownerless categories that are not there yet."""
    added = 0
    for name, c_type in DEFAULT_CATEGORIES:
        exists = conn.execute(
            "SELECT 1 FROM categories WHERE name=? AND type=? AND user_id IS NULL",
            (name, c_type),
        ).fetchone()
        if not exists:
            conn.execute(
                "INSERT INTO categories (name, type, user_id) VALUES (?, ?, NULL)",
                (name, c_type),
            )
            added += 1
    conn.commit()
    if added:
        logger.info(f"Seeded {added} default categories")
    return added


@click.command("init-db")
@click.option("--no-seed", is_flag=True, help="Skip inserting the default categories.")
def init_db_command(no_seed):
    """Create the tables and seed default categories."""
    init_db(current_app.config["DB_PATH"], seed=not no_seed)
    click.echo(f"Initialized database at {current_app.config['DB_PATH']}")


def init_app(app):
    app.teardown_appcontext(close_db)
    app.cli.add_command(init_db_command)
