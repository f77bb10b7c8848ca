"""
project: Dungeon Crawler
module: __init__.py
License: MIT

Flask application and core extensions setup.

This module wires together the Flask app and SQLAlchemy, copies the dungeon
engine settings out of the environment into ``app.config`` and registers the
HTTP blueprints. A local ``instance/`` directory is used for SQLite and the
rotating log file.
"""

import logging
import os
import sqlite3
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
from werkzeug.exceptions import HTTPException

__version__ = "0.1.0"

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only deployments still work with an explicit DATABASE_URL
    pass

secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")

if not database_url:
    db_path = Path(app.instance_path) / "crawler.db"
    # Use POSIX path for SQLAlchemy URI compatibility across OS
    database_url = f"sqlite:///{db_path.as_posix()}"


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_flag(key: str, default: str = "0") -> bool:
    return os.getenv(key, default).lower() in ("1", "true", "yes", "on")


app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
    # Dungeon engine settings
    DUNGEON_WIDTH=_env_int("DUNGEON_WIDTH", 20),
    DUNGEON_HEIGHT=_env_int("DUNGEON_HEIGHT", 20),
    DUNGEON_MAX_SIZE=_env_int("DUNGEON_MAX_SIZE", 100),
    DUNGEON_GENERATION_RETRIES=_env_int("DUNGEON_GENERATION_RETRIES", 3),
    DUNGEON_ENABLE_GENERATION_METRICS=_env_flag("DUNGEON_ENABLE_GENERATION_METRICS", "1"),
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    engine_opts["connect_args"] = {
        "timeout": 10,  # busy timeout (seconds) for sqlite
        "check_same_thread": False,  # requests may be served from worker threads
    }
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: D401
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=10000")  # 10 seconds
    cursor.close()


# Register HTTP blueprints (import after app/db created)
from crawler.errors import CrawlerError  # noqa: E402
from crawler.logging_utils import get_logger  # noqa: E402
from crawler.routes.character_api import bp_character  # noqa: E402
from crawler.routes.dungeon_api import bp_dungeon  # noqa: E402
from crawler.routes.main import bp_main  # noqa: E402

app.register_blueprint(bp_main)
app.register_blueprint(bp_character)
app.register_blueprint(bp_dungeon)

_error_log = get_logger("crawler.errors")


def create_app():
    """Return the Flask app instance with all tables created."""
    with app.app_context():
        from crawler import models  # noqa: F401 - register tables on the metadata

        db.create_all()
    return app


@app.errorhandler(CrawlerError)
def handle_crawler_error(err: CrawlerError):
    """Render a typed engine failure as JSON.

    Rule and input failures carry their specific message; integrity and
    persistence failures are logged with full context and answered generically.
    """
    if err.user_visible:
        _error_log.info(event="request_rejected", code=err.code, path=request.path, reason=err.message, **err.context)
    else:
        _error_log.error(event="request_failed", code=err.code, path=request.path, reason=err.message, **err.context)
    return jsonify(err.to_dict()), err.status


@app.errorhandler(HTTPException)
def handle_http_error(err: HTTPException):
    if err.code == 404:
        message = f"Route {request.path} not found"
    else:
        message = err.description
    return jsonify({"error": err.name.lower().replace(" ", "_"), "message": message}), err.code


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal_error", "message": "Something went wrong.", "error_id": error_id}), 500
