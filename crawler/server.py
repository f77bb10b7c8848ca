"""
project: Dungeon Crawler
module: server.py
License: MIT

Server bootstrap helpers: schema creation, logging setup and the dev server.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from crawler import app, db
from crawler.logging_utils import get_logger

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

log = get_logger("crawler.server")


def init_db():
    """Create all tables for the configured database."""
    with app.app_context():
        from crawler import models  # noqa: F401 - register tables on the metadata

        db.create_all()
    log.info(event="db_initialized", uri=app.config["SQLALCHEMY_DATABASE_URI"])


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Ensure tables exist, configure logging and run the Flask server."""
    init_db()
    _configure_logging()
    try:
        print(f"[INFO] Starting dungeon server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging():
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/app.log. Retains a few backups to avoid growth.
    Calling it again replaces the handlers instead of stacking duplicates.
    """
    log_dir = app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_LOG_FORMAT))

    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
