import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# In-memory database; must be set before the app module reads it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("CRAWLER_LOG_LEVEL", "info")

from crawler import create_app, db  # noqa: E402
from crawler.services import locks  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture(autouse=True)
def _fresh_schema(_push_app_context):
    """Every test starts from empty tables and no per-character locks."""
    db.session.remove()
    db.drop_all()
    db.create_all()
    locks.clear()
    yield
    db.session.remove()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()
