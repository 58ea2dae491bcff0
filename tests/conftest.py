from __future__ import annotations

import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Ensure settings are set before app import
_TMP_DIR = tempfile.mkdtemp(prefix="event_app_tests_")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR}/events.db")
os.environ.setdefault("ENV", "local")
os.environ.setdefault("DEV_ROUTES_ENABLED", "true")
os.environ.setdefault("METRICS_ENABLED", "false")

from event_app.main import app  # noqa: E402
from event_app.db import SessionLocal, engine  # noqa: E402
from event_app.models import Base  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    # Ensure a clean slate for each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()
