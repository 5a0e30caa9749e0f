from pathlib import Path
import os
import sys
import tempfile

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

_DB_DIR = tempfile.mkdtemp(prefix="student-records-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["AUTH_SECRET"] = "test-secret"
os.environ.setdefault("ENVIRONMENT", "test")

from fastapi.testclient import TestClient

from student_records.core.database import Base, SessionLocal, engine
from student_records.main import app
from student_records.models import entities  # noqa: F401
from student_records.seed import create_user
from student_records.services.auth import create_access_token

TEST_SECRET = "test-secret"
TEST_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def user(db):
    return create_user(db, "testuser", TEST_PASSWORD)


@pytest.fixture
def token(user):
    return create_access_token(user.id, user.username, secret=TEST_SECRET)


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
