import os

# db.py reads this at import time; tests always run on in-memory sqlite
os.environ["DATABASE_URL"] = "sqlite://"

from contextlib import contextmanager
from datetime import datetime

import pytest
from sqlalchemy.orm import sessionmaker

from db import Base, make_engine, get_db
import recommendation.models  # noqa: F401
import subscription.models  # noqa: F401


class FixedClock:
    """Callable clock the tests can move by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 15, 12, 0, 0))


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient
    from main import app

    @contextmanager
    def override_db():
        db = session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = lambda: override_db()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    from utils.auth_utils import create_token

    def make(user_id: str = "student-1", role: str = "student"):
        return {"Authorization": f"Bearer {create_token(user_id, role=role)}"}

    return make
