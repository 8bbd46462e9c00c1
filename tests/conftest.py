# ruff: noqa: E402
import os
import tempfile
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from tests.testclient import TestClient

# Set testing environment flags before importing the app or settings
_TESTS_DIR = Path(__file__).resolve().parent
os.environ["APP_ENV"] = "test"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("UPLOADS_ROOT", tempfile.mkdtemp(prefix="review-uploads-"))
os.environ.setdefault("TEST_DATABASE_URL", f"sqlite:///{_TESTS_DIR / 'test.db'}")

from app.core.config import settings
from app.core.database import build_engine, get_db
from app.main import app
import app.models.registry as registry
from app.oauth2 import create_access_token

Base = registry.Base


class AttrDict(dict):
    """Dict with attribute-style access for fixtures."""

    def __getattr__(self, item: str) -> Any:
        try:
            return self[item]
        except KeyError as exc:
            raise AttributeError(item) from exc


test_db_url = settings.get_database_url(use_test=True)

# Safety: never run tests against a non-test Postgres database.
_parsed = make_url(test_db_url)
if _parsed.drivername.startswith("postgresql") and not (
    _parsed.database or ""
).endswith("_test"):
    raise RuntimeError(
        f"Refusing to run tests against non-test database '{_parsed.database}'. "
        "Set TEST_DATABASE_URL to a dedicated *_test database."
    )

engine = build_engine(test_db_url)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base.metadata.drop_all(bind=engine)
Base.metadata.create_all(bind=engine)


def _clear_tables():
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


# Autouse cleanup to keep DB isolated across all tests, including those that
# do not explicitly request the session fixture.
@pytest.fixture(autouse=True, scope="function")
def _clean_db_between_tests():
    _clear_tables()
    yield


@pytest.fixture(scope="function")
def session():
    """Fresh database session per test."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(session):
    def override_get_db():
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        try:
            yield test_client
        finally:
            app.dependency_overrides.clear()


def _register(client, username, email, password="password123"):
    res = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert res.status_code == 201
    return AttrDict(
        id=res.json()["user_id"], username=username, email=email, password=password
    )


@pytest.fixture(scope="function")
def test_user(client):
    return _register(client, "alice", "alice@example.com")


@pytest.fixture(scope="function")
def test_user2(client):
    return _register(client, "bob", "bob@example.com")


@pytest.fixture(scope="function")
def token(test_user):
    return create_access_token({"user_id": test_user["id"]})


@pytest.fixture(scope="function")
def token2(test_user2):
    return create_access_token({"user_id": test_user2["id"]})


@pytest.fixture(scope="function")
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def auth_headers2(token2):
    return {"Authorization": f"Bearer {token2}"}


@pytest.fixture(scope="function")
def authorized_client(client, token):
    return client.authenticate(token)


@pytest.fixture(scope="function")
def test_restaurant(session, test_user):
    restaurant = registry.Restaurant(
        name="Trattoria Fixture",
        description="Fixture restaurant",
        latitude=41.9028,
        longitude=12.4964,
        image_path="/uploads/fixture.jpg",
        creator_user_id=test_user["id"],
    )
    session.add(restaurant)
    session.commit()
    session.refresh(restaurant)
    return AttrDict(id=restaurant.id, name=restaurant.name)


@pytest.fixture(scope="function")
def test_review(session, test_restaurant, test_user2):
    review = registry.Review(
        content="Fixture review content",
        rating=4,
        restaurant_id=test_restaurant["id"],
        author_user_id=test_user2["id"],
    )
    session.add(review)
    session.commit()
    session.refresh(review)
    return AttrDict(id=review.id, content=review.content)


@pytest.fixture(scope="function")
def test_reviews(session, test_restaurant, test_user, test_user2):
    reviews = [
        registry.Review(
            content=content,
            rating=rating,
            restaurant_id=test_restaurant["id"],
            author_user_id=author,
        )
        for content, rating, author in [
            ("first review", 5, test_user["id"]),
            ("second review", 3, test_user2["id"]),
            ("third review", 1, test_user2["id"]),
        ]
    ]
    session.add_all(reviews)
    session.commit()
    return [AttrDict(id=r.id, content=r.content) for r in reviews]
