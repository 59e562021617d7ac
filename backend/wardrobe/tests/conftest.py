"""
Pytest configuration and fixtures for testing.
"""
import fnmatch
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("MINIO_ACCESS_KEY", "test-access-key")
os.environ.setdefault("MINIO_SECRET_KEY", "test-secret-key")
os.environ.setdefault("STARTUP_TASKS_ENABLED", "false")

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wardrobe.core.database import Base, get_db
from wardrobe.core.exceptions import AnalysisError, StorageError
from wardrobe.main import app
from wardrobe.models import User, WardrobeItem  # noqa: F401  (registers tables)
from wardrobe.services.auth_service import hash_password
from wardrobe.services.rate_limiter import RateLimiter
from wardrobe.services.session_service import SessionStore, get_session_store
from wardrobe.services.storage_service import get_storage_service
from wardrobe.services.vision_service import get_vision_analyzer

# Use in-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ============================================================================
# In-memory collaborators
# ============================================================================

class FakeRedis:
    """Dict-backed stand-in for the subset of Redis the app uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    def get(self, key):
        return self.data.get(key)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def exists(self, key):
        return int(key in self.data)

    def expire(self, key, ttl):
        if key not in self.data:
            return False
        self.ttls[key] = ttl
        return True

    def incr(self, key):
        self.data[key] = int(self.data.get(key, 0)) + 1
        return self.data[key]

    def scan_iter(self, match="*"):
        return [key for key in list(self.data) if fnmatch.fnmatch(key, match)]

    def ping(self):
        return True


class InMemoryStorage:
    """Object store that records every call."""

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.timeouts = []
        self.uploaded = {}
        self.deleted = []
        self.fail_put = False
        self.fail_delete = False

    def put_object(self, object_name, data, content_type="image/jpeg", timeout=None):
        self.calls.append(("put_object", object_name))
        self.timeouts.append(("put_object", timeout))
        if self.fail_put:
            raise StorageError("Failed to upload photo to storage.")
        self.objects[object_name] = data
        self.uploaded[object_name] = (data, content_type)
        return object_name

    def delete_file(self, object_name, timeout=None):
        self.calls.append(("delete_file", object_name))
        self.timeouts.append(("delete_file", timeout))
        if self.fail_delete:
            raise StorageError("Failed to delete photo from storage: unavailable")
        self.objects.pop(object_name, None)
        self.deleted.append(object_name)

    def file_exists(self, object_name):
        return object_name in self.objects

    def health_check(self):
        return True


class FakeAnalyzer:
    """Analysis provider returning canned results."""

    def __init__(self):
        self.objects = []
        self.colors = []
        self.detect_error = None
        self.color_error = None
        self.calls = []
        self.color_payloads = []

    def detect_objects(self, content, timeout=None):
        self.calls.append(("detect_objects", timeout))
        if self.detect_error:
            raise self.detect_error
        return list(self.objects)

    def dominant_colors(self, content, timeout=None):
        self.calls.append(("dominant_colors", timeout))
        self.color_payloads.append(content)
        if self.color_error:
            raise self.color_error
        return list(self.colors)


def make_image(width, height, color=(122, 79, 48), fmt=".jpg"):
    """Encode a solid BGR image."""
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:] = color
    ok, buffer = cv2.imencode(fmt, pixels)
    assert ok
    return buffer.tobytes()


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def db_session():
    """Create a new database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def session_store(fake_redis):
    """Session store backed by the in-memory Redis."""
    return SessionStore(redis_client=fake_redis)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def rate_limiter():
    """Generous limiter so ordinary tests never hit the quota."""
    return RateLimiter(redis_client=FakeRedis(), max_requests=10000, window_seconds=900)


@pytest.fixture(scope="function")
def client(db_session, session_store, storage, analyzer, rate_limiter):
    """Create a test client with all external collaborators replaced."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_vision_analyzer] = lambda: analyzer

    previous_limiter = app.state.rate_limiter
    app.state.rate_limiter = rate_limiter

    with TestClient(app) as test_client:
        yield test_client

    app.state.rate_limiter = previous_limiter
    app.dependency_overrides.clear()


@pytest.fixture
def test_user_data():
    """Sample user data for testing."""
    return {
        "email": "test@example.com",
        "username": "testuser",
        "password": "TestPass123!",
    }


@pytest.fixture
def test_user(db_session, test_user_data):
    """Create a test user in the database."""
    user = User(
        email=test_user_data["email"],
        username=test_user_data["username"],
        password_hash=hash_password(test_user_data["password"]),
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    """A second account for isolation tests."""
    user = User(
        email="other@example.com",
        username="otheruser",
        password_hash=hash_password("OtherPass123!"),
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def inactive_user(db_session):
    """Create an inactive test user."""
    user = User(
        email="inactive@example.com",
        username="inactiveuser",
        password_hash=hash_password("TestPass123!"),
        is_active=False,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(session_store, test_user):
    """Bearer token headers for the test user."""
    token = session_store.create_session(test_user.id, {"username": test_user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(session_store, other_user):
    """Bearer token headers for the second user."""
    token = session_store.create_session(other_user.id, {"username": other_user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def jpeg_photo():
    """Small valid JPEG."""
    return make_image(400, 300)


@pytest.fixture
def analysis_error():
    return AnalysisError("Object detection failed: 503 Service Unavailable")
