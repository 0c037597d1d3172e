"""
Shared fixtures and configuration for BlogQL tests.
"""

import pytest
import mongomock
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from blogql.auth.context import CallerIdentity
from blogql.config.settings import Settings
from blogql.database.mongodb import MongoDB
from blogql.storage.images import ImageStore


TEST_JWT_SECRET = "test-jwt-secret-for-testing-purposes-only"


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def settings(tmp_path):
    """Test settings, installed as the global settings instance."""
    test_settings = Settings()
    test_settings.jwt_secret = TEST_JWT_SECRET
    test_settings.jwt_algorithm = "HS256"
    test_settings.bcrypt_rounds = 4
    test_settings.images_dir = str(tmp_path / "images")
    test_settings.use_transactions = False

    with patch("blogql.config.settings._settings", test_settings):
        yield test_settings


# =============================================================================
# Database Fixtures
# =============================================================================

class FakeClock:
    """Clock that advances one second on every reading."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    """Deterministic, strictly increasing timestamp source."""
    return FakeClock()


@pytest.fixture
def mongo_client():
    """In-memory MongoDB client."""
    return mongomock.MongoClient()


@pytest.fixture
def db(mongo_client, clock):
    """MongoDB wrapper backed by mongomock."""
    store = MongoDB("mongodb://localhost:27017", db_name="blogql_test", auto_connect=False, clock=clock)
    store.client = mongo_client
    store.db = mongo_client["blogql_test"]
    store.connected = True
    store._create_indexes()
    return store


@pytest.fixture
def images(settings):
    """Image store rooted in a temporary directory."""
    return ImageStore(settings.images_dir)


# =============================================================================
# Account Fixtures
# =============================================================================

@pytest.fixture
def anonymous():
    """Caller without a valid token."""
    return CallerIdentity.anonymous()


@pytest.fixture
def author(db, settings):
    """A registered account."""
    from blogql.resolvers.users import create_user
    return create_user(db, email="author@example.com", name="Author", password="secret1", settings=settings)


@pytest.fixture
def stranger(db, settings):
    """A second registered account."""
    from blogql.resolvers.users import create_user
    return create_user(db, email="stranger@example.com", name="Stranger", password="secret2", settings=settings)


@pytest.fixture
def author_caller(author):
    """Authenticated identity of the author."""
    return CallerIdentity(is_auth=True, user_id=author["id"], email=author["email"])


@pytest.fixture
def stranger_caller(stranger):
    """Authenticated identity of the second account."""
    return CallerIdentity(is_auth=True, user_id=stranger["id"], email=stranger["email"])


@pytest.fixture
def sample_post(db, author_caller):
    """A post created by the author."""
    from blogql.resolvers.posts import create_post
    return create_post(
        db,
        author_caller,
        title="First post",
        content="Hello from the very first post",
        image_url="images/first.png",
    )
