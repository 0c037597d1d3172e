"""
Database Tests for BlogQL MongoDB Operations.

Connection handling is tested against a mocked client; document
operations run against mongomock for isolated testing.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from blogql.database.mongodb import (
    MongoDB,
    as_utc,
    initialize_database,
    get_database,
    to_object_id,
    utcnow,
)
from blogql.database.schemas import (
    DEFAULT_USER_STATUS,
    POST_SCHEMA,
    USER_SCHEMA,
    create_post_validator,
    create_user_validator,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mock_client():
    """Create a mock MongoDB client."""
    client = MagicMock()
    client.admin.command.return_value = {"ok": 1}
    mock_db = MagicMock()
    mock_db.list_collection_names.return_value = []
    client.__getitem__ = MagicMock(return_value=mock_db)
    return client


@pytest.fixture
def user(db):
    """A stored user document."""
    return db.insert_user("ada@example.com", "Ada", "hashed")


def _insert_posts(db, user, count):
    posts = []
    for i in range(count):
        post = db.insert_post(f"Post {i + 1}", "Some content here", "", user["_id"])
        db.add_post_to_user(user["_id"], post["_id"])
        posts.append(post)
    return posts


# =============================================================================
# Helper Tests
# =============================================================================

class TestHelpers:
    """Test module-level helpers."""

    def test_utcnow_millisecond_precision(self):
        """Timestamps are truncated to BSON precision."""
        now = utcnow()
        assert now.tzinfo is not None
        assert now.microsecond % 1000 == 0

    def test_as_utc_naive(self):
        """Naive datetimes are read as UTC."""
        value = as_utc(datetime(2024, 1, 1, 12, 0))
        assert value.tzinfo == timezone.utc
        assert value.hour == 12

    def test_to_object_id(self):
        """Valid ids convert; malformed ones become None."""
        oid = ObjectId()
        assert to_object_id(oid) is oid
        assert to_object_id(str(oid)) == oid
        assert to_object_id("not-an-id") is None
        assert to_object_id(None) is None


# =============================================================================
# Connection Tests
# =============================================================================

class TestMongoDBConnection:
    """Test MongoDB connection handling."""

    def test_connect_success(self, mock_client):
        """Connect pings the server and prepares collections."""
        with patch('blogql.database.mongodb.MongoClient', return_value=mock_client) as client_cls:
            db = MongoDB("mongodb://localhost:27017", db_name="blogql_test")

        assert db.connected
        mock_client.admin.command.assert_called_with('ping')
        kwargs = client_cls.call_args.kwargs
        assert kwargs["tz_aware"] is True
        assert "tlsCAFile" not in kwargs

        created = {c.args[0] for c in db.db.create_collection.call_args_list}
        assert created == {"users", "posts"}

    def test_connect_srv_uses_ca_bundle(self, mock_client):
        """SRV URIs connect with the certifi CA bundle."""
        with patch('blogql.database.mongodb.MongoClient', return_value=mock_client) as client_cls:
            MongoDB("mongodb+srv://cluster.example.net")
        assert "tlsCAFile" in client_cls.call_args.kwargs

    def test_connect_failure(self, mock_client):
        """Unreachable server leaves the instance disconnected."""
        mock_client.admin.command.side_effect = ServerSelectionTimeoutError("timeout")
        with patch('blogql.database.mongodb.MongoClient', return_value=mock_client):
            db = MongoDB("mongodb://localhost:27017")
        assert not db.connected
        assert not db.ping()

    def test_existing_collections_not_recreated(self, mock_client):
        """Collections that exist are left alone."""
        mock_client.__getitem__.return_value.list_collection_names.return_value = ["users", "posts"]
        with patch('blogql.database.mongodb.MongoClient', return_value=mock_client):
            db = MongoDB("mongodb://localhost:27017")
        db.db.create_collection.assert_not_called()

    def test_disconnect(self, mock_client):
        """Disconnect closes the client."""
        with patch('blogql.database.mongodb.MongoClient', return_value=mock_client):
            db = MongoDB("mongodb://localhost:27017")
        db.disconnect()
        assert not db.connected
        mock_client.close.assert_called_once()

    def test_operations_require_connection(self):
        """Collections are unavailable before connecting."""
        db = MongoDB("mongodb://localhost:27017", auto_connect=False)
        with pytest.raises(RuntimeError, match="Not connected"):
            db.find_user_by_email("ada@example.com")

    def test_initialize_database_sets_global(self, mock_client):
        """initialize_database installs the global instance."""
        with patch('blogql.database.mongodb.MongoClient', return_value=mock_client):
            with patch('blogql.database.mongodb._db_instance', None):
                db = initialize_database("mongodb://localhost:27017", "blogql_test", use_transactions=True)
                assert get_database() is db
                assert db.use_transactions is True

    def test_transaction_disabled_yields_none(self, db):
        """Without transactions no session is opened."""
        with db.transaction() as session:
            assert session is None

    def test_transaction_enabled_yields_session(self, mock_client):
        """With transactions a session in an open transaction is yielded."""
        with patch('blogql.database.mongodb.MongoClient', return_value=mock_client):
            db = MongoDB("mongodb://localhost:27017", use_transactions=True)
        session = mock_client.start_session.return_value.__enter__.return_value

        with db.transaction() as yielded:
            assert yielded is session

        session.start_transaction.assert_called_once()


# =============================================================================
# Schema Tests
# =============================================================================

class TestSchemas:
    """Test collection validators."""

    def test_user_validator_fields(self):
        """User documents require credentials and a post list."""
        required = set(create_user_validator()["$jsonSchema"]["required"])
        assert {"email", "name", "password", "posts"} <= required
        assert required <= set(USER_SCHEMA)

    def test_post_validator_fields(self):
        """Post documents require content and a creator."""
        schema = create_post_validator()["$jsonSchema"]
        assert {"title", "content", "image_url", "creator"} <= set(schema["required"])
        assert set(schema["required"]) <= set(POST_SCHEMA)
        assert schema["properties"]["title"]["minLength"] == 4


# =============================================================================
# User Operation Tests
# =============================================================================

class TestUserOperations:
    """Test user operations."""

    def test_insert_user_defaults(self, user):
        """New users start with the default status and no posts."""
        assert isinstance(user["_id"], ObjectId)
        assert user["status"] == DEFAULT_USER_STATUS
        assert user["posts"] == []

    def test_find_user(self, db, user):
        """Users can be found by email or id."""
        assert db.find_user_by_email("ada@example.com")["_id"] == user["_id"]
        assert db.find_user_by_id(str(user["_id"]))["email"] == "ada@example.com"
        assert db.find_user_by_email("ADA@example.com") is None
        assert db.find_user_by_id("garbage") is None

    def test_duplicate_email(self, db, user):
        """The unique email index rejects duplicates."""
        with pytest.raises(DuplicateKeyError):
            db.insert_user("ada@example.com", "Other", "hashed")

    def test_update_user_status(self, db, user):
        """Status is overwritten and the updated document returned."""
        updated = db.update_user_status(user["_id"], "Busy")
        assert updated["status"] == "Busy"
        assert db.update_user_status(ObjectId(), "Busy") is None

    def test_add_and_remove_post(self, db, user):
        """Post references can be pushed and pulled."""
        post_id = ObjectId()
        assert db.add_post_to_user(user["_id"], post_id)
        assert db.find_user_by_id(user["_id"])["posts"] == [post_id]
        assert db.remove_post_from_user(user["_id"], post_id)
        assert db.find_user_by_id(user["_id"])["posts"] == []

    def test_reconcile_user_posts(self, db, user):
        """Reconcile rebuilds the post list from the posts collection."""
        posts = _insert_posts(db, user, 2)
        # Dangling reference and a missing one
        db.users.update_one(
            {"_id": user["_id"]},
            {"$set": {"posts": [posts[1]["_id"], ObjectId()]}},
        )

        result = db.reconcile_user_posts(user["_id"])

        expected = [posts[0]["_id"], posts[1]["_id"]]
        assert result == expected
        assert db.find_user_by_id(user["_id"])["posts"] == expected

    def test_reconcile_malformed_id(self, db):
        """Malformed ids reconcile to nothing."""
        assert db.reconcile_user_posts("garbage") == []


# =============================================================================
# Post Operation Tests
# =============================================================================

class TestPostOperations:
    """Test post operations."""

    def test_insert_post_timestamps(self, db, user):
        """Creation sets both timestamps to the same value."""
        post = db.insert_post("Title", "Some content here", "images/a.png", user["_id"])
        assert post["created_at"] == post["updated_at"]
        assert post["creator"] == user["_id"]

    def test_find_post_populate(self, db, user):
        """Populating replaces the creator id with the user document."""
        post = db.insert_post("Title", "Some content here", "", user["_id"])

        raw = db.find_post(post["_id"])
        assert raw["creator"] == user["_id"]

        populated = db.find_post(str(post["_id"]), populate=True)
        assert populated["creator"]["email"] == "ada@example.com"

    def test_find_post_missing(self, db):
        """Unknown and malformed ids match nothing."""
        assert db.find_post(ObjectId()) is None
        assert db.find_post("garbage") is None

    def test_populate_missing_creator(self, db):
        """A creator that no longer exists populates as None."""
        post = db.insert_post("Title", "Some content here", "", ObjectId())
        assert db.find_post(post["_id"], populate=True)["creator"] is None

    def test_find_posts_newest_first(self, db, user):
        """Posts are listed newest first with skip and limit."""
        posts = _insert_posts(db, user, 5)

        page = db.find_posts(skip=2, limit=2)

        assert [p["_id"] for p in page] == [posts[2]["_id"], posts[1]["_id"]]
        assert page[0]["creator"]["_id"] == user["_id"]
        assert db.count_posts() == 5

    def test_find_posts_same_timestamp_tie_break(self, db, user):
        """Posts with equal timestamps order by id, newest first."""
        fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        db.clock = lambda: fixed
        posts = _insert_posts(db, user, 3)

        listed = db.find_posts(populate=False)

        assert [p["_id"] for p in listed] == [p["_id"] for p in reversed(posts)]

    def test_find_posts_by_ids_preserves_order(self, db, user):
        """Posts come back in the order of the given ids."""
        posts = _insert_posts(db, user, 3)
        ids = [posts[2]["_id"], posts[0]["_id"], ObjectId()]

        found = db.find_posts_by_ids(ids)

        assert [p["_id"] for p in found] == [posts[2]["_id"], posts[0]["_id"]]
        assert db.find_posts_by_ids([]) == []

    def test_update_post_bumps_updated_at(self, db, user):
        """Updating sets fields and advances updated_at only."""
        post = db.insert_post("Title", "Some content here", "images/a.png", user["_id"])

        updated = db.update_post(post["_id"], {"title": "New title"})

        assert updated["title"] == "New title"
        assert updated["image_url"] == "images/a.png"
        assert as_utc(updated["created_at"]) == as_utc(post["created_at"])
        assert as_utc(updated["updated_at"]) > as_utc(post["updated_at"])
        assert updated["creator"]["_id"] == user["_id"]

    def test_update_post_monotonic(self, db, user):
        """updated_at never moves backwards when the clock does."""
        post = db.insert_post("Title", "Some content here", "", user["_id"])
        db.clock = lambda: as_utc(post["updated_at"]) - timedelta(hours=1)

        updated = db.update_post(post["_id"], {"title": "New title"}, populate=False)

        assert as_utc(updated["updated_at"]) == as_utc(post["updated_at"])

    def test_update_missing_post(self, db):
        """Updating an unknown post returns None."""
        assert db.update_post(ObjectId(), {"title": "x"}) is None
        assert db.update_post("garbage", {"title": "x"}) is None

    def test_delete_and_restore_post(self, db, user):
        """Deleted posts can be restored as-is."""
        post = db.insert_post("Title", "Some content here", "", user["_id"])

        assert db.delete_post(post["_id"])
        assert db.find_post(post["_id"]) is None
        assert not db.delete_post(post["_id"])

        db.restore_post(post)
        assert db.find_post(post["_id"])["title"] == "Title"
