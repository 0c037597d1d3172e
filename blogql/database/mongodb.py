"""
MongoDB connection and operations for BlogQL.

Provides database connectivity, index management, and the user/post
operations used by the resolvers, including populating a post's creator
reference into the full user document.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional

import certifi
import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ReturnDocument
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import CollectionInvalid, ConnectionFailure, ServerSelectionTimeoutError

from blogql.database.schemas import (
    DEFAULT_USER_STATUS,
    create_post_validator,
    create_user_validator,
)

logger = logging.getLogger(__name__)

# Collection names
USERS_COLLECTION = "users"
POSTS_COLLECTION = "posts"


def utcnow() -> datetime:
    """Current UTC time truncated to BSON (millisecond) precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from MongoDB as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Coerce an identifier to ObjectId, or None if it is malformed."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def _session_kwargs(session: Optional[ClientSession]) -> Dict[str, Any]:
    return {"session": session} if session is not None else {}


class MongoDB:
    """
    MongoDB connection and operations for BlogQL.

    Handles connection, index creation, and CRUD operations
    for users and posts.
    """

    def __init__(
        self,
        connection_string: str,
        db_name: str = "blogql",
        auto_connect: bool = True,
        use_transactions: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize MongoDB connection.

        Args:
            connection_string: MongoDB connection URI
            db_name: Database name
            auto_connect: Whether to connect immediately
            use_transactions: Wrap multi-document writes in a transaction
                (requires a replica set or sharded cluster)
            clock: Source of store-assigned timestamps
        """
        self.connection_string = connection_string
        self.db_name = db_name
        self.use_transactions = use_transactions
        self.clock = clock
        self.client: Optional[MongoClient] = None
        self.db: Optional[Database] = None
        self.connected = False

        if auto_connect:
            self.connect()

    def connect(self) -> bool:
        """
        Establish connection to MongoDB.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            connect_kwargs = {
                "serverSelectionTimeoutMS": 5000,
                "tz_aware": True,
            }

            # SRV connections (e.g., MongoDB Atlas) are TLS-only
            if self.connection_string.startswith("mongodb+srv://"):
                connect_kwargs["tlsCAFile"] = certifi.where()

            self.client = MongoClient(self.connection_string, **connect_kwargs)

            # Test connection
            self.client.admin.command('ping')
            self.db = self.client[self.db_name]

            self._ensure_collections()
            self._create_indexes()

            self.connected = True
            logger.info(f"Connected to MongoDB: {self.db_name}")
            return True

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"MongoDB connection failed: {e}")
            self.connected = False
            return False

    def disconnect(self):
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.connected = False
            logger.info("Disconnected from MongoDB")

    def _ensure_collections(self):
        """Create collections with their JSON Schema validators."""
        existing = set(self.db.list_collection_names())
        validators = {
            USERS_COLLECTION: create_user_validator(),
            POSTS_COLLECTION: create_post_validator(),
        }
        for name, validator in validators.items():
            if name in existing:
                continue
            try:
                self.db.create_collection(name, validator=validator)
            except CollectionInvalid:
                # Created concurrently by another process
                pass

    def _create_indexes(self):
        """Create database indexes."""
        self.db[USERS_COLLECTION].create_index(
            [("email", pymongo.ASCENDING)], unique=True
        )
        self.db[POSTS_COLLECTION].create_index(
            [("created_at", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)]
        )
        self.db[POSTS_COLLECTION].create_index(
            [("creator", pymongo.ASCENDING)]
        )

    def _collection(self, name: str) -> Collection:
        if not self.connected or self.db is None:
            raise RuntimeError("Not connected to database")
        return self.db[name]

    @property
    def users(self) -> Collection:
        return self._collection(USERS_COLLECTION)

    @property
    def posts(self) -> Collection:
        return self._collection(POSTS_COLLECTION)

    @contextmanager
    def transaction(self) -> Iterator[Optional[ClientSession]]:
        """
        Scope for a multi-document write.

        Yields a session bound to an open transaction when transactions are
        enabled, otherwise None. Callers pass the yielded value as
        ``session`` to each write and compensate themselves when it is None.
        """
        if not self.use_transactions:
            yield None
            return

        with self.client.start_session() as session:
            with session.start_transaction():
                yield session

    def ping(self) -> bool:
        """Check the server is reachable."""
        if not self.connected or self.client is None:
            return False
        try:
            self.client.admin.command('ping')
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False

    # =========================================================================
    # User Operations
    # =========================================================================

    def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get user by email (exact, case-sensitive match)."""
        return self.users.find_one({"email": email})

    def find_user_by_id(self, user_id: Any) -> Optional[Dict[str, Any]]:
        """Get user by identifier; malformed identifiers match nothing."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.users.find_one({"_id": oid})

    def insert_user(self, email: str, name: str, password_hash: str) -> Dict[str, Any]:
        """
        Insert a new user with an empty post collection.

        Args:
            email: Unique email
            name: Display name
            password_hash: Hashed password

        Returns:
            Stored user document

        Raises:
            DuplicateKeyError: If the email is already taken
        """
        now = self.clock()
        doc = {
            "email": email,
            "name": name,
            "password": password_hash,
            "status": DEFAULT_USER_STATUS,
            "posts": [],
            "created_at": now,
            "updated_at": now,
        }
        result = self.users.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"Created user {result.inserted_id}")
        return doc

    def update_user_status(self, user_id: Any, status: str) -> Optional[Dict[str, Any]]:
        """Overwrite a user's status, returning the updated document."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.users.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status, "updated_at": self.clock()}},
            return_document=ReturnDocument.AFTER,
        )

    def add_post_to_user(
        self,
        user_id: Any,
        post_id: ObjectId,
        session: Optional[ClientSession] = None,
    ) -> bool:
        """Append a post reference to the user's post collection."""
        result = self.users.update_one(
            {"_id": to_object_id(user_id)},
            {"$push": {"posts": post_id}, "$set": {"updated_at": self.clock()}},
            **_session_kwargs(session),
        )
        return result.modified_count > 0

    def remove_post_from_user(
        self,
        user_id: Any,
        post_id: ObjectId,
        session: Optional[ClientSession] = None,
    ) -> bool:
        """Remove a post reference from the user's post collection."""
        result = self.users.update_one(
            {"_id": to_object_id(user_id)},
            {"$pull": {"posts": post_id}, "$set": {"updated_at": self.clock()}},
            **_session_kwargs(session),
        )
        return result.modified_count > 0

    def reconcile_user_posts(self, user_id: Any) -> List[ObjectId]:
        """
        Rebuild a user's post collection from the posts they created.

        Repairs references left dangling by an interrupted create/delete.

        Returns:
            The post ids now stored on the user, oldest first
        """
        oid = to_object_id(user_id)
        if oid is None:
            return []
        cursor = self.posts.find({"creator": oid}, {"_id": 1}).sort(
            [("created_at", pymongo.ASCENDING), ("_id", pymongo.ASCENDING)]
        )
        post_ids = [doc["_id"] for doc in cursor]
        self.users.update_one(
            {"_id": oid},
            {"$set": {"posts": post_ids, "updated_at": self.clock()}},
        )
        logger.info(f"Reconciled {len(post_ids)} posts for user {oid}")
        return post_ids

    # =========================================================================
    # Post Operations
    # =========================================================================

    def insert_post(
        self,
        title: str,
        content: str,
        image_url: str,
        creator_id: Any,
        session: Optional[ClientSession] = None,
    ) -> Dict[str, Any]:
        """Insert a new post; timestamps are store-assigned."""
        now = self.clock()
        doc = {
            "title": title,
            "content": content,
            "image_url": image_url,
            "creator": to_object_id(creator_id),
            "created_at": now,
            "updated_at": now,
        }
        result = self.posts.insert_one(doc, **_session_kwargs(session))
        doc["_id"] = result.inserted_id
        return doc

    def restore_post(self, doc: Dict[str, Any]) -> None:
        """Re-insert a previously deleted post document as-is."""
        self.posts.insert_one(dict(doc))

    def find_post(self, post_id: Any, populate: bool = False) -> Optional[Dict[str, Any]]:
        """
        Get post by identifier.

        Args:
            post_id: Post identifier; malformed identifiers match nothing
            populate: Replace the creator reference with the user document

        Returns:
            Post document or None
        """
        oid = to_object_id(post_id)
        if oid is None:
            return None
        post = self.posts.find_one({"_id": oid})
        if post is not None and populate:
            self._populate_creators([post])
        return post

    def count_posts(self) -> int:
        """Total number of posts."""
        return self.posts.count_documents({})

    def find_posts(
        self,
        skip: int = 0,
        limit: int = 0,
        populate: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Get posts newest first.

        Args:
            skip: Number of posts to skip
            limit: Maximum posts to return (0 for no limit)
            populate: Replace creator references with user documents

        Returns:
            List of post documents
        """
        cursor = self.posts.find({}).sort(
            [("created_at", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)]
        ).skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        posts = list(cursor)
        if populate:
            self._populate_creators(posts)
        return posts

    def find_posts_by_ids(self, post_ids: List[Any]) -> List[Dict[str, Any]]:
        """Get posts by identifier, preserving the given order."""
        oids = [oid for oid in (to_object_id(p) for p in post_ids) if oid is not None]
        if not oids:
            return []
        by_id = {doc["_id"]: doc for doc in self.posts.find({"_id": {"$in": oids}})}
        return [by_id[oid] for oid in oids if oid in by_id]

    def update_post(
        self,
        post_id: Any,
        fields: Dict[str, Any],
        populate: bool = True,
    ) -> Optional[Dict[str, Any]]:
        """
        Update post fields and bump ``updated_at``.

        Args:
            post_id: Post identifier
            fields: Fields to set (title, content, image_url)
            populate: Populate the creator on the returned document

        Returns:
            Updated post document or None if it no longer exists
        """
        oid = to_object_id(post_id)
        if oid is None:
            return None
        current = self.posts.find_one({"_id": oid}, {"updated_at": 1})
        if current is None:
            return None

        # Keep updated_at monotonic even if the clock stepped back
        updated_at = max(as_utc(self.clock()), as_utc(current["updated_at"]))
        update = dict(fields)
        update["updated_at"] = updated_at

        post = self.posts.find_one_and_update(
            {"_id": oid},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        if post is not None and populate:
            self._populate_creators([post])
        return post

    def delete_post(self, post_id: Any, session: Optional[ClientSession] = None) -> bool:
        """Delete post by identifier."""
        oid = to_object_id(post_id)
        if oid is None:
            return False
        result = self.posts.delete_one({"_id": oid}, **_session_kwargs(session))
        return result.deleted_count > 0

    def _populate_creators(self, posts: List[Dict[str, Any]]) -> None:
        """Replace each post's creator reference with the user document."""
        creator_ids = {p["creator"] for p in posts if isinstance(p.get("creator"), ObjectId)}
        if not creator_ids:
            return
        users = {
            u["_id"]: u
            for u in self.users.find({"_id": {"$in": list(creator_ids)}})
        }
        for post in posts:
            ref = post.get("creator")
            if isinstance(ref, ObjectId):
                post["creator"] = users.get(ref)
                if post["creator"] is None:
                    logger.warning(f"Post {post['_id']} references missing user {ref}")


# =============================================================================
# Global Database Instance
# =============================================================================

_db_instance: Optional[MongoDB] = None


def get_database() -> Optional[MongoDB]:
    """Get the global database instance."""
    return _db_instance


def initialize_database(
    connection_string: str,
    db_name: str = "blogql",
    use_transactions: bool = False,
) -> MongoDB:
    """
    Initialize the global database instance.

    Args:
        connection_string: MongoDB connection URI
        db_name: Database name
        use_transactions: Wrap multi-document writes in a transaction

    Returns:
        MongoDB instance
    """
    global _db_instance
    _db_instance = MongoDB(connection_string, db_name, use_transactions=use_transactions)
    return _db_instance
