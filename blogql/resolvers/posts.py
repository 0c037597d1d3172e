"""
Post resolvers: create, list, fetch, update, delete.

Creating and deleting a post each touch two documents: the post and its
creator's ``posts`` list. Both writes share ``MongoDB.transaction()``. When
no transaction is available, a failed second write is compensated by
undoing the first before the error propagates.
"""

import logging
from typing import Any, Dict, Optional

from pymongo.errors import PyMongoError

from blogql.auth.context import CallerIdentity
from blogql.database.mongodb import MongoDB
from blogql.errors import NotFoundError, UnauthenticatedError
from blogql.resolvers.common import raise_if_invalid, require_auth, require_owner
from blogql.resolvers.serializers import serialize_post
from blogql.storage.images import ImageStore
from blogql.validation import validate_post_input

logger = logging.getLogger(__name__)

POSTS_PER_PAGE = 2


def create_post(
    db: MongoDB,
    caller: CallerIdentity,
    title: str,
    content: str,
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a post owned by the caller.

    Raises:
        UnauthenticatedError: If the caller is anonymous or their account is gone
        InvalidInputError: If the title or content is invalid
    """
    caller = require_auth(caller)

    raise_if_invalid(validate_post_input(title, content))

    user = db.find_user_by_id(caller.user_id)
    if not user:
        raise UnauthenticatedError("User not found...")

    with db.transaction() as session:
        post = db.insert_post(
            title=title,
            content=content,
            image_url=image_url or "",
            creator_id=user["_id"],
            session=session,
        )
        try:
            db.add_post_to_user(user["_id"], post["_id"], session=session)
        except PyMongoError as e:
            if session is None:
                logger.warning(f"Linking post {post['_id']} to user {user['_id']} failed, removing post: {e}")
                db.delete_post(post["_id"])
            raise

    user.setdefault("posts", []).append(post["_id"])
    logger.info(f"User {user['_id']} created post {post['_id']}")
    return serialize_post(post, creator=user)


def get_posts(
    db: MongoDB,
    caller: CallerIdentity,
    page: Optional[int] = None,
) -> Dict[str, Any]:
    """
    List posts newest first, ``POSTS_PER_PAGE`` at a time.

    Returns:
        ``{"posts": [...], "total": <count of all posts>}``
    """
    require_auth(caller)

    if not page or page < 1:
        page = 1

    total = db.count_posts()
    posts = db.find_posts(
        skip=(page - 1) * POSTS_PER_PAGE,
        limit=POSTS_PER_PAGE,
        populate=True,
    )

    return {
        "posts": [serialize_post(p) for p in posts],
        "total": total,
    }


def get_single_post(db: MongoDB, caller: CallerIdentity, post_id: str) -> Dict[str, Any]:
    """Get one post with its creator."""
    require_auth(caller)

    post = db.find_post(post_id, populate=True)
    if not post:
        raise NotFoundError("Something went wrong while fetching the post...")

    return serialize_post(post)


def update_post(
    db: MongoDB,
    caller: CallerIdentity,
    post_id: str,
    title: str,
    content: str,
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Update a post owned by the caller.

    Title and content are always replaced. The image is replaced only when
    ``image_url`` is given; None keeps the current image.

    Raises:
        NotFoundError: If the post does not exist
        UnauthorizedError: If the caller did not create the post
        InvalidInputError: If the title or content is invalid
    """
    caller = require_auth(caller)

    post = db.find_post(post_id, populate=True)
    if not post:
        raise NotFoundError("Something went wrong while fetching the post...")

    require_owner(post, caller, "edit")

    raise_if_invalid(validate_post_input(title, content))

    fields = {"title": title, "content": content}
    if image_url is not None:
        fields["image_url"] = image_url

    updated = db.update_post(post["_id"], fields, populate=True)
    if not updated:
        raise NotFoundError("Something went wrong while fetching the post...")

    return serialize_post(updated)


def delete_post(
    db: MongoDB,
    caller: CallerIdentity,
    post_id: str,
    images: Optional[ImageStore] = None,
) -> bool:
    """
    Delete a post owned by the caller, its image, and its reference on the creator.

    Raises:
        NotFoundError: If the post does not exist
        UnauthorizedError: If the caller did not create the post
    """
    caller = require_auth(caller)

    post = db.find_post(post_id, populate=True)
    if not post:
        raise NotFoundError("Something went wrong while fetching the post...")

    require_owner(post, caller, "delete")

    if images is not None:
        images.clear_image(post.get("image_url"))

    creator_id = post["creator"]["_id"]

    with db.transaction() as session:
        db.delete_post(post["_id"], session=session)
        try:
            db.remove_post_from_user(creator_id, post["_id"], session=session)
        except PyMongoError as e:
            if session is None:
                logger.warning(f"Unlinking post {post['_id']} from user {creator_id} failed, restoring post: {e}")
                restored = dict(post)
                restored["creator"] = creator_id
                db.restore_post(restored)
            raise

    logger.info(f"User {creator_id} deleted post {post['_id']}")
    return True
